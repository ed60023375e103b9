"""Hero section: scalar fields plus up to six headline stats."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from portfolio_cms.domain.document import DocumentController
from portfolio_cms.domain.draft import OrderedDraft
from portfolio_cms.domain.errors import PortfolioError
from portfolio_cms.domain.model import HeroStat, new_client_id
from portfolio_cms.domain.preview import STATS
from portfolio_cms.domain.validation import FieldChecks, blank_to_none

if TYPE_CHECKING:
    from portfolio_cms.domain.model import Direction, EntityKey, Hero
    from portfolio_cms.domain.ports import DocumentStore, Notifier
    from portfolio_cms.domain.preview import SortedView

MAX_HERO_STATS = 6


@dataclass(frozen=True, kw_only=True)
class HeroDraft:
    initials: str
    full_name: str
    title: str
    location: str
    profile_image: str | None = None
    gradient_from: str = "#6366f1"
    gradient_to: str = "#ec4899"
    stats: tuple[HeroStat, ...] = field(default_factory=tuple)

    @classmethod
    def from_entity(cls, hero: Hero) -> HeroDraft:
        return cls(
            initials=hero.initials,
            full_name=hero.full_name,
            title=hero.title,
            location=hero.location,
            profile_image=hero.profile_image,
            gradient_from=hero.gradient_from,
            gradient_to=hero.gradient_to,
            stats=hero.stats,
        )

    def normalized(self) -> HeroDraft:
        return replace(
            self,
            initials=self.initials.strip(),
            full_name=self.full_name.strip(),
            title=self.title.strip(),
            location=self.location.strip(),
            profile_image=blank_to_none(self.profile_image),
            stats=tuple(
                replace(stat, label=stat.label.strip(), value=stat.value.strip())
                for stat in self.stats
            ),
        )


def new_stat(order: int) -> HeroStat:
    return HeroStat(id=new_client_id(), order=order)


def check_hero(draft: HeroDraft) -> None:
    checks = FieldChecks()
    checks.length("initials", draft.initials, label="Initials", min_length=1, max_length=5)
    checks.length("full_name", draft.full_name, label="Full name", min_length=2, max_length=100)
    checks.length("title", draft.title, label="Title", min_length=2, max_length=100)
    checks.length("location", draft.location, label="Location", min_length=2, max_length=150)
    checks.url("profile_image", draft.profile_image, label="Profile image")
    checks.hex_color("gradient_from", draft.gradient_from, label="Gradient start")
    checks.hex_color("gradient_to", draft.gradient_to, label="Gradient end")
    if len(draft.stats) > MAX_HERO_STATS:
        checks.add("stats", f"At most {MAX_HERO_STATS} stats are allowed")
    for position, stat in enumerate(draft.stats, start=1):
        checks.required(f"stat_{position}_value", stat.value, label=f"Stat {position} value")
        checks.required(f"stat_{position}_label", stat.label, label=f"Stat {position} label")
    checks.raise_if_any()


class HeroEditor:
    def __init__(self, *, store: DocumentStore[Hero, HeroDraft], notifier: Notifier) -> None:
        self.document: DocumentController[Hero, HeroDraft] = DocumentController(
            store=store, notifier=notifier, section="hero section"
        )
        self.stats: OrderedDraft[HeroStat] = OrderedDraft(
            factory=new_stat, max_items=MAX_HERO_STATS
        )
        self._fields: HeroDraft | None = None

    @property
    def fields(self) -> HeroDraft | None:
        """Scalar fields being edited; ``stats`` here is ignored in favour of the draft list."""
        return self._fields

    @property
    def is_saving(self) -> bool:
        return self.document.is_saving

    async def load(self) -> Hero | None:
        hero = await self.document.load()
        if hero is not None and not self.document.disposed:
            self._reset(hero)
        return hero

    def edit(self, **changes: object) -> HeroDraft:
        if self._fields is None:
            raise PortfolioError("Hero section has not been loaded")
        if "stats" in changes:
            raise ValueError("Edit stats through the stats draft")
        self._fields = replace(self._fields, **changes)  # type: ignore[arg-type]
        return self._fields

    def add_stat(self) -> HeroStat | None:
        """Append a blank stat; no-op once six exist."""
        return self.stats.add()

    def edit_stat(
        self,
        key: EntityKey,
        *,
        label: str | None = None,
        value: str | None = None,
    ) -> HeroStat:
        changes: dict[str, object] = {}
        if label is not None:
            changes["label"] = label
        if value is not None:
            changes["value"] = value
        return self.stats.edit(key, **changes)

    def remove_stat(self, key: EntityKey) -> bool:
        return self.stats.remove(key)

    def move_stat(self, index: int, direction: Direction) -> bool:
        return self.stats.move(index, direction)

    def draft(self) -> HeroDraft:
        if self._fields is None:
            raise PortfolioError("Hero section has not been loaded")
        return replace(self._fields, stats=self.stats.items).normalized()

    async def save(self) -> Hero | None:
        """Validate fields and every stat, then PUT the whole section."""
        draft = self.draft()
        check_hero(draft)
        hero = await self.document.save(draft)
        if hero is not None and not self.document.disposed:
            self._reset(hero)
        return hero

    def preview_stats(self) -> SortedView[HeroStat]:
        return STATS.project(self.stats.items)

    def dispose(self) -> None:
        self.document.dispose()

    def _reset(self, hero: Hero) -> None:
        self._fields = HeroDraft.from_entity(hero)
        self.stats.reset(hero.stats)
