"""Read-only projections of content collections for preview and public rendering.

Projection is a pure function of its input: nothing here mutates entities or
the collections they came from, so it is safe to re-run on every change.
Entries that are only partly filled in are still emitted; ``incomplete`` lets
the renderer decide how to flag them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from portfolio_cms.domain.model.base import OrderedEntity

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator

    from portfolio_cms.domain.model import (
        AboutParagraph,
        Experience,
        HeroStat,
        Project,
        Skill,
        SkillCategory,
    )

DEFAULT_EMPTY_MESSAGE = "Nothing to show yet."


class Observable[T](Protocol):
    @property
    def items(self) -> tuple[T, ...]: ...

    def subscribe(self, listener: Callable[[tuple[T, ...]], None]) -> Callable[[], None]: ...


@dataclass(frozen=True, slots=True)
class PreviewEntry[T]:
    entity: T
    position: int
    incomplete: bool = False


@dataclass(frozen=True, slots=True)
class SortedView[T]:
    entries: tuple[PreviewEntry[T], ...]
    empty_message: str = DEFAULT_EMPTY_MESSAGE

    @property
    def is_empty(self) -> bool:
        return not self.entries

    @property
    def entities(self) -> tuple[T, ...]:
        return tuple(entry.entity for entry in self.entries)

    def __iter__(self) -> Iterator[PreviewEntry[T]]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)


def by_order(entity: OrderedEntity) -> tuple[int, ...]:
    return (entity.order,)


def featured_first(project: Project) -> tuple[int, ...]:
    """Featured projects precede the rest regardless of numeric order."""
    return (0 if project.featured else 1, project.order)


def is_incomplete(entity: object) -> bool:
    return bool(getattr(entity, "is_incomplete", False))


class PreviewProjector[T: OrderedEntity]:
    def __init__(
        self,
        *,
        sort_key: Callable[[T], tuple[int, ...]] = by_order,
        include: Callable[[T], bool] | None = None,
        empty_message: str = DEFAULT_EMPTY_MESSAGE,
    ) -> None:
        self._sort_key = sort_key
        self._include = include
        self._empty_message = empty_message

    def project(self, collection: Iterable[T]) -> SortedView[T]:
        selected = [
            entity for entity in collection if self._include is None or self._include(entity)
        ]
        ordered = sorted(selected, key=self._sort_key)
        return SortedView(
            entries=tuple(
                PreviewEntry(entity=entity, position=position, incomplete=is_incomplete(entity))
                for position, entity in enumerate(ordered)
            ),
            empty_message=self._empty_message,
        )

    def bind(
        self,
        source: Observable[T],
        render: Callable[[SortedView[T]], None],
    ) -> Callable[[], None]:
        """Render now and after every change of ``source``; returns an unsubscribe hook."""
        render(self.project(source.items))
        return source.subscribe(lambda items: render(self.project(items)))


def is_visible(entity: Project | Experience) -> bool:
    return entity.is_visible


PARAGRAPHS: PreviewProjector[AboutParagraph] = PreviewProjector(empty_message="No paragraphs yet.")
STATS: PreviewProjector[HeroStat] = PreviewProjector(empty_message="No stats yet.")
PROJECTS: PreviewProjector[Project] = PreviewProjector(
    sort_key=featured_first, empty_message="No projects yet."
)
EXPERIENCE: PreviewProjector[Experience] = PreviewProjector(empty_message="No experience yet.")
CATEGORIES: PreviewProjector[SkillCategory] = PreviewProjector(empty_message="No skills yet.")
SKILLS: PreviewProjector[Skill] = PreviewProjector(empty_message="No skills in this category.")


@dataclass(frozen=True, slots=True)
class AboutPreview:
    """About paragraphs alongside the hero stats shown next to them."""

    paragraphs: SortedView[AboutParagraph]
    stats: SortedView[HeroStat]


def project_about(
    paragraphs: Iterable[AboutParagraph],
    stats: Iterable[HeroStat],
) -> AboutPreview:
    return AboutPreview(paragraphs=PARAGRAPHS.project(paragraphs), stats=STATS.project(stats))


@dataclass(frozen=True, slots=True)
class SkillGroup:
    category: SkillCategory
    skills: SortedView[Skill]


def project_skills(
    categories: Iterable[SkillCategory],
    skills: Iterable[Skill],
) -> tuple[SkillGroup, ...]:
    """Nest skills under their categories, both levels sorted by order."""
    skills_by_category: dict[str, list[Skill]] = {}
    for skill in skills:
        skills_by_category.setdefault(skill.category_id, []).append(skill)
    return tuple(
        SkillGroup(
            category=entry.entity,
            skills=SKILLS.project(skills_by_category.get(entry.entity.id, ())),
        )
        for entry in CATEGORIES.project(categories)
    )
