"""Skill categories and the skills nested under them.

Both levels are flat collections with their own controllers. Skills are
scoped by ``category_id``, so reordering one category never touches the
order of another.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from logging import getLogger
from operator import attrgetter
from typing import TYPE_CHECKING

from portfolio_cms.domain.collection import OrderedCollectionController, ResourceLabels
from portfolio_cms.domain.preview import project_skills
from portfolio_cms.domain.validation import FieldChecks

if TYPE_CHECKING:
    from collections.abc import Sequence

    from portfolio_cms.domain.model import Direction, EntityKey, Skill, SkillCategory
    from portfolio_cms.domain.ports import CollectionStore, ConfirmAction, Notifier
    from portfolio_cms.domain.preview import SkillGroup
    from portfolio_cms.domain.reconciliation import ReconciliationPolicy

log = getLogger(__name__)

CATEGORY_LABELS = ResourceLabels("category", "categories")
SKILL_LABELS = ResourceLabels("skill", "skills")
NAME_MAX_LENGTH = 100


@dataclass(frozen=True, kw_only=True)
class CategoryDraft:
    name: str


@dataclass(frozen=True, kw_only=True)
class SkillDraft:
    name: str
    category_id: EntityKey


def _checked_name(name: str, *, label: str) -> str:
    checks = FieldChecks()
    checks.length("name", name, label=label, min_length=1, max_length=NAME_MAX_LENGTH)
    checks.raise_if_any()
    return name.strip()


class SkillsBinding:
    def __init__(
        self,
        *,
        category_store: CollectionStore[SkillCategory, CategoryDraft],
        skill_store: CollectionStore[Skill, SkillDraft],
        notifier: Notifier,
        confirm: ConfirmAction,
        policy: ReconciliationPolicy | None = None,
    ) -> None:
        self.categories: OrderedCollectionController[SkillCategory, CategoryDraft] = (
            OrderedCollectionController(
                store=category_store,
                notifier=notifier,
                confirm=confirm,
                labels=CATEGORY_LABELS,
                policy=policy,
            )
        )
        self.skills: OrderedCollectionController[Skill, SkillDraft] = OrderedCollectionController(
            store=skill_store,
            notifier=notifier,
            confirm=confirm,
            labels=SKILL_LABELS,
            policy=policy,
            scope_of=attrgetter("category_id"),
        )

    async def load(self) -> None:
        """Load both levels; the first failure is raised once both have settled."""
        results = await asyncio.gather(
            self.categories.load(), self.skills.load(), return_exceptions=True
        )
        for result in results:
            if isinstance(result, BaseException):
                raise result

    def skills_of(self, category_id: EntityKey) -> list[Skill]:
        return self.skills.in_scope(category_id)

    # categories

    async def create_category(self, name: str) -> SkillCategory | None:
        return await self.categories.create(CategoryDraft(name=_checked_name(name, label="Name")))

    async def rename_category(self, key: EntityKey, name: str) -> SkillCategory | None:
        return await self.categories.update(
            key, CategoryDraft(name=_checked_name(name, label="Name"))
        )

    async def delete_category(self, key: EntityKey) -> bool:
        """Delete a category and drop its skills locally, as the server cascades."""
        deleted = await self.categories.delete(key)
        if deleted:
            dropped = self.skills.forget_where(lambda skill: skill.category_id == key)
            log.debug("Dropped %d skills of deleted category %s", dropped, key)
        return deleted

    async def reorder_categories(self, ordered_ids: Sequence[EntityKey]) -> None:
        await self.categories.reorder(ordered_ids)

    async def shift_category(self, index: int, direction: Direction) -> bool:
        return await self.categories.shift(index, direction)

    # skills

    async def create_skill(self, category_id: EntityKey, name: str) -> Skill | None:
        self.categories.get(category_id)
        draft = SkillDraft(name=_checked_name(name, label="Skill name"), category_id=category_id)
        return await self.skills.create(draft)

    async def rename_skill(self, key: EntityKey, name: str) -> Skill | None:
        skill = self.skills.get(key)
        draft = SkillDraft(
            name=_checked_name(name, label="Skill name"), category_id=skill.category_id
        )
        return await self.skills.update(key, draft)

    async def delete_skill(self, key: EntityKey) -> bool:
        return await self.skills.delete(key)

    async def reorder_skills(
        self,
        category_id: EntityKey,
        ordered_ids: Sequence[EntityKey],
    ) -> None:
        await self.skills.reorder(ordered_ids, scope=category_id)

    async def shift_skill(self, category_id: EntityKey, index: int, direction: Direction) -> bool:
        return await self.skills.shift(index, direction, scope=category_id)

    def preview(self) -> tuple[SkillGroup, ...]:
        return project_skills(self.categories.items, self.skills.items)

    def dispose(self) -> None:
        self.categories.dispose()
        self.skills.dispose()
