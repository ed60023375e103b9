"""Shared wiring for resources edited through one collection controller."""

from __future__ import annotations

from typing import TYPE_CHECKING

from portfolio_cms.domain.model.base import OrderedEntity

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from portfolio_cms.domain.collection import OrderedCollectionController
    from portfolio_cms.domain.model.base import Direction, EntityKey
    from portfolio_cms.domain.preview import PreviewProjector, SortedView


class CollectionBinding[TEntity: OrderedEntity, TDraft]:
    """Validation plus preview around an ``OrderedCollectionController``.

    Subclasses override ``validate`` to normalise a draft and raise
    ``ValidationError`` before anything is dispatched.
    """

    def __init__(
        self,
        controller: OrderedCollectionController[TEntity, TDraft],
        projector: PreviewProjector[TEntity],
    ) -> None:
        self._controller = controller
        self._projector = projector

    @property
    def controller(self) -> OrderedCollectionController[TEntity, TDraft]:
        return self._controller

    @property
    def items(self) -> tuple[TEntity, ...]:
        return self._controller.items

    async def load(self) -> tuple[TEntity, ...]:
        return await self._controller.load()

    def validate(self, draft: TDraft) -> TDraft:
        return draft

    async def submit(self, draft: TDraft, *, editing_id: EntityKey | None = None) -> TEntity | None:
        """Create, or update ``editing_id``, after client-side validation."""
        checked = self.validate(draft)
        if editing_id is None:
            return await self._controller.create(checked)
        return await self._controller.update(editing_id, checked)

    async def delete(self, key: EntityKey) -> bool:
        return await self._controller.delete(key)

    async def reorder(self, ordered_ids: Sequence[EntityKey]) -> None:
        await self._controller.reorder(ordered_ids)

    async def shift(self, index: int, direction: Direction) -> bool:
        return await self._controller.shift(index, direction)

    def preview(self) -> SortedView[TEntity]:
        return self._projector.project(self._controller.items)

    def bind_preview(self, render: Callable[[SortedView[TEntity]], None]) -> Callable[[], None]:
        return self._projector.bind(self._controller, render)

    def dispose(self) -> None:
        self._controller.dispose()
