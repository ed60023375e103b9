"""Local ordered lists that are saved as a whole.

About paragraphs and hero stats are not separate server resources: the
section is written back with one PUT of the full array. Editing therefore
never touches the network until save, and cardinality limits are enforced
here, client-side.
"""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING

from portfolio_cms.domain.errors import UnknownEntityError
from portfolio_cms.domain.model.base import Direction, OrderedEntity
from portfolio_cms.domain.ordering import apply_order, renumber, sort_by_order, swap_neighbour

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence

    from portfolio_cms.domain.model.base import EntityKey

_PROTECTED_FIELDS = frozenset({"id", "order"})


class OrderedDraft[T: OrderedEntity]:
    def __init__(
        self,
        *,
        factory: Callable[[int], T],
        min_items: int = 0,
        max_items: int | None = None,
    ) -> None:
        self._factory = factory
        self._min_items = min_items
        self._max_items = max_items
        self._items: list[T] = []
        self._dirty = False
        self._listeners: list[Callable[[tuple[T, ...]], None]] = []

    @property
    def items(self) -> tuple[T, ...]:
        return tuple(self._items)

    @property
    def dirty(self) -> bool:
        return self._dirty

    @property
    def can_add(self) -> bool:
        return self._max_items is None or len(self._items) < self._max_items

    @property
    def can_remove(self) -> bool:
        return len(self._items) > self._min_items

    def __len__(self) -> int:
        return len(self._items)

    def subscribe(self, listener: Callable[[tuple[T, ...]], None]) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def reset(self, items: Iterable[T]) -> None:
        """Replace the draft with server state and mark it clean."""
        self._items = renumber(sort_by_order(items))
        while len(self._items) < self._min_items:
            self._items.append(self._factory(len(self._items)))
        self._dirty = False
        self._emit()

    def add(self) -> T | None:
        """Append a blank entry; None when the maximum is reached."""
        if not self.can_add:
            return None
        item = self._factory(len(self._items))
        self._items.append(item)
        self._changed()
        return item

    def edit(self, key: EntityKey, **changes: object) -> T:
        if _PROTECTED_FIELDS.intersection(changes):
            raise ValueError("id and order cannot be edited directly")
        index = self._index_of(key)
        item = replace(self._items[index], **changes)  # type: ignore[type-var]
        self._items[index] = item
        self._changed()
        return item

    def remove(self, key: EntityKey) -> bool:
        """Remove an entry; False when that would go below the minimum."""
        index = self._index_of(key)
        if not self.can_remove:
            return False
        del self._items[index]
        self._items = renumber(self._items)
        self._changed()
        return True

    def move(self, index: int, direction: Direction) -> bool:
        swapped = swap_neighbour(self._items, index, direction)
        if swapped is None:
            return False
        self._items = swapped
        self._changed()
        return True

    def reorder(self, ordered_ids: Sequence[EntityKey]) -> None:
        self._items = apply_order(self._items, ordered_ids)
        self._changed()

    def _index_of(self, key: EntityKey) -> int:
        for index, item in enumerate(self._items):
            if item.id == key:
                return index
        raise UnknownEntityError(f"No draft entry with id {key!r}")

    def _changed(self) -> None:
        self._dirty = True
        self._emit()

    def _emit(self) -> None:
        snapshot = self.items
        for listener in list(self._listeners):
            listener(snapshot)
