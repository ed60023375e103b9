"""Dense-order helpers for ordered collections.

A settled scope holds ``order`` values that are exactly ``0..n-1``. All helpers
are pure: they return new lists and never mutate entities in place.
"""

from __future__ import annotations

from operator import attrgetter
from typing import TYPE_CHECKING

from portfolio_cms.domain.errors import InvalidOrderError
from portfolio_cms.domain.model.base import Direction, OrderedEntity

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from portfolio_cms.domain.model.base import EntityKey


def sort_by_order[T: OrderedEntity](entities: Iterable[T]) -> list[T]:
    """Stable sort by ``order`` ascending."""
    return sorted(entities, key=attrgetter("order"))


def renumber[T: OrderedEntity](entities: Iterable[T]) -> list[T]:
    """Assign dense positions following the given sequence."""
    return [entity.with_order(index) for index, entity in enumerate(entities)]


def is_dense(entities: Iterable[OrderedEntity]) -> bool:
    orders = sorted(entity.order for entity in entities)
    return orders == list(range(len(orders)))


def ids_of(entities: Iterable[OrderedEntity]) -> list[EntityKey]:
    return [entity.id for entity in entities]


def apply_order[T: OrderedEntity](
    entities: Sequence[T],
    ordered_ids: Sequence[EntityKey],
) -> list[T]:
    """Rearrange ``entities`` to follow ``ordered_ids`` and renumber them.

    ``ordered_ids`` must name every entity exactly once.
    """

    by_id = {entity.id: entity for entity in entities}
    if len(ordered_ids) != len(set(ordered_ids)):
        raise InvalidOrderError("Duplicate ids in reorder request")
    if set(ordered_ids) != set(by_id):
        missing = sorted(set(by_id) - set(ordered_ids))
        unknown = sorted(set(ordered_ids) - set(by_id))
        raise InvalidOrderError(
            f"Reorder ids do not match scope (missing={missing}, unknown={unknown})"
        )
    return renumber(by_id[key] for key in ordered_ids)


def neighbour_index(index: int, direction: Direction, size: int) -> int | None:
    """Index to swap with, or None at either boundary."""
    if not 0 <= index < size:
        return None
    target = index - 1 if direction is Direction.UP else index + 1
    if not 0 <= target < size:
        return None
    return target


def swap_neighbour[T: OrderedEntity](
    entities: Sequence[T],
    index: int,
    direction: Direction,
) -> list[T] | None:
    """Swap the entity at ``index`` with its neighbour and renumber.

    ``entities`` must already be in display order. Returns ``None`` when the
    move would leave the collection unchanged.
    """

    target = neighbour_index(index, Direction(direction), len(entities))
    if target is None:
        return None
    swapped = list(entities)
    swapped[index], swapped[target] = swapped[target], swapped[index]
    return renumber(swapped)
