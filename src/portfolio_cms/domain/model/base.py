"""
Base building blocks:
entity keys, the ordered-entity contract and move directions.
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass, replace
from enum import StrEnum
from typing import Protocol, Self, runtime_checkable

type EntityKey = str


def new_client_id() -> EntityKey:
    """Temporary id for entities that only live in a local draft."""
    return secrets.token_hex(5)


class Direction(StrEnum):
    UP = "up"
    DOWN = "down"


@runtime_checkable
class OrderedEntity(Protocol):
    """Structural contract for anything participating in reordering."""

    @property
    def id(self) -> EntityKey: ...

    @property
    def order(self) -> int: ...

    def with_order(self, order: int) -> Self: ...


@dataclass(frozen=True, kw_only=True)
class OrderedItem:
    """Identity plus position within a collection scope."""

    id: EntityKey
    order: int = 0

    def with_order(self, order: int) -> Self:
        if order == self.order:
            return self
        return replace(self, order=order)
