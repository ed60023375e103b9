"""Administrator identity."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from portfolio_cms.domain.model.base import EntityKey


@dataclass(frozen=True, kw_only=True)
class Admin:
    id: EntityKey
    email: str
    name: str
    avatar_url: str | None = None
