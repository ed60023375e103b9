"""Ports for the remote system of record behind each content section."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from portfolio_cms.domain.model.base import EntityKey


class RemoteStoreError(Exception):
    """Raised by store adapters when a request fails or returns garbage."""

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        detail: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        # human-readable message supplied by the server, if any
        self.detail = detail

    @property
    def is_unauthorized(self) -> bool:
        return self.status == 401


@runtime_checkable
class CollectionStore[TEntity, TDraft](Protocol):
    """Per-entity CRUD plus batch reorder for one ordered resource.

    ``reorder_batch`` is idempotent and replaces the whole order of one scope;
    ``scope`` is the parent id for two-level resources and ``None`` otherwise.
    """

    async def fetch_all(self) -> Sequence[TEntity]: ...

    async def create(self, draft: TDraft) -> TEntity: ...

    async def update(self, key: EntityKey, patch: TDraft) -> TEntity: ...

    async def delete(self, key: EntityKey) -> None: ...

    async def reorder_batch(
        self,
        ordered_ids: Sequence[EntityKey],
        *,
        scope: EntityKey | None = None,
    ) -> None: ...

    async def toggle_flag(self, key: EntityKey, flag: str) -> TEntity: ...


@runtime_checkable
class DocumentStore[TDocument, TDraft](Protocol):
    """Single-document resources saved with one atomic PUT."""

    async def fetch(self) -> TDocument: ...

    async def replace(self, draft: TDraft) -> TDocument: ...
