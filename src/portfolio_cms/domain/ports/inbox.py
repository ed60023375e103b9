"""Port for the contact-message inbox."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from portfolio_cms.domain.model import ContactMessage, EntityKey


@runtime_checkable
class InboxStore(Protocol):
    async def fetch_messages(self) -> Sequence[ContactMessage]: ...

    async def unread_count(self) -> int: ...

    async def mark_read(self, key: EntityKey) -> None: ...

    async def mark_all_read(self) -> None: ...

    async def delete(self, key: EntityKey) -> None: ...
