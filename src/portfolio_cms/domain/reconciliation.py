"""Recovery after an optimistic reorder was not confirmed.

The local order has already been rewritten when the confirming request fails.
Rather than reverting to a remembered snapshot (which may itself be stale when
several reorders overlapped), the default policy reloads the whole collection
and replaces local state with whatever the server holds.

No automatic retry happens; the user repeats the action if they want to.
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Protocol

from portfolio_cms.domain.errors import FetchError

if TYPE_CHECKING:
    from portfolio_cms.domain.ports.notifier import Notifier

log = getLogger(__name__)


class Reloadable(Protocol):
    async def load(self) -> object: ...


class ReconciliationPolicy(Protocol):
    """Restore server-consistent state; return whether the reload succeeded."""

    async def __call__(
        self,
        target: Reloadable,
        *,
        notifier: Notifier,
        message: str,
    ) -> bool: ...


@dataclass(frozen=True, slots=True)
class RefetchOnFailure:
    """Reload from the server, then report the failed reorder."""

    async def __call__(
        self,
        target: Reloadable,
        *,
        notifier: Notifier,
        message: str,
    ) -> bool:
        try:
            await target.load()
        except FetchError as exc:
            # load() has already surfaced its own error
            log.warning("Reload after failed reorder did not succeed: %s", exc.message)
            reloaded = False
        else:
            reloaded = True
        notifier.error(message)
        return reloaded
