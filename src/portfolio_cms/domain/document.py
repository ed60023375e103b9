"""Load/save flow for single-document sections (hero, about, settings)."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from portfolio_cms.domain.errors import FetchError, MutationError
from portfolio_cms.domain.ports.remote_store import RemoteStoreError
from portfolio_cms.domain.state import ActivityTracker

if TYPE_CHECKING:
    from collections.abc import Callable

    from portfolio_cms.domain.ports.notifier import Notifier
    from portfolio_cms.domain.ports.remote_store import DocumentStore
    from portfolio_cms.domain.state import ControllerState

log = getLogger(__name__)


class DocumentController[TDocument, TDraft]:
    def __init__(
        self,
        *,
        store: DocumentStore[TDocument, TDraft],
        notifier: Notifier,
        section: str,
    ) -> None:
        self._store = store
        self._notifier = notifier
        self._section = section
        self._document: TDocument | None = None
        self._activity = ActivityTracker()
        self._listeners: list[Callable[[TDocument], None]] = []
        self._disposed = False

    @property
    def document(self) -> TDocument | None:
        return self._document

    @property
    def state(self) -> ControllerState:
        return self._activity.state

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def is_saving(self) -> bool:
        return self._activity.is_saving

    @property
    def error(self) -> str | None:
        return self._activity.error

    def subscribe(self, listener: Callable[[TDocument], None]) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def dispose(self) -> None:
        self._disposed = True
        self._listeners.clear()

    async def load(self) -> TDocument | None:
        with self._activity.loading():
            try:
                document = await self._store.fetch()
            except RemoteStoreError as exc:
                if self._disposed:
                    return self._document
                message = exc.detail or f"Failed to load {self._section}"
                log.warning("Loading %s failed: %s", self._section, exc.message)
                self._activity.fail(message)
                self._notifier.error(message)
                raise FetchError(message) from exc
        if not self._disposed:
            self._set(document)
        return self._document

    async def save(self, draft: TDraft) -> TDocument | None:
        """Write the whole document; the previous value is kept on failure.

        After ``dispose`` nothing is applied; a failure there returns ``None``.
        """
        with self._activity.saving():
            try:
                document = await self._store.replace(draft)
            except RemoteStoreError as exc:
                if self._disposed:
                    log.debug("Discarding failed %s save after dispose", self._section)
                    return None
                message = exc.detail or f"Failed to update {self._section}"
                log.warning("Saving %s failed: %s", self._section, exc.message)
                self._activity.fail(message)
                self._notifier.error(message)
                raise MutationError(message, action="update", status=exc.status) from exc
        if self._disposed:
            log.debug("Discarding %s save after dispose", self._section)
            return document
        self._set(document)
        self._notifier.success(f"{self._section[:1].upper()}{self._section[1:]} updated")
        return document

    def _set(self, document: TDocument) -> None:
        self._document = document
        for listener in list(self._listeners):
            listener(document)
