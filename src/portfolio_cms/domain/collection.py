"""Generic controller for one ordered content collection.

Every ordered section of the portfolio (projects, experience, skill categories,
skills) is edited through an ``OrderedCollectionController``. The controller
owns the local collection exclusively; the remote store is the system of
record.

Mutation semantics:

- ``create``/``update``/``delete``/``toggle`` are not optimistic: local state
  changes only after the store confirms, and stays untouched on failure.
- ``move`` is local and synchronous; it never talks to the store.
- ``reorder`` rewrites local order synchronously, before its request is sent,
  so back-to-back reorders always build on the latest local state. On failure
  the reconciliation policy replaces local state with a fresh load.

Network requests are never serialized against each other, except that
mutations addressing the same entity id queue behind a per-id lock.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from portfolio_cms.domain.errors import (
    FetchError,
    MutationError,
    ReorderFailed,
    UnknownEntityError,
)
from portfolio_cms.domain.model.base import Direction, OrderedEntity
from portfolio_cms.domain.ordering import (
    apply_order,
    ids_of,
    renumber,
    sort_by_order,
    swap_neighbour,
)
from portfolio_cms.domain.ports.remote_store import RemoteStoreError
from portfolio_cms.domain.reconciliation import RefetchOnFailure
from portfolio_cms.domain.state import ActivityTracker

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence

    from portfolio_cms.domain.model.base import EntityKey
    from portfolio_cms.domain.ports.confirmation import ConfirmAction
    from portfolio_cms.domain.ports.notifier import Notifier
    from portfolio_cms.domain.ports.remote_store import CollectionStore
    from portfolio_cms.domain.reconciliation import ReconciliationPolicy
    from portfolio_cms.domain.state import ControllerState

log = getLogger(__name__)

type ChangeListener[T] = Callable[[tuple[T, ...]], None]


@dataclass(frozen=True, slots=True)
class ResourceLabels:
    """Nouns used in notifications, e.g. ``ResourceLabels("project", "projects")``."""

    singular: str
    plural: str

    @property
    def title(self) -> str:
        return self.singular[:1].upper() + self.singular[1:]


class OrderedCollectionController[TEntity: OrderedEntity, TDraft]:
    def __init__(
        self,
        *,
        store: CollectionStore[TEntity, TDraft],
        notifier: Notifier,
        confirm: ConfirmAction,
        labels: ResourceLabels,
        policy: ReconciliationPolicy | None = None,
        scope_of: Callable[[TEntity], EntityKey] | None = None,
        min_items: int = 0,
    ) -> None:
        self._store = store
        self._notifier = notifier
        self._confirm = confirm
        self._labels = labels
        self._policy: ReconciliationPolicy = policy or RefetchOnFailure()
        self._scope_of = scope_of
        self._min_items = min_items

        self._items: list[TEntity] = []
        self._activity = ActivityTracker()
        self._listeners: list[ChangeListener[TEntity]] = []
        self._entity_locks: dict[EntityKey, asyncio.Lock] = {}
        self._disposed = False

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    @property
    def labels(self) -> ResourceLabels:
        return self._labels

    @property
    def items(self) -> tuple[TEntity, ...]:
        return tuple(self._items)

    @property
    def state(self) -> ControllerState:
        return self._activity.state

    @property
    def is_loading(self) -> bool:
        return self._activity.is_loading

    @property
    def is_saving(self) -> bool:
        return self._activity.is_saving

    @property
    def error(self) -> str | None:
        return self._activity.error

    @property
    def disposed(self) -> bool:
        return self._disposed

    def get(self, key: EntityKey) -> TEntity:
        for entity in self._items:
            if entity.id == key:
                return entity
        raise UnknownEntityError(f"No {self._labels.singular} with id {key!r}")

    def in_scope(self, scope: EntityKey | None = None) -> list[TEntity]:
        """Entities of one scope in display order."""
        return sort_by_order(entity for entity in self._items if self._scope_key(entity) == scope)

    def subscribe(self, listener: ChangeListener[TEntity]) -> Callable[[], None]:
        """Call ``listener`` with a snapshot after every local change."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def dispose(self) -> None:
        """Stop applying results; requests still in flight are discarded on arrival."""
        self._disposed = True
        self._listeners.clear()

    # ------------------------------------------------------------------
    # Remote operations
    # ------------------------------------------------------------------

    async def load(self) -> tuple[TEntity, ...]:
        """Replace local state with the server's collection."""
        with self._activity.loading():
            try:
                entities = await self._store.fetch_all()
            except RemoteStoreError as exc:
                if self._disposed:
                    log.debug("Discarding failed %s load after dispose", self._labels.plural)
                    return self.items
                message = exc.detail or f"Failed to load {self._labels.plural}"
                log.warning("Loading %s failed: %s", self._labels.plural, exc.message)
                self._activity.fail(message)
                self._notifier.error(message)
                raise FetchError(message) from exc

        if self._disposed:
            log.debug("Discarding %s load after dispose", self._labels.plural)
            return self.items
        self._items = sort_by_order(entities)
        log.debug("Loaded %d %s", len(self._items), self._labels.plural)
        self._emit()
        return self.items

    async def create(self, draft: TDraft) -> TEntity | None:
        """Create on the server and append the confirmed entity.

        Returns ``None`` when the request failed after ``dispose``.
        """
        with self._activity.saving():
            try:
                entity = await self._store.create(draft)
            except RemoteStoreError as exc:
                if self._disposed:
                    self._discard("create")
                    return None
                raise self._mutation_failed("create", exc) from exc

        if self._disposed:
            return entity
        self._items.append(entity)
        # a local delete may have closed a gap the server order still has
        scope = self._scope_key(entity)
        self._replace_scope(scope, renumber(self.in_scope(scope)))
        entity = self.get(entity.id)
        self._notifier.success(f"{self._labels.title} created")
        self._emit()
        return entity

    async def update(self, key: EntityKey, patch: TDraft) -> TEntity | None:
        """Send ``patch`` and swap in the confirmed entity by id."""
        self.get(key)
        async with self._lock_for(key):
            with self._activity.saving():
                try:
                    entity = await self._store.update(key, patch)
                except RemoteStoreError as exc:
                    if self._disposed:
                        self._discard("update")
                        return None
                    raise self._mutation_failed("update", exc) from exc

        if self._disposed:
            return entity
        self._replace_confirmed(entity)
        self._notifier.success(f"{self._labels.title} updated")
        return entity

    async def toggle(
        self,
        key: EntityKey,
        flag: str,
        *,
        describe: Callable[[TEntity], str] | None = None,
    ) -> TEntity | None:
        """Flip a boolean flag server-side (visibility, featured)."""
        self.get(key)
        async with self._lock_for(key):
            with self._activity.saving():
                try:
                    entity = await self._store.toggle_flag(key, flag)
                except RemoteStoreError as exc:
                    if self._disposed:
                        self._discard("update")
                        return None
                    raise self._mutation_failed("update", exc) from exc

        if self._disposed:
            return entity
        self._replace_confirmed(entity)
        message = describe(entity) if describe else f"{self._labels.title} updated"
        self._notifier.success(message)
        return entity

    async def delete(self, key: EntityKey) -> bool:
        """Delete after confirmation; return False when nothing was deleted."""
        entity = self.get(key)
        scope = self._scope_key(entity)
        if len(self.in_scope(scope)) <= self._min_items:
            log.info("Refusing to delete the last %s", self._labels.singular)
            return False
        if not await self._confirm(f"Delete this {self._labels.singular}? This cannot be undone."):
            return False

        async with self._lock_for(key):
            with self._activity.saving():
                try:
                    await self._store.delete(key)
                except RemoteStoreError as exc:
                    if self._disposed:
                        self._discard("delete")
                        return False
                    raise self._mutation_failed("delete", exc) from exc

        if self._disposed:
            return True
        self._entity_locks.pop(key, None)
        self._items = [item for item in self._items if item.id != key]
        self._replace_scope(scope, renumber(self.in_scope(scope)))
        self._notifier.success(f"{self._labels.title} deleted")
        self._emit()
        return True

    async def reorder(
        self,
        ordered_ids: Sequence[EntityKey],
        *,
        scope: EntityKey | None = None,
    ) -> None:
        """Apply ``ordered_ids`` locally right away, then confirm with the store."""
        ordered = list(ordered_ids)
        current = self.in_scope(scope)
        reordered = apply_order(current, ordered)
        if reordered != current:
            self._replace_scope(scope, reordered)
            self._emit()

        with self._activity.saving():
            try:
                await self._store.reorder_batch(ordered, scope=scope)
            except RemoteStoreError as exc:
                if self._disposed:
                    log.debug("Discarding failed %s reorder after dispose", self._labels.plural)
                    return
                message = exc.detail or f"Failed to reorder {self._labels.plural}"
                log.warning("Reordering %s failed: %s", self._labels.plural, exc.message)
                reloaded = await self._policy(self, notifier=self._notifier, message=message)
                self._activity.fail(message)
                raise ReorderFailed(message, reloaded=reloaded) from exc

    async def shift(
        self,
        index: int,
        direction: Direction,
        *,
        scope: EntityKey | None = None,
    ) -> bool:
        """``move`` followed by ``reorder``; False when the move was a no-op."""
        ordered_ids = self.move(index, direction, scope=scope)
        if ordered_ids is None:
            return False
        await self.reorder(ordered_ids, scope=scope)
        return True

    # ------------------------------------------------------------------
    # Local-only operations
    # ------------------------------------------------------------------

    def move(
        self,
        index: int,
        direction: Direction,
        *,
        scope: EntityKey | None = None,
    ) -> list[EntityKey] | None:
        """Swap with a neighbour locally and return the new id order.

        Returns ``None`` (and changes nothing) at either boundary.
        """
        swapped = swap_neighbour(self.in_scope(scope), index, direction)
        if swapped is None:
            return None
        self._replace_scope(scope, swapped)
        self._emit()
        return ids_of(swapped)

    def forget_where(self, predicate: Callable[[TEntity], bool]) -> int:
        """Drop matching entities locally, mirroring a server-side cascade."""
        doomed = [entity for entity in self._items if predicate(entity)]
        if not doomed:
            return 0
        scopes = {self._scope_key(entity) for entity in doomed}
        self._items = [entity for entity in self._items if not predicate(entity)]
        for scope in scopes:
            self._replace_scope(scope, renumber(self.in_scope(scope)))
        self._emit()
        return len(doomed)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _scope_key(self, entity: TEntity) -> EntityKey | None:
        return self._scope_of(entity) if self._scope_of is not None else None

    def _replace_scope(self, scope: EntityKey | None, entities: Iterable[TEntity]) -> None:
        """Write ``entities`` into the slots currently held by ``scope``."""
        positions = [
            index for index, entity in enumerate(self._items) if self._scope_key(entity) == scope
        ]
        for position, entity in zip(positions, entities, strict=True):
            self._items[position] = entity

    def _replace_confirmed(self, entity: TEntity) -> None:
        for index, current in enumerate(self._items):
            if current.id == entity.id:
                # keep the local position; a reorder may still be in flight
                self._items[index] = entity.with_order(current.order)
                self._emit()
                return
        log.debug("Confirmed %s %s is no longer held locally", self._labels.singular, entity.id)

    def _lock_for(self, key: EntityKey) -> asyncio.Lock:
        lock = self._entity_locks.get(key)
        if lock is None:
            lock = self._entity_locks[key] = asyncio.Lock()
        return lock

    def _mutation_failed(self, action: str, exc: RemoteStoreError) -> MutationError:
        message = exc.detail or f"Failed to {action} {self._labels.singular}"
        log.warning("Could not %s %s: %s", action, self._labels.singular, exc.message)
        self._activity.fail(message)
        self._notifier.error(message)
        return MutationError(message, action=action, status=exc.status)

    def _discard(self, action: str) -> None:
        log.debug("Discarding failed %s %s after dispose", self._labels.singular, action)

    def _emit(self) -> None:
        if self._disposed:
            return
        snapshot = self.items
        for listener in list(self._listeners):
            listener(snapshot)
