"""Domain port definitions for adapters."""

from __future__ import annotations

from .confirmation import ConfirmAction, always_confirm
from .inbox import InboxStore
from .notifier import Notifier
from .remote_store import CollectionStore, DocumentStore, RemoteStoreError

__all__ = [
    "CollectionStore",
    "ConfirmAction",
    "DocumentStore",
    "InboxStore",
    "Notifier",
    "RemoteStoreError",
    "always_confirm",
]
