"""Tagged activity state shared by controllers and document editors."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator


@dataclass(frozen=True, slots=True)
class Idle:
    pass


@dataclass(frozen=True, slots=True)
class Loading:
    pass


@dataclass(frozen=True, slots=True)
class Saving:
    pass


@dataclass(frozen=True, slots=True)
class Failed:
    reason: str


type ControllerState = Idle | Loading | Saving | Failed


class ActivityTracker:
    """Derive a ``ControllerState`` from in-flight operation counters.

    Loads and mutations may overlap (network calls are not serialized), so the
    state is computed rather than assigned: any pending load wins, then any
    pending mutation, then the last recorded failure.
    """

    def __init__(self) -> None:
        self._loading = 0
        self._saving = 0
        self._failure: str | None = None

    @property
    def state(self) -> ControllerState:
        if self._loading:
            return Loading()
        if self._saving:
            return Saving()
        if self._failure is not None:
            return Failed(self._failure)
        return Idle()

    @property
    def is_loading(self) -> bool:
        return self._loading > 0

    @property
    def is_saving(self) -> bool:
        return self._saving > 0

    @property
    def error(self) -> str | None:
        return self._failure

    @contextmanager
    def loading(self) -> Iterator[None]:
        self._failure = None
        self._loading += 1
        try:
            yield
        finally:
            self._loading -= 1

    @contextmanager
    def saving(self) -> Iterator[None]:
        self._failure = None
        self._saving += 1
        try:
            yield
        finally:
            self._saving -= 1

    def fail(self, reason: str) -> None:
        self._failure = reason

    def clear(self) -> None:
        self._failure = None
