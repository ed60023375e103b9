"""Error taxonomy for content editing.

``ValidationError`` never reaches the network. ``FetchError`` means the local
collection could not be (re)loaded. ``MutationError`` covers non-optimistic
create/update/delete/toggle failures, after which local state is unchanged.
``ReorderFailed`` is raised after an optimistic reorder was rolled back by a
full reload.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping


class PortfolioError(Exception):
    """Base class for errors surfaced by controllers and bindings."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(PortfolioError):
    """Client-side, field-scoped validation failure."""

    def __init__(self, field_errors: Mapping[str, str]) -> None:
        self.field_errors = dict(field_errors)
        summary = "; ".join(f"{name}: {error}" for name, error in self.field_errors.items())
        super().__init__(summary or "Invalid input")


class FetchError(PortfolioError):
    """Loading a collection or document from the API failed."""


class MutationError(PortfolioError):
    """A create/update/delete/toggle call was rejected or could not be sent."""

    def __init__(self, message: str, *, action: str, status: int | None = None) -> None:
        super().__init__(message)
        self.action = action
        self.status = status


class ReorderFailed(PortfolioError):
    """An optimistic reorder was not confirmed; local order was reloaded."""

    def __init__(self, message: str, *, reloaded: bool) -> None:
        super().__init__(message)
        self.reloaded = reloaded


class InvalidOrderError(ValueError):
    """A reorder request is not a permutation of the scope's ids."""


class UnknownEntityError(LookupError):
    """No entity with the requested id exists in the local collection."""


class AuthenticationError(PortfolioError):
    """Login failed or a stored token was rejected by the API."""
