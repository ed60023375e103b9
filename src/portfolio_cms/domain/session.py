"""Explicit authentication context shared by the API client and the CLI.

The session is created once at startup, handed to whoever needs it, and
cleared on logout or when the API answers 401.
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from portfolio_cms.domain.model import Admin

log = getLogger(__name__)


@dataclass(slots=True)
class AuthSession:
    token: str | None = None
    admin: Admin | None = None
    initialized: bool = False

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None and self.admin is not None

    def start(self, token: str, admin: Admin) -> None:
        self.token = token
        self.admin = admin
        self.initialized = True
        log.debug("Session started for %s", admin.email)

    def clear(self) -> None:
        if self.token is not None:
            log.info("Clearing authentication session")
        self.token = None
        self.admin = None
        self.initialized = True

    def auth_headers(self) -> dict[str, str]:
        if self.token is None:
            return {}
        return {"Authorization": f"Bearer {self.token}"}
