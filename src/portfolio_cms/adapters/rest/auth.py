"""Login, token restore and logout against ``/auth``."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from portfolio_cms.domain.errors import AuthenticationError
from portfolio_cms.domain.ports.remote_store import RemoteStoreError

from .client import parse_model
from .schema import AdminPayload, AuthPayload, LoginRequest
from .translator import to_admin

if TYPE_CHECKING:
    from portfolio_cms.domain.model import Admin
    from portfolio_cms.domain.session import AuthSession

    from .client import PortfolioApiClient

log = getLogger(__name__)


class AuthService:
    def __init__(self, client: PortfolioApiClient) -> None:
        self._client = client

    @property
    def session(self) -> AuthSession:
        return self._client.session

    async def login(self, email: str, password: str) -> Admin:
        request = LoginRequest(email=email, password=password)
        try:
            payload = await self._client.post("/auth/login", json=request.to_wire())
        except RemoteStoreError as exc:
            raise AuthenticationError(exc.detail or "Login failed") from exc
        auth = parse_model(AuthPayload, payload)
        admin = to_admin(auth.admin)
        self.session.start(auth.access_token, admin)
        log.info("Logged in as %s", admin.email)
        return admin

    async def login_with_token(self, token: str) -> Admin:
        """Adopt a token issued elsewhere (OAuth callback) after checking it."""
        self.session.token = token
        try:
            admin = await self._profile()
        except RemoteStoreError as exc:
            self.session.clear()
            raise AuthenticationError(exc.detail or "Token was rejected") from exc
        self.session.start(token, admin)
        return admin

    async def restore(self) -> Admin | None:
        """Startup check of a stored token; an invalid token is dropped quietly."""
        token = self.session.token
        if token is None:
            self.session.clear()
            return None
        try:
            admin = await self._profile()
        except RemoteStoreError as exc:
            log.info("Stored token is no longer valid: %s", exc.message)
            self.session.clear()
            return None
        self.session.start(token, admin)
        return admin

    def logout(self) -> None:
        self.session.clear()

    async def _profile(self) -> Admin:
        return to_admin(parse_model(AdminPayload, await self._client.get("/auth/me")))
