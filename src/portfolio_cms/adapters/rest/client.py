"""HTTP client for the portfolio REST API."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from portfolio_cms.adapters.http_resilience import ResilientClient
from portfolio_cms.config import get_api_config
from portfolio_cms.domain.ports.remote_store import RemoteStoreError
from portfolio_cms.domain.session import AuthSession

from .schema import ErrorPayload

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping
    from types import TracebackType

    from portfolio_cms.config import ApiConfig, ResilienceConfig

log = getLogger(__name__)


def default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


def _error_detail(response: httpx.Response) -> str | None:
    try:
        return ErrorPayload.model_validate(response.json()).detail
    except ValueError:
        return None


def parse_model[M: BaseModel](model: type[M], payload: object) -> M:
    """Validate one response object; malformed payloads become ``RemoteStoreError``."""
    try:
        return model.model_validate(payload)
    except PydanticValidationError as exc:
        raise RemoteStoreError(f"Malformed {model.__name__} payload: {exc}") from exc


def parse_models[M: BaseModel](model: type[M], payload: object) -> list[M]:
    try:
        return TypeAdapter(list[model]).validate_python(payload)
    except PydanticValidationError as exc:
        raise RemoteStoreError(f"Malformed {model.__name__} list payload: {exc}") from exc


class PortfolioApiClient:
    """Thin JSON wrapper over a long-lived ``ResilientClient``.

    The bearer token is read from ``session`` on every request, and a 401
    response clears the session.
    """

    def __init__(
        self,
        *,
        config: ApiConfig | None = None,
        session: AuthSession | None = None,
        client_factory: Callable[[ResilienceConfig], ResilientClient] = default_client_factory,
    ) -> None:
        self.config = config or get_api_config()
        self.session = session if session is not None else AuthSession(token=self.config.token)
        self._client_factory = client_factory
        self._client: ResilientClient | None = None

    async def __aenter__(self) -> PortfolioApiClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def url_for(self, path: str) -> str:
        return f"{self.config.base_url}/{path.lstrip('/')}"

    async def request_json(
        self,
        method: str,
        path: str,
        *,
        json: object = None,
        params: Mapping[str, str] | None = None,
        retry: bool = True,
    ) -> object:
        if self._client is None:
            self._client = self._client_factory(self.config.resilience)
        url = self.url_for(path)
        try:
            response = await self._client.request(
                method,
                url,
                json=json,
                params=params,
                headers=self.session.auth_headers(),
                retry=retry,
            )
        except httpx.HTTPError as exc:
            log.warning("%s %s failed: %s", method, url, exc)
            raise RemoteStoreError(f"{method} {path} failed: {exc}") from exc

        if response.is_error:
            status = response.status_code
            detail = _error_detail(response)
            log.warning("%s %s returned %s: %s", method, url, status, detail)
            if status == httpx.codes.UNAUTHORIZED:
                self.session.clear()
            raise RemoteStoreError(
                f"{method} {path} returned HTTP {status}", status=status, detail=detail
            )

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise RemoteStoreError(
                f"{method} {path} returned invalid JSON", status=response.status_code
            ) from exc

    async def get(self, path: str, *, params: Mapping[str, str] | None = None) -> object:
        return await self.request_json("GET", path, params=params)

    async def post(self, path: str, *, json: object = None) -> object:
        return await self.request_json("POST", path, json=json)

    async def put(self, path: str, *, json: object = None, retry: bool = True) -> object:
        return await self.request_json("PUT", path, json=json, retry=retry)

    async def delete(self, path: str) -> object:
        return await self.request_json("DELETE", path)
