from __future__ import annotations

import json
from logging import getLogger
from typing import TYPE_CHECKING, NamedTuple, TypedDict, Unpack

import httpx
from aiolimiter import AsyncLimiter
from hishel import AsyncSqliteStorage, FilterPolicy
from hishel import Response as HishelCacheResponse
from hishel._policies import BaseFilter
from hishel.httpx import AsyncCacheClient
from httpx_retries import Retry, RetryTransport

from portfolio_cms.config.storage import get_storage_config

if TYPE_CHECKING:
    from collections.abc import Mapping
    from types import TracebackType

    from portfolio_cms.config.http_resilience import (
        CacheConfig,
        CachePredicate,
        ResilienceConfig,
        RetryPolicy,
    )

log = getLogger(__name__)


class RequestOptions(TypedDict, total=False):
    json: object
    params: Mapping[str, str] | None
    headers: Mapping[str, str] | None


class CacheComponents(NamedTuple):
    storage: AsyncSqliteStorage | None
    policy: FilterPolicy | None


def build_retry(policy: RetryPolicy) -> Retry:
    return Retry(
        total=policy.total,
        backoff_factor=policy.backoff_factor,
        max_backoff_wait=policy.max_backoff_wait,
        respect_retry_after_header=policy.respect_retry_after_header,
        allowed_methods=tuple(policy.allowed_methods),
        status_forcelist=tuple(policy.status_forcelist),
        retry_on_exceptions=policy.retry_on_exceptions,
        backoff_jitter=policy.backoff_jitter,
    )


def build_cache(config: CacheConfig | None) -> CacheComponents:
    """Storage and filter policy for ``config``; both ``None`` when caching is off."""
    if config is None or not config.enabled:
        return CacheComponents(None, None)

    match config.backend:
        case "sqlite":
            database_path = config.sqlite_path or str(get_storage_config().http_cache_path())
        case "memory":
            database_path = ":memory:"
        case _:
            msg = f"Unsupported cache backend: {config.backend}"
            raise ValueError(msg)

    storage = AsyncSqliteStorage(
        database_path=database_path,
        default_ttl=config.default_ttl_seconds,
    )
    policy = (
        FilterPolicy(response_filters=[_PayloadFilter(config.should_cache)])
        if config.should_cache is not None
        else None
    )
    return CacheComponents(storage, policy)


class _PayloadFilter(BaseFilter[HishelCacheResponse]):
    """Only store responses whose JSON body passes ``predicate``.

    Bodies that are not JSON are stored as is; the predicate only
    knows how to recognise error envelopes.
    """

    def __init__(self, predicate: CachePredicate) -> None:
        self._predicate = predicate

    def needs_body(self) -> bool:
        return True

    def apply(self, item: HishelCacheResponse, body: bytes | None) -> bool:  # noqa: ARG002
        if body is None:
            return True
        try:
            payload = json.loads(body.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError):
            return True
        return bool(self._predicate(payload))


# request extension read by ``_RetrySwitch``; a true value sends the request once
NO_RETRY_EXTENSION = "portfolio_cms.no_retry"


class _RetrySwitch(httpx.AsyncBaseTransport):
    """Route requests through ``RetryTransport`` unless they opted out of retries."""

    def __init__(self, inner: httpx.AsyncBaseTransport, retry: Retry) -> None:
        self._inner = inner
        self._retrying = RetryTransport(transport=inner, retry=retry)  # type: ignore[arg-type]

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        if request.extensions.get(NO_RETRY_EXTENSION):
            return await self._inner.handle_async_request(request)
        return await self._retrying.handle_async_request(request)

    async def aclose(self) -> None:
        await self._inner.aclose()


class ResilientClient:
    """``httpx.AsyncClient`` with retries, an optional rate limit and an optional cache.

    ``transport`` replaces the network transport underneath the retry layer.
    """

    def __init__(
        self,
        config: ResilienceConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self._limiter = (
            AsyncLimiter(config.ratelimit.max_calls, config.ratelimit.per_seconds)
            if config.ratelimit
            else None
        )
        switch = _RetrySwitch(transport or httpx.AsyncHTTPTransport(), build_retry(config.retry))
        headers = dict(config.default_headers or {})
        base_url = config.base_url or ""

        cache = build_cache(config.cache)
        if cache.storage is not None:
            self._client: httpx.AsyncClient = AsyncCacheClient(
                base_url=base_url,
                timeout=config.timeout_seconds,
                headers=headers,
                transport=switch,
                storage=cache.storage,
                policy=cache.policy,
            )
        else:
            self._client = httpx.AsyncClient(
                base_url=base_url,
                timeout=config.timeout_seconds,
                headers=headers,
                transport=switch,
            )
        log.debug(
            "Built %s client (cache=%s, ratelimit=%s)",
            config.name,
            cache.storage is not None,
            config.ratelimit,
        )

    async def __aenter__(self) -> ResilientClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request(
        self,
        method: str,
        url: str,
        *,
        retry: bool = True,
        **kwargs: Unpack[RequestOptions],
    ) -> httpx.Response:
        """Send one request; ``retry=False`` skips the retry policy for calls that flip state."""
        if self._limiter is None:
            return await self._request(method, url, retry=retry, **kwargs)
        if not self._limiter.has_capacity():
            log.debug("%s client waiting for rate limit: %s %s", self.config.name, method, url)
        async with self._limiter:
            return await self._request(method, url, retry=retry, **kwargs)

    async def _request(
        self,
        method: str,
        url: str,
        *,
        retry: bool,
        **kwargs: Unpack[RequestOptions],
    ) -> httpx.Response:
        extensions = None if retry else {NO_RETRY_EXTENSION: True}
        response = await self._client.request(method, url, extensions=extensions, **kwargs)
        log.debug("%s %s -> %s", method, url, response.status_code)
        return response
