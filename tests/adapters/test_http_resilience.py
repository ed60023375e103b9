from __future__ import annotations

import asyncio
import json
from typing import TYPE_CHECKING, cast

import httpx
import pytest

from portfolio_cms.adapters.http_resilience import (
    _PayloadFilter,  # type: ignore[reportPrivateUsage]
    build_cache,
    build_retry,
)
from portfolio_cms.config import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from portfolio_cms.config.api import _is_content_payload  # type: ignore[reportPrivateUsage]
from tests.support.http_stub import make_client_factory

if TYPE_CHECKING:
    from hishel import Response as HishelCacheResponse

_ANY_RESPONSE = cast("HishelCacheResponse", object())


def test_build_retry_copies_the_policy() -> None:
    policy = RetryPolicy(total=5, backoff_factor=0.1, status_forcelist=frozenset({503}))

    retry = build_retry(policy)

    assert retry.total == 5
    assert retry.backoff_factor == 0.1
    assert set(retry.status_forcelist) == {503}
    assert "POST" not in {str(method).upper() for method in retry.allowed_methods}


def test_cache_is_off_without_config() -> None:
    assert build_cache(None) == (None, None)
    assert build_cache(CacheConfig(enabled=False)) == (None, None)


def test_unknown_cache_backend_is_rejected() -> None:
    config = CacheConfig(backend="redis")  # type: ignore[arg-type]

    with pytest.raises(ValueError, match="Unsupported cache backend"):
        build_cache(config)


def test_memory_cache_with_payload_filter() -> None:
    cache = build_cache(CacheConfig(backend="memory", should_cache=_is_content_payload))

    assert cache.storage is not None
    assert cache.policy is not None


def test_memory_cache_without_predicate_has_no_policy() -> None:
    cache = build_cache(CacheConfig(backend="memory"))

    assert cache.storage is not None
    assert cache.policy is None


def test_payload_filter_skips_error_bodies() -> None:
    payload_filter = _PayloadFilter(_is_content_payload)

    error_body = json.dumps({"statusCode": 500, "message": "boom"}).encode()
    content_body = json.dumps({"id": "hero"}).encode()

    assert payload_filter.needs_body()
    assert not payload_filter.apply(_ANY_RESPONSE, error_body)
    assert payload_filter.apply(_ANY_RESPONSE, content_body)
    assert payload_filter.apply(_ANY_RESPONSE, b"\xff not json")
    assert payload_filter.apply(_ANY_RESPONSE, None)


def test_rate_limited_client_still_answers() -> None:
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.path)
        return httpx.Response(200, json={"ok": True})

    config = ResilienceConfig(
        name="limited",
        retry=RetryPolicy(total=0),
        ratelimit=RateLimit(max_calls=2, per_seconds=0.01),
    )
    client = make_client_factory(handler)(config)

    async def scenario() -> list[int]:
        async with client:
            responses = await asyncio.gather(
                *(
                    client.request("GET", f"http://portfolio.test/api/{index}")
                    for index in range(4)
                )
            )
        return [response.status_code for response in responses]

    assert asyncio.run(scenario()) == [200, 200, 200, 200]
    assert sorted(seen) == ["/api/0", "/api/1", "/api/2", "/api/3"]
