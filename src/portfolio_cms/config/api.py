"""Portfolio API configuration values."""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urlparse

from .env import optional_env_var, require_env_vars
from .errors import ConfigurationError
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .storage import StorageConfig, get_storage_config

DEFAULT_API_URL = "http://localhost:4000/api"
ADMIN_TIMEOUT_SECONDS = 15.0
PUBLIC_TIMEOUT_SECONDS = 10.0
PUBLIC_CACHE_TTL_SECONDS = 300.0


@dataclass(frozen=True, slots=True)
class ApiConfig:
    """Connection settings for the admin side of the portfolio API."""

    base_url: str
    token: str | None
    resilience: ResilienceConfig


@dataclass(frozen=True, slots=True)
class PublicSiteConfig:
    """Connection settings for anonymous, cached reads of the public site."""

    base_url: str
    resilience: ResilienceConfig


@dataclass(frozen=True, slots=True)
class AdminCredentials:
    email: str
    password: str


def _is_content_payload(payload: object) -> bool:
    """Error bodies (``{"statusCode": ..., "message": ...}``) are never cached."""
    return not (isinstance(payload, dict) and "statusCode" in payload)


def _api_url() -> str:
    url = (optional_env_var("PORTFOLIO_API_URL") or DEFAULT_API_URL).rstrip("/")
    parsed = urlparse(url)
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise ConfigurationError(f"PORTFOLIO_API_URL must be an http(s) URL, got {url!r}")
    return url


def get_api_config(*, resilience: ResilienceConfig | None = None) -> ApiConfig:
    base_url = _api_url()
    return ApiConfig(
        base_url=base_url,
        token=optional_env_var("PORTFOLIO_API_TOKEN"),
        resilience=resilience
        or ResilienceConfig(
            name="portfolio-admin",
            base_url=base_url,
            timeout_seconds=ADMIN_TIMEOUT_SECONDS,
            retry=RetryPolicy(),
            ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
            cache=None,
            default_headers={"Content-Type": "application/json"},
        ),
    )


def get_public_site_config(
    *,
    storage: StorageConfig | None = None,
    resilience: ResilienceConfig | None = None,
) -> PublicSiteConfig:
    base_url = _api_url()
    if resilience is None:
        storage_config = storage or get_storage_config()
        resilience = ResilienceConfig(
            name="portfolio-public",
            base_url=base_url,
            timeout_seconds=PUBLIC_TIMEOUT_SECONDS,
            retry=RetryPolicy(total=2),
            cache=CacheConfig(
                backend="sqlite",
                sqlite_path=str(storage_config.http_cache_path()),
                default_ttl_seconds=PUBLIC_CACHE_TTL_SECONDS,
                should_cache=_is_content_payload,
            ),
        )
    return PublicSiteConfig(base_url=base_url, resilience=resilience)


def get_admin_credentials() -> AdminCredentials:
    values = require_env_vars(("PORTFOLIO_ADMIN_EMAIL", "PORTFOLIO_ADMIN_PASSWORD"))
    return AdminCredentials(
        email=values["PORTFOLIO_ADMIN_EMAIL"],
        password=values["PORTFOLIO_ADMIN_PASSWORD"],
    )
