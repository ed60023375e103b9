"""Application configuration helpers."""

from __future__ import annotations

from .api import (
    DEFAULT_API_URL,
    AdminCredentials,
    ApiConfig,
    PublicSiteConfig,
    get_admin_credentials,
    get_api_config,
    get_public_site_config,
)
from .env import optional_env_var, require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .storage import StorageConfig, get_storage_config

__all__ = [
    "DEFAULT_API_URL",
    "AdminCredentials",
    "ApiConfig",
    "CacheConfig",
    "ConfigurationError",
    "MissingConfigurationError",
    "PublicSiteConfig",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "configure_logging",
    "get_admin_credentials",
    "get_api_config",
    "get_public_site_config",
    "get_storage_config",
    "optional_env_var",
    "require_env_var",
    "require_env_vars",
]
