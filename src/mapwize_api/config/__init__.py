"""Application configuration helpers."""

from __future__ import annotations

from mapwize_api.common.logging import configure_logging

from .env import optional_env_var, optional_int_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .mapwize import DEFAULT_MAPWIZE_SERVER_URL, MapwizeConfig, get_mapwize_config
from .sync import DEFAULT_SYNC_CONCURRENCY, SyncConfig, get_sync_config

__all__ = [
    "DEFAULT_MAPWIZE_SERVER_URL",
    "DEFAULT_SYNC_CONCURRENCY",
    "ConfigurationError",
    "MapwizeConfig",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "SyncConfig",
    "configure_logging",
    "get_mapwize_config",
    "get_sync_config",
    "optional_env_var",
    "optional_int_env_var",
    "require_env_vars",
]
