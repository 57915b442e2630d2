"""Application configuration helpers."""

from __future__ import annotations

from .env import env_float, require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .konnect import DEFAULT_KONNECT_BASE_URL, KonnectConfig, get_konnect_config
from .logging import configure_logging
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config
from .sync import DEFAULT_SYNC_PERIOD_SECONDS, SyncConfig, get_sync_config

__all__ = [
    "DEFAULT_KONNECT_BASE_URL",
    "DEFAULT_SYNC_PERIOD_SECONDS",
    "ConfigurationError",
    "DatabaseConfig",
    "KonnectConfig",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "SyncConfig",
    "configure_logging",
    "env_float",
    "get_database_config",
    "get_konnect_config",
    "get_storage_config",
    "get_sync_config",
    "require_env_var",
    "require_env_vars",
]
