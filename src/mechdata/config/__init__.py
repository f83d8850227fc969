"""Application configuration helpers."""

from __future__ import annotations

from .env import require_env_vars
from .errors import (
    ConfigurationError,
    InvalidConfigurationValueError,
    MissingConfigurationError,
)
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .ingest import IngestConfig, get_ingest_config
from .mul import MUL_BASE_URL, MulConfig, get_mul_config
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "MUL_BASE_URL",
    "CacheConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "IngestConfig",
    "InvalidConfigurationValueError",
    "MissingConfigurationError",
    "MulConfig",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "get_database_config",
    "get_ingest_config",
    "get_mul_config",
    "get_storage_config",
    "require_env_vars",
]
