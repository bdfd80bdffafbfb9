"""Application configuration helpers."""

from __future__ import annotations

from .contacts import (
    DEFAULT_LEDGER_COOKIE_NAME,
    DEFAULT_REFERENCE_COOKIE_NAME,
    ContactManagerConfig,
    get_contact_manager_config,
)
from .env import env_flag, env_int, optional_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .logging import configure_logging
from .middleware import MergeMiddlewareConfig, get_merge_middleware_config
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "DEFAULT_LEDGER_COOKIE_NAME",
    "DEFAULT_REFERENCE_COOKIE_NAME",
    "ConfigurationError",
    "ContactManagerConfig",
    "DatabaseConfig",
    "MergeMiddlewareConfig",
    "MissingConfigurationError",
    "StorageConfig",
    "configure_logging",
    "env_flag",
    "env_int",
    "get_contact_manager_config",
    "get_database_config",
    "get_merge_middleware_config",
    "get_storage_config",
    "optional_env_var",
    "require_env_vars",
]
