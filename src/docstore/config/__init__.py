"""Configuration module."""

from docstore.config.loader import load_config
from docstore.config.models import (
    ConfigError,
    ConnectionConfig,
    DocstoreConfig,
    LoggingConfig,
)
from docstore.config.paths import get_config_path, get_docstore_home

__all__ = [
    "ConfigError",
    "ConnectionConfig",
    "DocstoreConfig",
    "LoggingConfig",
    "get_config_path",
    "get_docstore_home",
    "load_config",
]
