"""Configuration loading from TOML files and environment variables."""

import logging
import os
import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from docstore.config.models import ConfigError, DocstoreConfig
from docstore.config.paths import get_config_path

logger = logging.getLogger(__name__)

# (section, key, environment variable)
ENV_OVERRIDES: list[tuple[str, str, str]] = [
    ("connection", "host", "DOCSTORE_HOST"),
    ("connection", "port", "DOCSTORE_PORT"),
    ("connection", "socket_path", "DOCSTORE_SOCKET"),
    ("connection", "timeout", "DOCSTORE_TIMEOUT"),
    ("logging", "level", "DOCSTORE_LOG_LEVEL"),
]


def _get_default_config_paths() -> list[Path]:
    """Get ordered list of default config file locations."""
    return [
        Path("docstore.toml"),  # Current directory
        get_config_path(),  # ~/.docstore/config.toml (or DOCSTORE_HOME)
    ]


def _apply_env_overrides(config: dict[str, Any]) -> dict[str, Any]:
    """Overlay environment variables onto raw config values."""
    for section_key, key, env_var in ENV_OVERRIDES:
        value = os.environ.get(env_var)
        if not value:
            continue
        section = config.get(section_key)
        if section is None:
            section = config[section_key] = {}
        elif not isinstance(section, dict):
            raise ConfigError(
                f"Invalid configuration: [{section_key}] must be a table "
                f"to apply {env_var}"
            )
        section[key] = value
    return config


def load_config(path: Path | None = None) -> DocstoreConfig:
    """Load configuration from TOML file.

    Args:
        path: Explicit path to config file. If None, searches default locations
            and falls back to defaults when none exists.

    Returns:
        Validated DocstoreConfig instance.

    Raises:
        FileNotFoundError: If an explicit path does not exist.
        ConfigError: If the file is not valid TOML or fails validation.
    """
    config_path: Path | None = None

    if path is not None:
        config_path = Path(path).expanduser()
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
    else:
        for default_path in _get_default_config_paths():
            expanded = default_path.expanduser()
            if expanded.exists():
                config_path = expanded
                break

    raw_config: dict[str, Any] = {}
    if config_path is not None:
        try:
            with config_path.open("rb") as f:
                raw_config = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid TOML in {config_path}: {e}") from e
        logger.debug("config_loaded", extra={"config.path": str(config_path)})

    raw_config = _apply_env_overrides(raw_config)

    try:
        return DocstoreConfig.model_validate(raw_config)
    except ValidationError as e:
        source = config_path or "environment"
        raise ConfigError(f"Invalid configuration ({source}): {e}") from e
