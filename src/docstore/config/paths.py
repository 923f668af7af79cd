"""Centralized path management for docstore.

The base directory can be overridden with the DOCSTORE_HOME environment variable.

Default locations:
- Linux/macOS: ~/.docstore
- Windows: %USERPROFILE%\\.docstore
"""

import os
from pathlib import Path

ENV_VAR = "DOCSTORE_HOME"


def get_docstore_home() -> Path:
    """Get the base directory for docstore configuration.

    Resolution order:
    1. DOCSTORE_HOME environment variable (if set)
    2. ~/.docstore
    """
    if env_home := os.environ.get(ENV_VAR):
        return Path(env_home).expanduser()
    return Path.home() / ".docstore"


def get_config_path() -> Path:
    """Get the path to the user config file."""
    return get_docstore_home() / "config.toml"
