"""Centralized logging configuration for docstore.

The library itself only creates module loggers and never configures
handlers. Entry points (the CLI, or an application embedding docstore) call
configure_logging() once at startup.

Logging Levels:
- DEBUG: Every RPC call and its outcome
- INFO: Not used by library code
- WARNING: Cardinality mismatches, malformed responses
- ERROR: Left to the caller; every failure is raised, not logged

Messages are snake_case event names with structured ``extra`` fields using
dotted keys (``collection.name``, ``document.id``, ``rpc.method``).
"""

import logging
import os

LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

# Attributes present on every LogRecord; anything else came from ``extra``
_RECORD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__.keys()
) | {"message", "asctime", "component"}


class ComponentFormatter(logging.Formatter):
    """Formatter that extracts component name from logger path.

    Converts full module paths to short component names:
    - docstore.collection -> collection
    - docstore.config.loader -> config

    Structured ``extra`` fields are appended as ``key=value`` pairs.
    """

    def format(self, record: logging.LogRecord) -> str:
        parts = record.name.split(".")
        if len(parts) >= 2 and parts[0] == "docstore":
            record.component = parts[1]
        else:
            record.component = parts[0]

        text = super().format(record)
        extra = format_extra(record)
        return f"{text} {extra}" if extra else text


def format_extra(record: logging.LogRecord) -> str:
    """Render the ``extra`` fields of a record as sorted key=value pairs."""
    fields = {
        key: value
        for key, value in record.__dict__.items()
        if key not in _RECORD_ATTRS and not key.startswith("_")
    }
    return " ".join(f"{key}={value}" for key, value in sorted(fields.items()))


def configure_logging(level: str | None = None, use_rich: bool = False) -> None:
    """Configure logging for docstore.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR).
            If None, uses DOCSTORE_LOG_LEVEL env var or INFO.
        use_rich: Use Rich handler for colorful output.
    """
    if level is None:
        level = os.environ.get("DOCSTORE_LOG_LEVEL", "INFO")
    level = level.upper()
    if level not in LEVELS:
        level = "INFO"

    log_level = getattr(logging, level)

    if use_rich:
        from rich.logging import RichHandler

        handler: logging.Handler = RichHandler(
            rich_tracebacks=False,
            show_path=False,
            show_time=True,
            markup=False,
        )
        handler.setFormatter(ComponentFormatter("%(component)s | %(message)s"))
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(
            ComponentFormatter(
                "%(asctime)s | %(levelname)-8s | %(component)s | %(message)s",
                datefmt="%H:%M:%S",
            )
        )

    logging.basicConfig(
        level=log_level,
        handlers=[handler],
        force=True,
    )
