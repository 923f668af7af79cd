"""Configuration models using Pydantic."""

from pathlib import Path
from typing import Literal
from urllib.parse import urlsplit

from pydantic import BaseModel, Field, field_validator

from docstore.errors import DocstoreError
from docstore_rpc_protocol import MAX_MESSAGE_SIZE

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 3010
DEFAULT_TIMEOUT = 30.0

_TCP_SCHEMES = ("tcp", "http", "grpc")


class ConfigError(DocstoreError):
    """Configuration error."""

    pass


class ConnectionConfig(BaseModel):
    """How to reach the document store.

    A Unix socket path takes precedence over host/port when both are set.
    """

    host: str = DEFAULT_HOST
    port: int = Field(default=DEFAULT_PORT, gt=0, le=65535)
    socket_path: Path | None = None
    # None = wait for the server indefinitely
    timeout: float | None = Field(default=DEFAULT_TIMEOUT, gt=0)
    max_message_size: int = Field(default=MAX_MESSAGE_SIZE, gt=0)

    @classmethod
    def from_address(cls, address: str, **kwargs) -> "ConnectionConfig":
        """Build a config from an address string.

        Accepts ``tcp://host:port``, ``http://host:port``, ``host:port`` and
        ``unix:///path/to/socket``.
        """
        text = address.strip()
        if not text:
            raise ConfigError("Empty store address")
        if "://" not in text:
            text = f"tcp://{text}"

        parts = urlsplit(text)
        if parts.scheme == "unix":
            path = parts.path or parts.netloc
            if not path:
                raise ConfigError(f"Missing socket path in address: {address!r}")
            return cls(socket_path=Path(path), **kwargs)

        if parts.scheme not in _TCP_SCHEMES:
            raise ConfigError(f"Unsupported address scheme: {parts.scheme!r}")
        try:
            port = parts.port
        except ValueError as e:
            raise ConfigError(f"Invalid port in address: {address!r}") from e
        return cls(
            host=parts.hostname or DEFAULT_HOST,
            port=port or DEFAULT_PORT,
            **kwargs,
        )

    @property
    def address(self) -> str:
        if self.socket_path is not None:
            return f"unix://{self.socket_path}"
        return f"tcp://{self.host}:{self.port}"


class LoggingConfig(BaseModel):
    """Logging configuration for the CLI."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    @field_validator("level", mode="before")
    @classmethod
    def _upper(cls, v: object) -> object:
        return v.upper() if isinstance(v, str) else v


class DocstoreConfig(BaseModel):
    """Root configuration model."""

    connection: ConnectionConfig = Field(default_factory=ConnectionConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
