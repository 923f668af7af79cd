"""Entry point for connecting to a document store."""

from __future__ import annotations

import logging
from typing import TypeVar

from pydantic import BaseModel

from docstore.collection import Collection
from docstore.config.models import ConnectionConfig, DocstoreConfig
from docstore.connection import Connection
from docstore.transport import StreamTransport

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class Database:
    """A store reachable through one shared connection."""

    def __init__(self, connection: Connection) -> None:
        self._connection = connection

    @classmethod
    def connect(
        cls, address: str | None = None, config: DocstoreConfig | None = None
    ) -> Database:
        """Create a database over a stream transport.

        Args:
            address: Store address such as ``tcp://127.0.0.1:3010`` or
                ``unix:///run/docstore.sock``. Overrides the configured one.
            config: Loaded configuration; defaults are used when omitted.
        """
        connection_config = (config or DocstoreConfig()).connection
        if address is not None:
            connection_config = ConnectionConfig.from_address(
                address,
                timeout=connection_config.timeout,
                max_message_size=connection_config.max_message_size,
            )
        transport = StreamTransport.from_config(connection_config)
        logger.debug("database_configured", extra={"rpc.address": transport.address})
        return cls(Connection(transport))

    @property
    def connection(self) -> Connection:
        return self._connection

    def collection(self, name: str, model: type[ModelT]) -> Collection[ModelT]:
        return self._connection.collection(name, model)
