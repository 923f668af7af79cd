"""RPC transport to the document store.

The core only depends on the Transport protocol: one coroutine that sends a
JSON-RPC method call and returns its result. StreamTransport implements it
over TCP or a Unix domain socket, opening one connection per call so that
concurrent calls from independent tasks never share a stream.

Transport failures (refused connection, closed stream, timeout, error
responses) all raise RemoteOperationError. Nothing is retried.
"""

from __future__ import annotations

import asyncio
import contextlib
import itertools
import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from docstore_rpc_protocol import (
    MAX_MESSAGE_SIZE,
    ErrorCode,
    RPCRequest,
    RPCResponse,
    read_message,
)

from docstore.config.models import DEFAULT_HOST, DEFAULT_PORT, DEFAULT_TIMEOUT
from docstore.errors import RemoteOperationError

if TYPE_CHECKING:
    from docstore.config.models import ConnectionConfig

logger = logging.getLogger(__name__)


@runtime_checkable
class Transport(Protocol):
    """Protocol for sending one RPC call to the store."""

    async def call(self, method: str, params: dict[str, Any]) -> Any:
        """Send a method call and return its result.

        Raises:
            RemoteOperationError: If the call fails for any reason.
        """
        ...


class StreamTransport:
    """JSON-RPC 2.0 over a TCP or Unix domain socket stream."""

    def __init__(
        self,
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
        socket_path: Path | None = None,
        timeout: float | None = DEFAULT_TIMEOUT,
        max_message_size: int = MAX_MESSAGE_SIZE,
    ) -> None:
        self._host = host
        self._port = port
        self._socket_path = socket_path
        self._timeout = timeout
        self._max_message_size = max_message_size
        self._ids = itertools.count(1)

    @classmethod
    def from_config(cls, config: ConnectionConfig) -> StreamTransport:
        return cls(
            host=config.host,
            port=config.port,
            socket_path=config.socket_path,
            timeout=config.timeout,
            max_message_size=config.max_message_size,
        )

    @property
    def address(self) -> str:
        if self._socket_path is not None:
            return f"unix://{self._socket_path}"
        return f"tcp://{self._host}:{self._port}"

    async def call(self, method: str, params: dict[str, Any]) -> Any:
        request = RPCRequest(method=method, params=params, id=next(self._ids))
        logger.debug(
            "rpc_call",
            extra={"rpc.method": method, "rpc.id": request.id, "rpc.address": self.address},
        )

        try:
            response = await asyncio.wait_for(
                self._exchange(request), timeout=self._timeout
            )
        except TimeoutError as e:
            raise RemoteOperationError(
                ErrorCode.DEADLINE_EXCEEDED,
                f"RPC {method} timed out after {self._timeout}s",
            ) from e
        except OSError as e:
            raise RemoteOperationError(
                ErrorCode.UNAVAILABLE,
                f"RPC {method} to {self.address} failed: {e}",
            ) from e

        if response.error is not None:
            logger.debug(
                "rpc_error",
                extra={
                    "rpc.method": method,
                    "rpc.id": request.id,
                    "error.code": response.error.code,
                    "error.message": response.error.message,
                },
            )
            raise RemoteOperationError(
                code=response.error.code,
                message=response.error.message,
                data=response.error.data,
            )
        return response.result

    async def _open(self) -> tuple[asyncio.StreamReader, asyncio.StreamWriter]:
        if self._socket_path is not None:
            return await asyncio.open_unix_connection(str(self._socket_path))
        return await asyncio.open_connection(self._host, self._port)

    async def _exchange(self, request: RPCRequest) -> RPCResponse:
        """Write one request and read its response on a fresh connection."""
        reader, writer = await self._open()
        try:
            writer.write(request.to_bytes())
            await writer.drain()
            data = await read_message(reader, max_size=self._max_message_size)
        except ValueError as e:
            raise RemoteOperationError(ErrorCode.INTERNAL_ERROR, str(e)) from e
        finally:
            writer.close()
            # Response already read
            with contextlib.suppress(OSError):
                await writer.wait_closed()

        if data is None:
            raise ConnectionError("Connection closed by server")

        try:
            payload = json.loads(data)
        except json.JSONDecodeError as e:
            raise RemoteOperationError(
                ErrorCode.PARSE_ERROR, f"Invalid response from server: {e}"
            ) from e
        if not isinstance(payload, dict):
            raise RemoteOperationError(
                ErrorCode.PARSE_ERROR, "Response is not a JSON object"
            )

        response = RPCResponse.from_dict(payload)
        if response.id is not None and response.id != request.id:
            raise RemoteOperationError(
                ErrorCode.INVALID_REQUEST,
                f"Response id {response.id!r} does not match request id {request.id!r}",
            )
        return response
