"""JSON-RPC 2.0 protocol implementation."""

import asyncio
import base64
import binascii
import json
import struct
from dataclasses import dataclass, field
from typing import Any

MAX_MESSAGE_SIZE = 10 * 1024 * 1024  # 10MB


# JSON-RPC 2.0 error codes
class ErrorCode:
    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603
    # Implementation-defined server errors (-32000 to -32099)
    UNAVAILABLE = -32001
    DEADLINE_EXCEEDED = -32002


@dataclass
class RPCRequest:
    """JSON-RPC 2.0 request."""

    method: str
    params: dict[str, Any] = field(default_factory=dict)
    id: int | str = 1
    jsonrpc: str = "2.0"

    def to_dict(self) -> dict[str, Any]:
        return {
            "jsonrpc": self.jsonrpc,
            "method": self.method,
            "params": self.params,
            "id": self.id,
        }

    def to_bytes(self) -> bytes:
        """Serialize to length-prefixed bytes."""
        return _frame(self.to_dict())


@dataclass
class RPCError:
    """JSON-RPC 2.0 error."""

    code: int
    message: str
    data: Any = None

    def to_dict(self) -> dict[str, Any]:
        d = {"code": self.code, "message": self.message}
        if self.data is not None:
            d["data"] = self.data
        return d


@dataclass
class RPCResponse:
    """JSON-RPC 2.0 response."""

    id: int | str | None
    result: Any = None
    error: RPCError | None = None
    jsonrpc: str = "2.0"

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.error is not None:
            d["error"] = self.error.to_dict()
        else:
            d["result"] = self.result
        return d

    def to_bytes(self) -> bytes:
        """Serialize to length-prefixed bytes."""
        return _frame(self.to_dict())

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RPCResponse":
        error = None
        if "error" in data:
            err = data["error"]
            if isinstance(err, dict):
                error = RPCError(
                    code=err.get("code", ErrorCode.INTERNAL_ERROR),
                    message=err.get("message", "Unknown error"),
                    data=err.get("data"),
                )
            else:
                # Bare error value
                error = RPCError(code=ErrorCode.INTERNAL_ERROR, message=str(err))
        return cls(
            id=data.get("id"),
            result=data.get("result"),
            error=error,
            jsonrpc=data.get("jsonrpc", "2.0"),
        )


def _frame(payload: dict[str, Any]) -> bytes:
    body = json.dumps(payload).encode()
    return struct.pack("!I", len(body)) + body


def encode_bytes(data: bytes) -> str:
    """Encode a BSON buffer for transport inside a JSON message."""
    return base64.b64encode(data).decode("ascii")


def decode_bytes(text: str) -> bytes:
    """Decode a BSON buffer carried inside a JSON message.

    Raises:
        ValueError: If the text is not valid base64.
    """
    try:
        return base64.b64decode(text.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError) as e:
        raise ValueError(f"Invalid base64 payload: {e}") from e


async def read_message(
    reader: asyncio.StreamReader, max_size: int = MAX_MESSAGE_SIZE
) -> bytes | None:
    """Read a length-prefixed message from an async reader.

    Returns None if connection closed.
    """
    try:
        length_bytes = await reader.readexactly(4)
    except asyncio.IncompleteReadError:
        return None

    length = struct.unpack("!I", length_bytes)[0]
    if length > max_size:
        raise ValueError(f"Message too large: {length}")

    try:
        return await reader.readexactly(length)
    except asyncio.IncompleteReadError:
        return None
