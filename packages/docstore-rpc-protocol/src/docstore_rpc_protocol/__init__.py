"""JSON-RPC 2.0 protocol for docstore client/server communication."""

from docstore_rpc_protocol.protocol import (
    MAX_MESSAGE_SIZE,
    ErrorCode,
    RPCError,
    RPCRequest,
    RPCResponse,
    decode_bytes,
    encode_bytes,
    read_message,
)

__all__ = [
    "MAX_MESSAGE_SIZE",
    "ErrorCode",
    "RPCError",
    "RPCRequest",
    "RPCResponse",
    "decode_bytes",
    "encode_bytes",
    "read_message",
]
