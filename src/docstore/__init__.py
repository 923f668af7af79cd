"""Typed client for a remote document store.

Public API:
- Database: entry point built from an address or configuration
- Connection: untyped store primitives over a Transport
- Collection, Document: typed collection views and record handles
- StreamTransport, Transport: RPC transport and its protocol

Errors live in docstore.errors.
"""

from docstore.collection import Collection, Document
from docstore.connection import Connection
from docstore.database import Database
from docstore.errors import (
    CardinalityError,
    CodecError,
    DecodeError,
    DocstoreError,
    DocumentDeletedError,
    EncodeError,
    MalformedResponseError,
    NothingInsertedError,
    NothingRemovedError,
    NothingUpdatedError,
    RemoteOperationError,
)
from docstore.transport import StreamTransport, Transport
from docstore.types import RawDocument

__all__ = [
    # Core
    "Collection",
    "Connection",
    "Database",
    "Document",
    "RawDocument",
    # Transport
    "StreamTransport",
    "Transport",
    # Errors
    "CardinalityError",
    "CodecError",
    "DecodeError",
    "DocstoreError",
    "DocumentDeletedError",
    "EncodeError",
    "MalformedResponseError",
    "NothingInsertedError",
    "NothingRemovedError",
    "NothingUpdatedError",
    "RemoteOperationError",
]
