"""Typed collections and document handles.

A Collection is a typed, named view into one remote collection. Every
document it returns is decoded into the collection's payload model, and any
document that fails to decode fails the whole call.

A Document is a handle bound to one remote record by identifier. Its payload
(``document``) may be mutated freely; ``sync()`` pushes the current payload
back to the server and ``delete()`` removes the record and retires the handle.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, TypeVar
from uuid import UUID

from pydantic import BaseModel

from docstore.codec import decode_document, dump_model, encode_model, id_filter
from docstore.errors import (
    DocumentDeletedError,
    MalformedResponseError,
    NothingInsertedError,
    NothingRemovedError,
    NothingUpdatedError,
)

if TYPE_CHECKING:
    from docstore.connection import Connection

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class Document(Generic[ModelT]):
    """Handle on one remote record.

    States are live and deleted. A handle starts live; a successful
    ``delete()`` moves it to deleted, after which ``sync()`` and ``delete()``
    raise DocumentDeletedError without contacting the server.
    """

    def __init__(self, id: UUID, collection: Collection[ModelT], document: ModelT):
        self._id = id
        self.collection = collection
        self.document = document
        self._deleted = False

    @classmethod
    def create(
        cls, id: UUID, collection: Collection[ModelT], document: ModelT
    ) -> Document[ModelT]:
        """Bind a payload to a known identifier without contacting the server."""
        return cls(id, collection, document)

    @classmethod
    def from_bson(cls, data: bytes, collection: Collection[ModelT]) -> Document[ModelT]:
        id, value = decode_document(data, collection.model)
        return cls(id, collection, value)

    @property
    def id(self) -> UUID:
        return self._id

    @property
    def deleted(self) -> bool:
        return self._deleted

    def to_document(self) -> dict[str, Any]:
        """Payload as a BSON-ready mapping including ``_id``."""
        return dump_model(self.document, self._id)

    def to_bson(self) -> bytes:
        return encode_model(self.document, self._id)

    async def sync(self) -> None:
        """Overwrite the remote record with the current local payload.

        The server reports which records it updated; an empty report means
        the record is gone, and this raises instead of succeeding silently.

        Raises:
            DocumentDeletedError: If this handle was deleted.
            NothingUpdatedError: If no record with this identifier exists.
            RemoteOperationError: If the update call fails.
        """
        self._ensure_live("sync")
        updated = await self.collection.update(
            id_filter(self._id), self.to_document(), limit=1
        )
        if not updated:
            logger.warning(
                "document_sync_no_match",
                extra={
                    "collection.name": self.collection.name,
                    "document.id": str(self._id),
                },
            )
            raise NothingUpdatedError("no document was updated.", count=0)

    async def delete(self) -> None:
        """Remove the remote record and retire this handle.

        Raises:
            DocumentDeletedError: If this handle was already deleted.
            NothingRemovedError: If the server did not remove exactly one record.
            RemoteOperationError: If the remove call fails.
        """
        self._ensure_live("delete")
        removed = await self.collection.remove(id_filter(self._id), limit=1)
        if removed != 1:
            logger.warning(
                "document_delete_count_mismatch",
                extra={
                    "collection.name": self.collection.name,
                    "document.id": str(self._id),
                    "count": removed,
                },
            )
            raise NothingRemovedError("no document was removed.", count=removed)
        self._deleted = True

    def _ensure_live(self, operation: str) -> None:
        if self._deleted:
            raise DocumentDeletedError(
                f"cannot {operation} document {self._id}: it was deleted"
            )

    def __repr__(self) -> str:
        return f"Document({self._id}, {self.document!r})"


@dataclass(frozen=True)
class Collection(Generic[ModelT]):
    """Typed view into one named remote collection.

    Collections are immutable and cheap to copy; documents hold a reference
    to the collection they came from.
    """

    name: str
    connection: Connection
    model: type[ModelT]

    async def insert(self, value: ModelT) -> Document[ModelT]:
        """Insert one value and return its handle with the server-assigned id.

        Raises:
            NothingInsertedError: If the server reports zero insertions.
            MalformedResponseError: If no document body comes back.
        """
        result = await self.connection.insert(self.name, encode_model(value), True)
        if result.count == 0:
            logger.warning("insert_nothing_inserted", extra={"collection.name": self.name})
            raise NothingInsertedError("no documents inserted.", count=0)
        if not result.inserts or result.inserts[0].document is None:
            raise MalformedResponseError("no document returned")

        doc = self._decode(result.inserts[0].document)
        logger.debug(
            "document_inserted",
            extra={"collection.name": self.name, "document.id": str(doc.id)},
        )
        return doc

    async def insert_many(self, values: Sequence[ModelT]) -> list[Document[ModelT]]:
        """Insert values in one call; every inserted document is returned.

        Raises:
            NothingInsertedError: If the server reports zero insertions.
            MalformedResponseError: If any returned entry has no document body.
        """
        encoded = [encode_model(v) for v in values]
        result = await self.connection.insert_many(self.name, encoded, True)
        if result.count == 0:
            logger.warning("insert_nothing_inserted", extra={"collection.name": self.name})
            raise NothingInsertedError("no documents inserted.", count=0)

        docs = []
        for entry in result.inserts:
            if entry.document is None:
                raise MalformedResponseError("document data missing")
            docs.append(self._decode(entry.document))
        logger.debug(
            "documents_inserted",
            extra={"collection.name": self.name, "count": len(docs)},
        )
        return docs

    async def update(
        self,
        filter: Mapping[str, Any],
        updates: Mapping[str, Any],
        limit: int | None = None,
    ) -> list[Document[ModelT]]:
        """Apply an update and return every document the server updated.

        ``filter`` and ``updates`` use the store's own grammar and are passed
        through unchanged.
        """
        result = await self.connection.update(self.name, filter, updates, limit)
        docs = self._decode_all(result.updated)
        logger.debug(
            "documents_updated",
            extra={"collection.name": self.name, "count": len(docs)},
        )
        return docs

    async def remove(self, filter: Mapping[str, Any], limit: int | None = None) -> int:
        """Remove matching records and return how many were removed."""
        result = await self.connection.remove(self.name, filter, limit)
        logger.debug(
            "documents_removed",
            extra={"collection.name": self.name, "count": result.count},
        )
        return result.count

    async def find(
        self, filter: Mapping[str, Any], limit: int | None = None
    ) -> list[Document[ModelT]]:
        result = await self.connection.find(self.name, filter, limit)
        return self._decode_all(result.documents)

    async def find_all(self, limit: int | None = None) -> list[Document[ModelT]]:
        """Return every record, up to ``limit``."""
        result = await self.connection.find(self.name, None, limit)
        return self._decode_all(result.documents)

    async def get(self, id: UUID) -> Document[ModelT] | None:
        """Get a record by identifier, or None if it does not exist."""
        result = await self.connection.get(self.name, str(id))
        if result.document is None:
            return None
        return self._decode(result.document)

    async def truncate(self) -> int:
        """Remove every record in the collection."""
        return await self.remove({}, None)

    def _decode(self, data: bytes) -> Document[ModelT]:
        return Document.from_bson(data, self)

    def _decode_all(self, items: Sequence[bytes]) -> list[Document[ModelT]]:
        return [self._decode(data) for data in items]
