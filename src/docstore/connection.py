"""Store connection: six untyped primitives over an RPC transport.

The connection forwards encoded documents and collection names to the store
and validates the shape of each result. It knows nothing about payload
models or identity; that lives in docstore.collection.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, TypeVar

from docstore_rpc_protocol import encode_bytes
from pydantic import BaseModel, ValidationError

from docstore.codec import encode_mapping
from docstore.collection import Collection
from docstore.errors import MalformedResponseError
from docstore.transport import Transport
from docstore.types import (
    FindResult,
    GetResult,
    InsertResult,
    RemoveResult,
    UpdateResult,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)
ResultT = TypeVar("ResultT", bound=BaseModel)


class Connection:
    """Thin facade over a Transport.

    Copies made with ``copy()`` share the same transport, so handing a
    connection to many collections costs nothing.
    """

    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    @property
    def transport(self) -> Transport:
        return self._transport

    def copy(self) -> Connection:
        return Connection(self._transport)

    def collection(self, name: str, model: type[ModelT]) -> Collection[ModelT]:
        """Get a typed view of the named collection."""
        return Collection(name=name, connection=self, model=model)

    async def insert(
        self, collection: str, document: bytes, return_old: bool = True
    ) -> InsertResult:
        return await self.insert_many(collection, [document], return_old)

    async def insert_many(
        self, collection: str, documents: list[bytes], return_old: bool = True
    ) -> InsertResult:
        params = {
            "collection": collection,
            "documents": [encode_bytes(d) for d in documents],
            "return_old": return_old,
        }
        return await self._call("insert", params, InsertResult)

    async def update(
        self,
        collection: str,
        filter: Mapping[str, Any],
        updates: Mapping[str, Any],
        limit: int | None = None,
    ) -> UpdateResult:
        params = {
            "collection": collection,
            "filter": encode_bytes(encode_mapping(filter)),
            "updates": encode_bytes(encode_mapping(updates)),
        }
        if limit is not None:
            params["limit"] = limit
        return await self._call("update", params, UpdateResult)

    async def remove(
        self,
        collection: str,
        filter: Mapping[str, Any],
        limit: int | None = None,
    ) -> RemoveResult:
        params = {
            "collection": collection,
            "filter": encode_bytes(encode_mapping(filter)),
        }
        if limit is not None:
            params["limit"] = limit
        return await self._call("remove", params, RemoveResult)

    async def get(self, collection: str, id: str) -> GetResult:
        params = {"collection": collection, "id": id}
        return await self._call("get", params, GetResult)

    async def find(
        self,
        collection: str,
        filter: Mapping[str, Any] | None = None,
        limit: int | None = None,
    ) -> FindResult:
        """Find documents; a filter of None matches every record."""
        params: dict[str, Any] = {"collection": collection}
        if filter is not None:
            params["filter"] = encode_bytes(encode_mapping(filter))
        if limit is not None:
            params["limit"] = limit
        return await self._call("find", params, FindResult)

    async def _call(
        self, method: str, params: dict[str, Any], result_type: type[ResultT]
    ) -> ResultT:
        result = await self._transport.call(method, params)
        try:
            return result_type.model_validate(result)
        except ValidationError as e:
            logger.warning(
                "malformed_response",
                extra={"rpc.method": method, "collection.name": params["collection"]},
            )
            raise MalformedResponseError(
                f"Malformed {method} response: {e}"
            ) from e
