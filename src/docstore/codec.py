"""BSON conversion between payload models and encoded documents.

Shared by Collection and Document. A payload model is dumped to a mapping,
the reserved ``_id`` field is added, and the result is BSON-encoded. Decoding
reverses this: ``_id`` is extracted and the remainder is validated against the
model. Decoding is strict; any failure raises DecodeError.

Values BSON has no type for (enums, dates, decimals, sets) are written in
their JSON form and validated back by the model. Naive datetimes are stored
as ISO strings so they decode unchanged; aware datetimes become BSON dates
(UTC, millisecond precision).
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any, TypeVar
from uuid import UUID

import bson
from bson.binary import UuidRepresentation
from bson.codec_options import CodecOptions, TypeRegistry
from bson.errors import BSONError
from pydantic import BaseModel, TypeAdapter, ValidationError

from docstore.errors import DecodeError, EncodeError

ID_FIELD = "_id"

_ANY: TypeAdapter[Any] = TypeAdapter(Any)


def _to_json_form(value: Any) -> Any:
    return _ANY.dump_python(value, mode="json")


CODEC_OPTIONS: CodecOptions = CodecOptions(
    tz_aware=True,
    uuid_representation=UuidRepresentation.STANDARD,
    type_registry=TypeRegistry(fallback_encoder=_to_json_form),
)

ModelT = TypeVar("ModelT", bound=BaseModel)


def dump_model(value: BaseModel, id: UUID | None = None) -> dict[str, Any]:
    """Dump a payload model to a BSON-ready mapping.

    When ``id`` is given it is written to ``_id``, replacing any existing value.
    """
    try:
        data = value.model_dump(by_alias=True)
    except ValueError as e:
        raise EncodeError(f"Cannot dump {type(value).__name__}: {e}") from e
    if id is not None:
        data[ID_FIELD] = str(id)
    return data


def _naive_datetimes_to_iso(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat() if value.tzinfo is None else value
    if isinstance(value, Mapping):
        return {k: _naive_datetimes_to_iso(v) for k, v in value.items()}
    if isinstance(value, list | tuple):
        return [_naive_datetimes_to_iso(v) for v in value]
    return value


def encode_mapping(data: Mapping[str, Any]) -> bytes:
    """BSON-encode an arbitrary mapping (documents, filters, update bodies)."""
    try:
        return bson.encode(_naive_datetimes_to_iso(data), codec_options=CODEC_OPTIONS)
    except (BSONError, TypeError, ValueError, OverflowError) as e:
        raise EncodeError(f"Cannot encode document: {e}") from e


def encode_model(value: BaseModel, id: UUID | None = None) -> bytes:
    return encode_mapping(dump_model(value, id))


def id_filter(id: UUID) -> dict[str, Any]:
    """Filter selecting exactly the record with this identifier."""
    return {ID_FIELD: str(id)}


def parse_id(raw: Any) -> UUID:
    if isinstance(raw, UUID):
        return raw
    if isinstance(raw, str):
        try:
            return UUID(raw)
        except ValueError as e:
            raise DecodeError(f"Invalid document identifier: {raw!r}") from e
    raise DecodeError(f"Invalid document identifier type: {type(raw).__name__}")


def decode_mapping(data: bytes) -> dict[str, Any]:
    try:
        return bson.decode(data, codec_options=CODEC_OPTIONS)
    except (BSONError, TypeError, ValueError) as e:
        raise DecodeError(f"Invalid BSON document: {e}") from e


def decode_document(data: bytes, model: type[ModelT]) -> tuple[UUID, ModelT]:
    """Decode a BSON buffer into its identifier and payload.

    Raises:
        DecodeError: If the buffer is not valid BSON, has no ``_id``, or does
            not validate against ``model``.
    """
    doc = decode_mapping(data)
    if ID_FIELD not in doc:
        raise DecodeError("Document has no _id field")
    id = parse_id(doc.pop(ID_FIELD))
    try:
        value = model.model_validate(doc)
    except ValidationError as e:
        raise DecodeError(
            f"Document {id} does not match {model.__name__}: {e}"
        ) from e
    return id, value
