"""Public types for the docstore client.

Response models validate the JSON results returned by the store's RPC
methods. Encoded documents travel as base64 strings and are validated into
raw BSON bytes; decoding them into payload models happens in the collection
layer.
"""

from pydantic import BaseModel, Base64Bytes, ConfigDict, Field

# =============================================================================
# RPC Responses
# =============================================================================


class InsertedDocument(BaseModel):
    """One entry of an insert response; the body may be absent."""

    document: Base64Bytes | None = None


class InsertResult(BaseModel):
    """Result of ``insert``.

    ``count`` is reported by the server independently of ``inserts`` so that
    "accepted but nothing returned" can be told apart from "nothing accepted".
    """

    count: int = Field(ge=0)
    inserts: list[InsertedDocument] = Field(default_factory=list)


class UpdateResult(BaseModel):
    """Result of ``update``: the post-update documents."""

    updated: list[Base64Bytes] = Field(default_factory=list)


class RemoveResult(BaseModel):
    count: int = Field(ge=0)


class GetResult(BaseModel):
    """Result of ``get``; an absent document means not found."""

    document: Base64Bytes | None = None


class FindResult(BaseModel):
    documents: list[Base64Bytes] = Field(default_factory=list)


# =============================================================================
# Payloads
# =============================================================================


class RawDocument(BaseModel):
    """Untyped payload that keeps every field the server returns."""

    model_config = ConfigDict(extra="allow")
