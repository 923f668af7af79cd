"""Exception hierarchy for docstore.

Every failure surfaces to the immediate caller; nothing here is retried.

- RemoteOperationError: transport or server fault (carries an RPC status code)
- CodecError: a value could not be encoded, or a response could not be decoded
- CardinalityError: the server reported an unexpected number of affected records
- MalformedResponseError: the server answered but the response lacks required data
- DocumentDeletedError: a deleted document handle was used again
"""

from typing import Any


class DocstoreError(Exception):
    """Base class for all docstore errors."""


class RemoteOperationError(DocstoreError):
    """Remote operation failed."""

    def __init__(self, code: int, message: str, data: Any = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.data = data

    def __str__(self) -> str:
        return f"{self.message} (code {self.code})"


class CodecError(DocstoreError):
    """BSON conversion failed."""


class EncodeError(CodecError):
    """A local value could not be encoded."""


class DecodeError(CodecError):
    """A server-returned document could not be decoded."""


class MalformedResponseError(DocstoreError):
    """The server response is missing a document body or required fields."""


class CardinalityError(DocstoreError):
    """An operation expected to affect one record affected a different number."""

    def __init__(self, message: str, count: int):
        super().__init__(message)
        self.count = count


class NothingInsertedError(CardinalityError):
    pass


class NothingUpdatedError(CardinalityError):
    pass


class NothingRemovedError(CardinalityError):
    pass


class DocumentDeletedError(DocstoreError):
    """The document handle was already deleted."""
