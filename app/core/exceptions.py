"""Domain errors raised by the BMI service and its stores.

The HTTP layer maps each class to a status code (see ``app.main``):

    ValidationError     -> 400
    NotFound            -> 404
    StorageError        -> 500
    DualWriteError      -> 500
    VectorStoreDisabled -> 503
"""

from __future__ import annotations


class BMIServiceError(Exception):
    """Base class for all BMI service errors.

    ``message`` is safe to return to clients; ``detail`` holds the underlying
    driver/client error and is only logged.
    """

    status_code: int = 500

    def __init__(self, message: str, detail: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail


class ValidationError(BMIServiceError):
    """Input rejected before persistence (non-positive height or weight)."""

    status_code = 400


class NotFound(BMIServiceError):
    """No row for the given id."""

    status_code = 404


class StorageError(BMIServiceError):
    """The relational or vector store failed to execute a request."""

    status_code = 500


class DualWriteError(StorageError):
    """Vector write failed after the relational write committed.

    The relational record is not rolled back; ``record_id`` identifies it.
    """

    def __init__(self, message: str, record_id: int | None = None, detail: str | None = None) -> None:
        super().__init__(message, detail)
        self.record_id = record_id


class VectorStoreDisabled(StorageError):
    """A vector operation was requested but no vector store is configured."""

    status_code = 503
