"""
Errors raised by the book service and its storage layer.
"""

from typing import Optional


class BookServiceError(Exception):
    """Base class for book service errors."""


class BookNotFoundError(BookServiceError):
    """Raised when no document exists for the given identifier."""

    def __init__(self, document_id: str):
        self.document_id = document_id
        super().__init__(f"Book '{document_id}' not found")


class StorageError(BookServiceError):
    """
    Raised for any failure coming from the persistence layer.

    Schema rejections (values the record schema cannot coerce) are reported
    through this error as well, as a document store would.
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.message = message
        self.cause = cause
        super().__init__(message)

    @property
    def detail(self) -> Optional[str]:
        """Text of the underlying error, if any."""
        if self.cause is None:
            return None
        return str(self.cause)
