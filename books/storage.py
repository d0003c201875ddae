"""
Storage interface for book documents.

The service layer depends only on this protocol. Implementations deal in
raw documents: mappings keyed by the camelCase field names plus the
store-assigned ``_id``.
"""

from typing import Any, Dict, List, Optional, Protocol

from pydantic import BaseModel, Field

from books.models import BookStatus


class BookFilter(BaseModel):
    """Criteria for listing books."""
    search: str = Field("", description="Free-text search term")
    status: BookStatus = Field(BookStatus.ACTIVE, description="Only books with this status")


class BookStorage(Protocol):
    """
    Port for persisting and retrieving book documents.

    Implementations should raise StorageError for any persistence failure
    and return None (never raise) when a document does not exist.
    """

    async def create(self, document: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a document and return it with its assigned ``_id``."""
        ...

    async def find_by_id(self, document_id: str) -> Optional[Dict[str, Any]]:
        """Return the document with this identifier, or None."""
        ...

    async def update(self, document_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Overwrite the given fields and return the updated document, or None."""
        ...

    async def find_many(self, criteria: BookFilter, skip: int, limit: int) -> List[Dict[str, Any]]:
        """
        Return up to ``limit`` matching documents after skipping ``skip``.

        Raises:
            StorageError: If skip is negative or limit is not positive
        """
        ...

    async def count(self, criteria: BookFilter) -> int:
        """Count all documents matching the criteria."""
        ...
