"""
Service layer for book records.

Translates create, update, soft-delete and list requests into single
storage calls and maps the raw documents back to Book models.
"""

import math
from typing import Any, Mapping, Optional, Type, TypeVar

import structlog
from pydantic import BaseModel, ValidationError

from books.exceptions import BookNotFoundError, StorageError
from books.models import Book, BookCreate, BookPage, BookStatus, BookUpdate
from books.storage import BookFilter, BookStorage

logger = structlog.get_logger(__name__)

DEFAULT_PAGE_SIZE = 10

PayloadModel = TypeVar("PayloadModel", bound=BaseModel)


def _coerce(model: Type[PayloadModel], payload: Mapping[str, Any]) -> PayloadModel:
    """Run a payload through the record schema, reporting rejections as storage errors."""
    try:
        return model.model_validate(dict(payload))
    except ValidationError as e:
        logger.warning("Book payload rejected by schema", errors=e.error_count())
        raise StorageError("Book validation failed", cause=e) from e


class BookService:
    """Create, update, soft-delete and search books held in a BookStorage."""

    def __init__(self, storage: BookStorage, default_page_size: int = DEFAULT_PAGE_SIZE):
        self.storage = storage
        self.default_page_size = default_page_size

    async def create_book(self, payload: Mapping[str, Any]) -> Book:
        """
        Insert a new book.

        Args:
            payload: Any subset of the book fields; unknown keys are ignored

        Returns:
            The stored book, including its assigned id and status
        """
        book = _coerce(BookCreate, payload)
        document = await self.storage.create(book.to_document())
        created = Book.from_document(document)
        logger.info("Book created", document_id=created.id)
        return created

    async def update_book(self, document_id: str, payload: Mapping[str, Any]) -> Book:
        """
        Overwrite the supplied fields of an existing book.

        Status is not checked, so soft-deleted books can be updated (and
        restored by setting status back to 1).

        Raises:
            BookNotFoundError: If no book has this id
            StorageError: If the payload is rejected or the store fails
        """
        fields = _coerce(BookUpdate, payload).to_fields()
        if fields:
            document = await self.storage.update(document_id, fields)
        else:
            document = await self.storage.find_by_id(document_id)

        if document is None:
            raise BookNotFoundError(document_id)

        logger.info("Book updated", document_id=document_id, fields=sorted(fields))
        return Book.from_document(document)

    async def soft_delete_book(self, document_id: str) -> Book:
        """
        Mark a book as deleted. Deleting an already deleted book succeeds.

        Raises:
            BookNotFoundError: If no book has this id
        """
        document = await self.storage.update(document_id, {"status": BookStatus.DELETED.value})
        if document is None:
            raise BookNotFoundError(document_id)

        logger.info("Book soft-deleted", document_id=document_id)
        return Book.from_document(document)

    async def list_books(
        self,
        page: int = 1,
        limit: Optional[int] = None,
        search: str = "",
    ) -> BookPage:
        """
        Get one page of active books matching a search term.

        Args:
            page: 1-based page number, echoed back as ``current_page``
            limit: Page size, defaults to the service page size
            search: Matched against name, author and publication year

        Returns:
            BookPage with the books and the total page count
        """
        if limit is None:
            limit = self.default_page_size

        criteria = BookFilter(search=search)
        documents = await self.storage.find_many(criteria, skip=(page - 1) * limit, limit=limit)
        total = await self.storage.count(criteria)

        return BookPage(
            total_pages=math.ceil(total / limit),
            current_page=page,
            books=[Book.from_document(document) for document in documents],
        )
