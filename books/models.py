"""
Pydantic models for book records.
Implements the Book schema, its create/update payloads and the list page.

Documents and JSON bodies use camelCase keys (``bookName``); the models
expose snake_case attributes through an alias generator.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# Range of a BSON 64-bit integer
INT64_MIN = -2 ** 63
INT64_MAX = 2 ** 63 - 1


class BookStatus(int, Enum):
    """Enum for the book lifecycle flag."""
    DELETED = 0
    ACTIVE = 1


class BookFields(BaseModel):
    """
    Free-form book fields shared by every book model.

    Coercion mirrors a document-mapper schema: numbers given for text fields
    become strings, numeric strings given for number fields become numbers,
    and unrecognised keys are dropped.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        extra="ignore",
    )

    book_id: Optional[str] = Field(None, description="Caller-assigned book code")
    book_name: Optional[str] = Field(None, description="Title of the book")
    author_name: Optional[str] = Field(None, description="Author of the book")
    published_year: Optional[int] = Field(
        None, ge=INT64_MIN, le=INT64_MAX, description="Year of publication"
    )
    price: Optional[float] = Field(None, description="Price of the book")


class BookCreate(BookFields):
    """Payload accepted when creating a book."""
    status: BookStatus = Field(BookStatus.ACTIVE, description="1 active, 0 deleted")

    @field_validator("status", mode="before")
    @classmethod
    def default_status(cls, v):
        """Treat an explicit null status as unset."""
        if v is None:
            return BookStatus.ACTIVE
        return v

    def to_document(self) -> Dict[str, Any]:
        """Build the document to insert: supplied fields plus the status flag."""
        document = self.model_dump(by_alias=True, mode="json", exclude_unset=True)
        document["status"] = self.status.value
        return document


class BookUpdate(BookFields):
    """Partial payload accepted when updating a book."""
    status: Optional[BookStatus] = Field(None, description="1 active, 0 deleted")

    @field_validator("status")
    @classmethod
    def status_not_null(cls, v):
        """A stored book always carries a status."""
        if v is None:
            raise ValueError("status cannot be null")
        return v

    def to_fields(self) -> Dict[str, Any]:
        """Only the fields the caller actually supplied."""
        return self.model_dump(by_alias=True, mode="json", exclude_unset=True)


class Book(BookFields):
    """A stored book as returned to callers."""
    id: str = Field(..., description="Store-assigned unique identifier")
    status: BookStatus = Field(..., description="1 active, 0 deleted")

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "Book":
        """Build a Book from a raw store document keyed by ``_id``."""
        data = dict(document)
        data["id"] = str(data.pop("_id"))
        return cls.model_validate(data)

    def to_response(self) -> Dict[str, Any]:
        """JSON body for this book; fields absent from the document are omitted."""
        return self.model_dump(by_alias=True, mode="json", exclude_unset=True)


class BookPage(BaseModel):
    """One page of the active-book listing."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total_pages: int = Field(..., description="Total number of pages")
    current_page: int = Field(..., description="Requested page number")
    books: List[Book] = Field(default_factory=list, description="Books on this page")

    def to_response(self) -> Dict[str, Any]:
        return {
            "totalPages": self.total_pages,
            "currentPage": self.current_page,
            "books": [book.to_response() for book in self.books],
        }
