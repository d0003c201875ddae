"""
Pytest configuration and shared fixtures.
"""

import copy
import re
from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from api.dependencies import get_book_service
from api.main import create_app
from books.exceptions import StorageError
from books.query import parse_year
from books.service import BookService
from books.storage import BookFilter


class InMemoryBookStorage:
    """BookStorage kept in a dict, matching the MongoDB search semantics."""

    def __init__(self):
        self.documents: Dict[str, Dict[str, Any]] = {}

    async def create(self, document: Dict[str, Any]) -> Dict[str, Any]:
        stored = dict(document)
        stored["_id"] = ObjectId()
        self.documents[str(stored["_id"])] = stored
        return copy.deepcopy(stored)

    async def find_by_id(self, document_id: str) -> Optional[Dict[str, Any]]:
        document = self.documents.get(document_id)
        return copy.deepcopy(document) if document else None

    async def update(self, document_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        document = self.documents.get(document_id)
        if document is None:
            return None
        document.update(fields)
        return copy.deepcopy(document)

    def _matches(self, document: Dict[str, Any], criteria: BookFilter) -> bool:
        if document.get("status") != criteria.status.value:
            return False
        pattern = re.compile(re.escape(criteria.search), re.IGNORECASE)
        for field in ("bookName", "authorName"):
            value = document.get(field)
            if isinstance(value, str) and pattern.search(value):
                return True
        year = parse_year(criteria.search)
        return year is not None and document.get("publishedYear") == year

    async def find_many(self, criteria: BookFilter, skip: int, limit: int) -> List[Dict[str, Any]]:
        if skip < 0 or limit < 1:
            raise StorageError(f"Invalid pagination: skip={skip}, limit={limit}")
        matching = [d for d in self.documents.values() if self._matches(d, criteria)]
        return copy.deepcopy(matching[skip:skip + limit])

    async def count(self, criteria: BookFilter) -> int:
        return sum(1 for d in self.documents.values() if self._matches(d, criteria))


@pytest.fixture
def storage():
    """Create an empty in-memory book storage."""
    return InMemoryBookStorage()


@pytest.fixture
def book_service(storage):
    """Create a book service over the in-memory storage."""
    return BookService(storage)


@pytest.fixture
def failing_storage():
    """Create a storage mock whose every operation fails."""
    error = StorageError("Failed to reach database", cause=ConnectionError("connection refused"))
    mock = AsyncMock()
    for name in ("create", "find_by_id", "update", "find_many", "count"):
        getattr(mock, name).side_effect = error
    return mock


@pytest.fixture
def app():
    """Create an application without running its MongoDB lifespan."""
    return create_app()


@pytest.fixture
def client(app, book_service):
    """Create test client backed by the in-memory service."""
    app.dependency_overrides[get_book_service] = lambda: book_service
    return TestClient(app)


@pytest.fixture
def sample_book_payload():
    """Create sample book payload for testing."""
    return {
        "bookId": "B-001",
        "bookName": "Dune",
        "authorName": "Herbert",
        "publishedYear": 1965,
        "price": 15,
    }
