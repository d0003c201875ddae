"""
FastAPI dependencies for dependency injection.

The storage handle and the service built on it are created by the
application lifespan and kept on ``app.state``; these dependencies hand
them to the endpoints.
"""

from typing import Optional

from fastapi import Request

from books.database import MongoDBManager
from books.exceptions import StorageError
from books.service import BookService
from utilities.config import BookServiceConfig, config


def get_book_service(request: Request) -> BookService:
    """Provide the book service bound to the running application."""
    service: Optional[BookService] = getattr(request.app.state, "book_service", None)
    if service is None:
        raise StorageError("Database service not available")
    return service


def get_db_manager(request: Request) -> Optional[MongoDBManager]:
    """Provide the MongoDB manager, or None before startup has connected it."""
    return getattr(request.app.state, "db_manager", None)


def get_settings(request: Request) -> BookServiceConfig:
    """Provide the settings the application was created with."""
    return getattr(request.app.state, "settings", config)
