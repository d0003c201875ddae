"""
API endpoints for book records.

Handles HTTP concerns only; storage and domain errors propagate to the
exception handlers registered in ``api.main``.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, status
from fastapi.responses import JSONResponse

from api.dependencies import get_book_service, get_db_manager, get_settings
from api.models import HealthResponse
from books.database import MongoDBManager
from books.service import BookService
from utilities.config import BookServiceConfig

router = APIRouter()


@router.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check(
    db_manager: Optional[MongoDBManager] = Depends(get_db_manager),
    settings: BookServiceConfig = Depends(get_settings)
):
    """Health check endpoint."""
    db_status = "unavailable"
    if db_manager:
        health_info = await db_manager.health_check()
        db_status = health_info.get("status", "unknown")

    return HealthResponse(
        status="healthy" if db_status == "healthy" else "degraded",
        timestamp=datetime.now(timezone.utc),
        version=settings.api_version,
        database_status=db_status
    )


@router.post("/books", status_code=status.HTTP_201_CREATED, tags=["Books"])
async def create_book(
    payload: Dict[str, Any] = Body(...),
    service: BookService = Depends(get_book_service)
):
    """
    Create a new book.

    The body may hold any of bookId, bookName, authorName, publishedYear,
    price and status. Status defaults to 1 (active).
    """
    book = await service.create_book(payload)
    return JSONResponse(status_code=status.HTTP_201_CREATED, content=book.to_response())


@router.put("/books/{document_id}", tags=["Books"])
async def update_book(
    document_id: str,
    payload: Dict[str, Any] = Body(...),
    service: BookService = Depends(get_book_service)
):
    """
    Update fields of a book, including its status.

    - **document_id**: Book identifier assigned on creation
    """
    book = await service.update_book(document_id, payload)
    return JSONResponse(content=book.to_response())


@router.delete("/books/{document_id}", tags=["Books"])
async def delete_book(
    document_id: str,
    service: BookService = Depends(get_book_service)
):
    """Soft-delete a book by setting its status to 0."""
    book = await service.soft_delete_book(document_id)
    return JSONResponse(content=book.to_response())


@router.get("/books", tags=["Books"])
async def list_books(
    page: int = 1,
    limit: Optional[int] = None,
    search: str = "",
    service: BookService = Depends(get_book_service)
):
    """
    List active books with search and pagination.

    - **page**: Page number (starts from 1)
    - **limit**: Books per page (defaults to the configured page size)
    - **search**: Matches book name or author (case-insensitive) or publication year
    """
    result = await service.list_books(page=page, limit=limit, search=search)
    return JSONResponse(content=result.to_response())
