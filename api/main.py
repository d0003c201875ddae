"""
FastAPI main application for the Book Records API.
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from api.models import ErrorResponse
from api.routes import router
from books.database import MongoDBManager
from books.exceptions import BookNotFoundError, StorageError
from books.service import BookService
from utilities.config import BookServiceConfig, config

logger = structlog.get_logger(__name__)


def create_app(settings: Optional[BookServiceConfig] = None) -> FastAPI:
    """
    Build the FastAPI application.

    The MongoDB connection is opened when the application starts and closed
    when it stops; the service is attached to ``app.state``.
    """
    settings = settings or config

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager."""
        logger.info("Starting Book Records API")

        db_manager = MongoDBManager(
            settings.mongodb_url,
            settings.mongodb_database,
            settings.mongodb_collection,
        )
        try:
            await db_manager.connect()
        except Exception as e:
            logger.error("Failed to connect to database", error=str(e))
            await db_manager.disconnect()
            raise

        app.state.db_manager = db_manager
        app.state.book_service = BookService(db_manager, default_page_size=settings.default_page_size)

        yield

        logger.info("Shutting down Book Records API")
        app.state.book_service = None
        app.state.db_manager = None
        await db_manager.disconnect()

    app = FastAPI(
        title=settings.api_title,
        description="Create, update, soft-delete and search book records.",
        version=settings.api_version,
        lifespan=lifespan
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    @app.exception_handler(BookNotFoundError)
    async def book_not_found_handler(request: Request, exc: BookNotFoundError):
        """Handle lookups of unknown books."""
        return PlainTextResponse("Book not found", status_code=status.HTTP_404_NOT_FOUND)

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError):
        """Handle storage failures."""
        logger.error("Storage error", error=exc.message, detail=exc.detail, path=request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorResponse(
                error=exc.message,
                detail=exc.detail,
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
            ).model_dump()
        )

    app.include_router(router)
    return app


app = create_app()
