"""
MongoDB storage for book documents.
Handles connection, indexing, and CRUD operations for the books collection.
"""

from typing import Any, Dict, List, Optional

import structlog
from bson import ObjectId
from bson.errors import InvalidDocument
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import ConnectionFailure, PyMongoError

from books.exceptions import StorageError
from books.query import build_search_query
from books.storage import BookFilter

logger = structlog.get_logger(__name__)

# Encoding failures are raised by bson, outside the PyMongoError hierarchy
_STORAGE_ERRORS = (PyMongoError, InvalidDocument, OverflowError)


class MongoDBManager:
    """
    Async MongoDB manager for book documents.
    Implements the BookStorage protocol on top of a motor collection.
    """

    def __init__(self, connection_url: str, database_name: str, collection_name: str):
        """
        Initialize MongoDB manager.

        Args:
            connection_url: MongoDB connection URL
            database_name: Name of the database
            collection_name: Name of the collection
        """
        self.connection_url = connection_url
        self.database_name = database_name
        self.collection_name = collection_name
        self.client: Optional[AsyncIOMotorClient] = None
        self.database: Optional[AsyncIOMotorDatabase] = None
        self.collection: Optional[AsyncIOMotorCollection] = None

    async def connect(self) -> None:
        """Establish connection to MongoDB."""
        try:
            self.client = AsyncIOMotorClient(self.connection_url)
            self.database = self.client[self.database_name]
            self.collection = self.database[self.collection_name]

            # Test connection
            await self.client.admin.command("ping")
            logger.info("Successfully connected to MongoDB",
                        database=self.database_name,
                        collection=self.collection_name)

            await self._create_indexes()

        except ConnectionFailure as e:
            logger.error("Failed to connect to MongoDB", error=str(e))
            raise

    async def disconnect(self) -> None:
        """Close MongoDB connection."""
        if self.client:
            self.client.close()
            self.client = None
            self.database = None
            self.collection = None
            logger.info("Disconnected from MongoDB")

    async def _create_indexes(self) -> None:
        """Create indexes for the listing query."""
        try:
            # Every listing filters on status
            await self.collection.create_index("status")

            # Year lookups within active books
            await self.collection.create_index([("status", 1), ("publishedYear", 1)])

            logger.info("Successfully created MongoDB indexes")

        except Exception as e:
            logger.error("Failed to create indexes", error=str(e))
            raise

    def _get_collection(self) -> AsyncIOMotorCollection:
        if self.collection is None:
            raise StorageError("MongoDB connection is not established")
        return self.collection

    @staticmethod
    def _to_object_id(document_id: str) -> Optional[ObjectId]:
        """Parse an identifier; malformed identifiers cannot match any document."""
        if not ObjectId.is_valid(document_id):
            return None
        return ObjectId(document_id)

    async def create(self, document: Dict[str, Any]) -> Dict[str, Any]:
        """
        Insert a single book document.

        Args:
            document: Book fields to store

        Returns:
            The stored document including its ``_id``
        """
        collection = self._get_collection()
        document = dict(document)
        try:
            result = await collection.insert_one(document)
        except _STORAGE_ERRORS as e:
            logger.error("Failed to insert book", error=str(e))
            raise StorageError("Failed to create book", cause=e) from e

        document["_id"] = result.inserted_id
        logger.debug("Successfully inserted book", document_id=str(result.inserted_id))
        return document

    async def find_by_id(self, document_id: str) -> Optional[Dict[str, Any]]:
        """
        Get a single book document by ID.

        Args:
            document_id: Hex string of the document ObjectId

        Returns:
            The document if found, None otherwise
        """
        collection = self._get_collection()
        object_id = self._to_object_id(document_id)
        if object_id is None:
            return None

        try:
            return await collection.find_one({"_id": object_id})
        except _STORAGE_ERRORS as e:
            logger.error("Failed to get book by ID", document_id=document_id, error=str(e))
            raise StorageError("Failed to retrieve book", cause=e) from e

    async def update(self, document_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Overwrite fields of a book document in place.

        Args:
            document_id: Hex string of the document ObjectId
            fields: Field values to set

        Returns:
            The document after the update, None if it does not exist
        """
        collection = self._get_collection()
        object_id = self._to_object_id(document_id)
        if object_id is None:
            return None

        try:
            document = await collection.find_one_and_update(
                {"_id": object_id},
                {"$set": fields},
                return_document=ReturnDocument.AFTER,
            )
        except _STORAGE_ERRORS as e:
            logger.error("Failed to update book", document_id=document_id, error=str(e))
            raise StorageError("Failed to update book", cause=e) from e

        logger.debug("Book update applied", document_id=document_id, found=document is not None)
        return document

    async def find_many(self, criteria: BookFilter, skip: int, limit: int) -> List[Dict[str, Any]]:
        """
        Get a page of book documents matching the criteria, in insertion order.

        Args:
            criteria: Search criteria
            skip: Number of matching documents to skip
            limit: Maximum number of documents to return

        Returns:
            List of matching documents
        """
        if skip < 0 or limit < 1:
            raise StorageError(f"Invalid pagination: skip={skip}, limit={limit}")

        collection = self._get_collection()
        filter_query = build_search_query(criteria)
        try:
            cursor = collection.find(filter_query).sort("_id", 1).skip(skip).limit(limit)
            return await cursor.to_list(length=limit)
        except _STORAGE_ERRORS as e:
            logger.error("Failed to get books", search=criteria.search, error=str(e))
            raise StorageError("Failed to retrieve books", cause=e) from e

    async def count(self, criteria: BookFilter) -> int:
        """Count book documents matching the criteria."""
        collection = self._get_collection()
        try:
            return await collection.count_documents(build_search_query(criteria))
        except _STORAGE_ERRORS as e:
            logger.error("Failed to count books", search=criteria.search, error=str(e))
            raise StorageError("Failed to count books", cause=e) from e

    async def health_check(self) -> Dict[str, Any]:
        """
        Perform database health check.

        Returns:
            Dictionary with health status
        """
        if self.database is None:
            return {"status": "unhealthy", "error": "not connected"}

        try:
            await self.database.command("ping")
            books_count = await self._get_collection().count_documents({})
            return {
                "status": "healthy",
                "books_collection": "accessible",
                "books_count": books_count,
            }
        except _STORAGE_ERRORS as e:
            logger.error("Database health check failed", error=str(e))
            return {
                "status": "unhealthy",
                "error": str(e),
            }
