"""MongoDB implementation of document database."""

import time
from typing import Any

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from src.commons.infrastructure.documentdb.base import DocumentDBBase, HealthStatus


class MongoDBDocumentDB(DocumentDBBase):
    """MongoDB implementation of document database.

    Uses Motor for async operations. The domain 'id' is stored as MongoDB's
    '_id', so the collection's built-in unique index on '_id' is what makes
    ``insert_if_absent`` atomic.
    """

    def __init__(
        self,
        connection_string: str,
        database_name: str,
    ) -> None:
        """Initialize MongoDB client.

        Args:
            connection_string: MongoDB connection URI.
            database_name: Name of the database to use.
        """
        self._client: AsyncIOMotorClient[dict[str, Any]] = AsyncIOMotorClient(
            connection_string
        )
        self._db: AsyncIOMotorDatabase[dict[str, Any]] = self._client[database_name]
        self._database_name = database_name

    @staticmethod
    def _to_mongo(document: dict[str, Any]) -> dict[str, Any]:
        doc = document.copy()
        if "id" in doc:
            doc["_id"] = doc.pop("id")
        return doc

    @staticmethod
    def _from_mongo(doc: dict[str, Any]) -> dict[str, Any]:
        doc["id"] = str(doc.pop("_id"))
        return dict(doc)

    async def insert_if_absent(
        self,
        collection: str,
        document: dict[str, Any],
    ) -> bool:
        """Insert a document, treating a duplicate '_id' as already present."""
        if "id" not in document:
            msg = "insert_if_absent requires an 'id' field"
            raise ValueError(msg)

        try:
            await self._db[collection].insert_one(self._to_mongo(document))
        except DuplicateKeyError:
            return False
        return True

    async def find_by_id(
        self,
        collection: str,
        document_id: str,
    ) -> dict[str, Any] | None:
        """Find a document by its '_id' and restore the 'id' field."""
        doc = await self._db[collection].find_one({"_id": document_id})
        if doc:
            return self._from_mongo(doc)
        return None

    async def find_one(
        self,
        collection: str,
        filters: dict[str, Any],
    ) -> dict[str, Any] | None:
        """Find the first document matching equality filters."""
        doc = await self._db[collection].find_one(self._to_mongo(filters))
        if doc:
            return self._from_mongo(doc)
        return None

    async def update(
        self,
        collection: str,
        document_id: str,
        updates: dict[str, Any],
    ) -> bool:
        """Apply a $set to the document with the given '_id'."""
        update_doc = {k: v for k, v in updates.items() if k not in ("id", "_id")}
        result = await self._db[collection].update_one(
            {"_id": document_id},
            {"$set": update_doc},
        )
        return bool(result.matched_count > 0)

    async def delete(
        self,
        collection: str,
        document_id: str,
    ) -> bool:
        """Delete the document with the given '_id'."""
        result = await self._db[collection].delete_one({"_id": document_id})
        return bool(result.deleted_count > 0)

    async def health_check(self) -> HealthStatus:
        """Ping the server and report latency."""
        start = time.perf_counter()
        try:
            await self._client.admin.command("ping")
            latency_ms = (time.perf_counter() - start) * 1000
            return HealthStatus(
                healthy=True,
                latency_ms=latency_ms,
                message="MongoDB is healthy",
                details={"database": self._database_name},
            )
        except Exception as e:
            latency_ms = (time.perf_counter() - start) * 1000
            return HealthStatus(
                healthy=False,
                latency_ms=latency_ms,
                message=f"MongoDB health check failed: {e}",
                details={"database": self._database_name, "error": str(e)},
            )

    async def close(self) -> None:
        """Close the client connection."""
        self._client.close()
