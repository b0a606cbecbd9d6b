"""Abstract base class for document database operations."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


@dataclass
class HealthStatus:
    """Health check result."""

    healthy: bool
    latency_ms: float
    message: str | None = None
    details: dict[str, str] | None = None


class DocumentDBBase(ABC):
    """Abstract base class for document database operations.

    Documents carry their key in an ``id`` field; implementations map it to
    whatever primary key the backend uses and restore it on read.

    Implementations should handle:
    - MongoDB
    """

    @abstractmethod
    async def insert_if_absent(
        self,
        collection: str,
        document: dict[str, Any],
    ) -> bool:
        """Insert a document unless one with the same ID already exists.

        This is an atomic primitive: of several concurrent calls for the
        same ID, exactly one succeeds.

        Args:
            collection: Collection/table name.
            document: Document to insert; must contain an 'id' field.

        Returns:
            True if inserted, False if a document with that ID already existed.
        """

    @abstractmethod
    async def find_by_id(
        self,
        collection: str,
        document_id: str,
    ) -> dict[str, Any] | None:
        """Find a document by ID.

        Args:
            collection: Collection/table name.
            document_id: Document ID to find.

        Returns:
            Document if found, None otherwise.
        """

    @abstractmethod
    async def find_one(
        self,
        collection: str,
        filters: dict[str, Any],
    ) -> dict[str, Any] | None:
        """Find the first document whose fields equal the given values.

        Args:
            collection: Collection/table name.
            filters: Field name to required value.

        Returns:
            Document if found, None otherwise.
        """

    @abstractmethod
    async def update(
        self,
        collection: str,
        document_id: str,
        updates: dict[str, Any],
    ) -> bool:
        """Update fields of an existing document.

        Args:
            collection: Collection/table name.
            document_id: Document ID to update.
            updates: Fields to update.

        Returns:
            True if a document matched, False if not found.
        """

    @abstractmethod
    async def delete(
        self,
        collection: str,
        document_id: str,
    ) -> bool:
        """Delete a document.

        Args:
            collection: Collection/table name.
            document_id: Document ID to delete.

        Returns:
            True if deleted, False if not found.
        """

    @abstractmethod
    async def health_check(self) -> HealthStatus:
        """Check service health.

        Returns:
            Health status with latency info.
        """

    @abstractmethod
    async def close(self) -> None:
        """Release client resources."""
