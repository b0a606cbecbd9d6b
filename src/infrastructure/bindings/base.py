"""Abstract base class for content/video binding storage."""

from abc import ABC, abstractmethod

from src.domain.models.binding import ContentVideoBinding


class BindingRepositoryBase(ABC):
    """Stores at most one video binding per content record."""

    @abstractmethod
    async def insert_if_absent(self, binding: ContentVideoBinding) -> bool:
        """Store a binding unless the content record already has one.

        Of several concurrent calls for the same content ID exactly one
        returns True.

        Returns:
            True if stored, False if a binding already existed.
        """

    @abstractmethod
    async def get(self, content_id: int) -> ContentVideoBinding | None:
        """Get the binding for a content record, if any."""

    @abstractmethod
    async def find_by_asset_id(self, asset_id: str) -> ContentVideoBinding | None:
        """Get the binding that references a remote asset, if any."""

    @abstractmethod
    async def upsert(self, binding: ContentVideoBinding) -> ContentVideoBinding:
        """Overwrite (or create) the binding for a content record."""

    @abstractmethod
    async def delete(self, content_id: int) -> bool:
        """Remove the binding for a content record.

        Returns:
            True if a binding was removed.
        """
