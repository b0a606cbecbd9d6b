"""Abstract base class for media hosting providers."""

from abc import ABC, abstractmethod

from src.domain.models.upload import (
    DirectUploadOptions,
    ProviderUploadHandle,
    UploadStatusResult,
)


class VideoProviderBase(ABC):
    """Capability contract every media-hosting backend must satisfy.

    The three operations are all the orchestration layer ever needs, so a
    new backend is a new subclass and nothing else changes.

    Implementations should handle:
    - Mux Video
    - Cloudflare Stream
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Short backend name stored alongside bindings (e.g. 'mux')."""

    @abstractmethod
    async def create_direct_upload(
        self,
        options: DirectUploadOptions,
    ) -> ProviderUploadHandle:
        """Request a single-use URL the client can send the file to.

        Args:
            options: Origin restriction and URL lifetime.

        Returns:
            Upload handle with ID, URL and optional expiry.

        Raises:
            ProviderUnavailableError: On transport or authentication failure.
            ProviderProtocolError: If the response lacks required fields.
        """

    @abstractmethod
    async def get_upload_status(self, upload_id: str) -> UploadStatusResult:
        """Get the canonical status of an upload.

        When the upload has produced an asset, implementations resolve the
        asset internally so callers never deal with the upload/asset split.

        Args:
            upload_id: ID returned by create_direct_upload().

        Returns:
            Normalized status; playback_id is set only when ready.

        Raises:
            InvalidIdentifierError: If upload_id is empty or malformed.
            ProviderUnavailableError: On transport failure.
            ProviderProtocolError: If the response is not understood.
        """

    @abstractmethod
    async def delete_asset(self, asset_id: str) -> None:
        """Permanently delete an asset.

        Deleting an asset that no longer exists is not an error.

        Args:
            asset_id: Provider asset identifier.

        Raises:
            InvalidIdentifierError: If asset_id is empty or malformed.
            ProviderUnavailableError: On transport failure.
        """

    async def close(self) -> None:  # noqa: B027
        """Release network resources. Optional for implementations."""
