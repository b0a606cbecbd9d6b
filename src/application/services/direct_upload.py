"""Direct upload slot issuing."""

from collections.abc import Callable
from pathlib import PurePosixPath

from src.application.dtos.uploads import (
    CreateUploadRequest,
    CreateUploadResponse,
    DeleteUploadResponse,
)
from src.commons.settings.models import Settings
from src.commons.telemetry import get_logger
from src.domain.exceptions import (
    FileTooLargeError,
    InvalidFileTypeError,
    MissingParameterError,
    NoCredentialsError,
)
from src.domain.models.upload import DirectUploadOptions
from src.infrastructure.bindings.base import BindingRepositoryBase
from src.infrastructure.providers.base import VideoProviderBase


class DirectUploadService:
    """Validates a client's file description and asks the provider for a slot.

    The client has already checked type and size locally; these checks are
    repeated here because the client cannot be trusted. The server never
    sees the file bytes.
    """

    def __init__(
        self,
        settings: Settings,
        provider_resolver: Callable[[], VideoProviderBase],
        binding_repository: BindingRepositoryBase,
    ) -> None:
        """Initialize the service.

        Args:
            settings: Application settings.
            provider_resolver: Returns the provider client; only called once
                credentials are known to be configured.
            binding_repository: Bindings; a bound asset is never discarded.
        """
        self._settings = settings
        self._resolve_provider = provider_resolver
        self._bindings = binding_repository
        self._logger = get_logger(__name__)

    def validate(self, file_name: str, file_size: int) -> None:
        """Apply the size ceiling and extension allow-list.

        A zero size is treated as unknown and not checked; a name without an
        extension is accepted.

        Raises:
            FileTooLargeError: If the file exceeds the configured maximum.
            InvalidFileTypeError: If the extension is not allowed.
        """
        feature = self._settings.feature

        if file_size > 0 and file_size > feature.max_size_bytes:
            raise FileTooLargeError(file_size, feature.max_size_mb)

        if file_name:
            extension = PurePosixPath(file_name.replace("\\", "/")).suffix
            extension = extension.lstrip(".").lower()
            allowed = {ext.lower() for ext in feature.allowed_extensions}
            if extension and extension not in allowed:
                raise InvalidFileTypeError(file_name)

    async def create(self, request: CreateUploadRequest) -> CreateUploadResponse:
        """Issue a direct upload slot.

        Raises:
            NoCredentialsError: If provider credentials are missing.
            FileTooLargeError: If the reported size is over the limit.
            InvalidFileTypeError: If the file extension is not allowed.
            ProviderError: If the provider call fails.
        """
        if not self._settings.has_provider_credentials():
            raise NoCredentialsError(self._settings.provider.name)

        self.validate(request.file_name, request.file_size)

        provider_settings = self._settings.provider
        options = DirectUploadOptions(
            cors_origin=provider_settings.cors_origin
            or self._settings.server.public_url,
            timeout_seconds=provider_settings.upload_timeout_seconds,
        )

        handle = await self._resolve_provider().create_direct_upload(options)

        self._logger.info(
            "Issued direct upload slot",
            extra={
                "upload_id": handle.upload_id,
                "file_size": request.file_size,
            },
        )
        return CreateUploadResponse(
            upload_id=handle.upload_id,
            upload_url=handle.upload_url,
            expires_at=handle.expires_at,
        )

    async def discard(
        self,
        asset_id: str | None = None,
        upload_id: str | None = None,
    ) -> DeleteUploadResponse:
        """Remove the remote media for an upload the client abandoned.

        An asset ID is deleted directly. An upload ID is first resolved to
        its asset; an upload with no asset yet has nothing to delete. An
        asset already bound to a content record is left alone: only an
        admin edit or a record delete may remove it.

        Raises:
            NoCredentialsError: If provider credentials are missing.
            MissingParameterError: If neither identifier is given.
            InvalidIdentifierError: If an identifier is malformed.
            ProviderError: If the provider call fails.
        """
        if not self._settings.has_provider_credentials():
            raise NoCredentialsError(self._settings.provider.name)

        asset_id = (asset_id or "").strip() or None
        upload_id = (upload_id or "").strip() or None
        if asset_id is None and upload_id is None:
            raise MissingParameterError("asset_id or upload_id")

        provider = self._resolve_provider()
        if asset_id is None and upload_id is not None:
            status = await provider.get_upload_status(upload_id)
            asset_id = status.asset_id

        if asset_id is None:
            self._logger.info(
                "Discarded upload had no asset",
                extra={"upload_id": upload_id},
            )
            return DeleteUploadResponse(deleted=False)

        binding = await self._bindings.find_by_asset_id(asset_id)
        if binding is not None:
            self._logger.warning(
                "Refused to discard a bound asset",
                extra={"asset_id": asset_id, "content_id": binding.content_id},
            )
            return DeleteUploadResponse(deleted=False, asset_id=asset_id)

        await provider.delete_asset(asset_id)
        self._logger.info(
            "Discarded abandoned upload",
            extra={"asset_id": asset_id, "upload_id": upload_id},
        )
        return DeleteUploadResponse(deleted=True, asset_id=asset_id)
