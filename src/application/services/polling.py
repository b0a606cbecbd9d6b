"""Server side of status polling."""

from collections.abc import Callable

from src.application.dtos.uploads import UploadStatusResponse
from src.commons.settings.models import Settings
from src.commons.telemetry import get_logger
from src.domain.exceptions import MissingParameterError, NoCredentialsError
from src.domain.models.upload import UploadStatus
from src.infrastructure.providers.base import VideoProviderBase


class PollingCoordinator:
    """Answers one status query per call; holds no per-upload state."""

    def __init__(
        self,
        settings: Settings,
        provider_resolver: Callable[[], VideoProviderBase],
    ) -> None:
        self._settings = settings
        self._resolve_provider = provider_resolver
        self._logger = get_logger(__name__)

    async def get_status(self, upload_id: str | None) -> UploadStatusResponse:
        """Resolve the canonical status of an upload.

        The playback ID is only included when the status is exactly
        ``ready``.

        Raises:
            NoCredentialsError: If provider credentials are missing.
            MissingParameterError: If upload_id is empty.
            ProviderError: If the provider call fails.
        """
        if not self._settings.has_provider_credentials():
            raise NoCredentialsError(self._settings.provider.name)

        if not upload_id or not upload_id.strip():
            raise MissingParameterError("upload_id")

        result = await self._resolve_provider().get_upload_status(upload_id.strip())

        self._logger.debug(
            "Polled upload status",
            extra={"upload_id": upload_id, "status": result.status.value},
        )

        return UploadStatusResponse(
            status=result.status,
            asset_id=result.asset_id,
            playback_id=(
                result.playback_id if result.status == UploadStatus.READY else None
            ),
        )
