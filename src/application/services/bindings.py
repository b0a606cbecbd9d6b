"""Content record lifecycle hooks: bind, edit, cleanup."""

from collections.abc import Callable, Mapping
from typing import Any

from src.commons.security import TokenScope, UploadTokenService
from src.commons.settings.models import Settings
from src.commons.telemetry import LogContext, get_logger, log_exceptions
from src.domain.exceptions import DomainException
from src.domain.models.binding import ContentVideoBinding, PendingVideo
from src.domain.value_objects import is_valid_media_id
from src.infrastructure.bindings.base import BindingRepositoryBase
from src.infrastructure.providers.base import VideoProviderBase

# Submission field names carried alongside the host's own fields
PLAYBACK_ID_FIELD = "playback_id"
ASSET_ID_FIELD = "asset_id"


class BindingManager:
    """Owns the association between content records and hosted videos.

    Hooks into three points of the host's record lifecycle:

    - before insert: ``capture_submission`` lifts the video fields out of
      the raw submission before the host strips unknown keys.
    - after insert: ``bind_on_create`` writes the binding at most once.
    - after delete: ``on_delete`` removes the remote asset and the binding.

    None of the hooks ever make the host's own operation fail.
    """

    def __init__(
        self,
        repository: BindingRepositoryBase,
        settings: Settings,
        token_service: UploadTokenService,
        provider_resolver: Callable[[], VideoProviderBase],
    ) -> None:
        """Initialize the manager.

        Args:
            repository: Binding storage.
            settings: Application settings.
            token_service: Verifies submission tokens.
            provider_resolver: Returns the provider client for remote cleanup.
        """
        self._repository = repository
        self._settings = settings
        self._tokens = token_service
        self._resolve_provider = provider_resolver
        self._logger = get_logger(__name__)

    def capture_submission(self, form: Mapping[str, Any]) -> PendingVideo:
        """Extract the video fields from a raw submission.

        Returns an empty PendingVideo when the feature is off.
        """
        if not self._settings.feature.enabled:
            return PendingVideo()

        return PendingVideo(
            playback_id=str(form.get(PLAYBACK_ID_FIELD) or "").strip(),
            asset_id=str(form.get(ASSET_ID_FIELD) or "").strip(),
        )

    async def bind_on_create(
        self,
        content_id: int,
        pending: PendingVideo,
        submit_token: str | None,
        is_authenticated: bool,
    ) -> ContentVideoBinding | None:
        """Bind a video to a newly created content record.

        Silently does nothing when the feature is off, when a guest submits
        and guests are not allowed, when the submission token is invalid,
        or when the playback ID is empty or malformed. Storage failures are
        logged and swallowed: the record is kept without a video.

        Returns:
            The binding now attached to the record, or None.
        """
        feature = self._settings.feature
        with LogContext(content_id=content_id):
            if not feature.enabled:
                return None
            if not is_authenticated and not feature.allow_guests:
                return None
            if not self._tokens.is_valid(submit_token, TokenScope.COMMENT_SUBMIT):
                self._logger.info("Skipping video binding: bad submission token")
                return None
            if pending.is_empty:
                return None
            if not is_valid_media_id(pending.playback_id):
                self._logger.warning("Skipping video binding: malformed playback ID")
                return None

            asset_id = pending.asset_id if is_valid_media_id(pending.asset_id) else None
            binding = ContentVideoBinding(
                content_id=content_id,
                provider=self._settings.provider.name,
                playback_id=pending.playback_id,
                asset_id=asset_id,
            )

            try:
                if await self._repository.insert_if_absent(binding):
                    self._logger.info(
                        "Bound video to content",
                        extra={"playback_id": binding.playback_id},
                    )
                    return binding
                return await self._repository.get(content_id)
            except Exception as e:
                self._logger.error(
                    "Failed to store video binding",
                    exc_info=True,
                    extra={"error": str(e)},
                )
                return None

    async def admin_update(
        self,
        content_id: int,
        playback_id: str | None,
    ) -> ContentVideoBinding | None:
        """Apply an administrative edit.

        An empty value clears the binding: the remote asset is deleted
        first, then the local binding. A valid value overwrites the playback
        ID. A malformed value is ignored.

        Returns:
            The resulting binding, or None if the record has no video.
        """
        value = (playback_id or "").strip()

        if not value:
            await self._delete_remote_asset(content_id)
            await self._repository.delete(content_id)
            self._logger.info(
                "Cleared video from content",
                extra={"content_id": content_id},
            )
            return None

        if not is_valid_media_id(value):
            self._logger.warning(
                "Ignoring malformed playback ID in admin edit",
                extra={"content_id": content_id},
            )
            return await self._repository.get(content_id)

        existing = await self._repository.get(content_id)
        binding = ContentVideoBinding(
            content_id=content_id,
            provider=self._settings.provider.name,
            playback_id=value,
            asset_id=existing.asset_id if existing else None,
        )
        return await self._repository.upsert(binding)

    @log_exceptions(message="Content video cleanup failed")
    async def on_delete(self, content_id: int) -> bool:
        """Clean up after a content record is permanently deleted.

        Returns:
            True if a remote deletion was performed.
        """
        deleted = await self._delete_remote_asset(content_id)
        await self._repository.delete(content_id)
        return deleted

    async def get_playback_id(self, content_id: int) -> str | None:
        """Read the bound playback ID, if any."""
        binding = await self._repository.get(content_id)
        return binding.playback_id if binding else None

    async def _delete_remote_asset(self, content_id: int) -> bool:
        """Best-effort remote deletion of the asset bound to a record."""
        if not self._settings.has_provider_credentials():
            return False

        binding = await self._repository.get(content_id)
        if binding is None or not binding.asset_id:
            return False

        try:
            await self._resolve_provider().delete_asset(binding.asset_id)
        except DomainException as e:
            self._logger.warning(
                "Remote asset deletion failed",
                extra={
                    "content_id": content_id,
                    "asset_id": binding.asset_id,
                    "error": str(e),
                },
            )
            return False
        return True
