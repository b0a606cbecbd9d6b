"""Normalization of backend processing states."""

from typing import ClassVar

from src.domain.models.upload import ProviderAsset, UploadStatus, UploadStatusResult


class MuxStatusMapper:
    """Maps Mux upload and asset states to the canonical vocabulary.

    Mux reports upload state on the upload resource and playback readiness
    on the asset resource. ``ready`` is only produced when the asset says so
    *and* a public playback ID exists; ``asset_created`` on its own never
    becomes ``ready``.
    """

    _UPLOAD_STATES: ClassVar[dict[str, UploadStatus]] = {
        "asset_created": UploadStatus.ASSET_CREATED,
        "errored": UploadStatus.ERRORED,
        "cancelled": UploadStatus.ERRORED,
    }
    _ASSET_READY = "ready"
    _ASSET_ERRORED = "errored"

    def map_upload_status(self, raw_status: str | None) -> UploadStatus:
        """Map a raw upload status; unknown or initial states are 'waiting'."""
        return self._UPLOAD_STATES.get(raw_status or "", UploadStatus.WAITING)

    def needs_asset_lookup(self, status: UploadStatus, asset_id: str | None) -> bool:
        """Whether the asset resource must be fetched to refine the status."""
        return status == UploadStatus.ASSET_CREATED and bool(asset_id)

    def resolve(
        self,
        raw_upload_status: str | None,
        asset_id: str | None = None,
        asset: ProviderAsset | None = None,
    ) -> UploadStatusResult:
        """Combine upload and (optional) asset state into one result.

        Args:
            raw_upload_status: Status string from the upload resource.
            asset_id: Asset ID reported by the upload resource.
            asset: Asset details, if they were fetched.

        Returns:
            Canonical result. playback_id is populated only for READY.
        """
        status = self.map_upload_status(raw_upload_status)

        if asset is not None and status == UploadStatus.ASSET_CREATED:
            if asset.status == self._ASSET_ERRORED:
                status = UploadStatus.ERRORED
            elif asset.status == self._ASSET_READY and asset.public_playback_id:
                return UploadStatusResult(
                    status=UploadStatus.READY,
                    asset_id=asset_id or asset.asset_id,
                    playback_id=asset.public_playback_id,
                )

        return UploadStatusResult(status=status, asset_id=asset_id or None)
