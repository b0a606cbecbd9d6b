"""Domain models."""

from src.domain.models.binding import ContentVideoBinding, PendingVideo
from src.domain.models.upload import (
    DirectUploadOptions,
    PlaybackIdentifier,
    PlaybackPolicy,
    ProviderAsset,
    ProviderUploadHandle,
    UploadStatus,
    UploadStatusResult,
)

__all__ = [
    # Upload
    "UploadStatus",
    "UploadStatusResult",
    "ProviderUploadHandle",
    "DirectUploadOptions",
    # Asset
    "ProviderAsset",
    "PlaybackIdentifier",
    "PlaybackPolicy",
    # Binding
    "ContentVideoBinding",
    "PendingVideo",
]
