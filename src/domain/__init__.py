"""Domain layer - business models and logic."""

from src.domain.exceptions import (
    AuthorizationError,
    BadTokenError,
    DomainException,
    FeatureDisabledError,
    FileTooLargeError,
    GuestsNotAllowedError,
    InvalidFileTypeError,
    InvalidIdentifierError,
    MissingParameterError,
    NoCredentialsError,
    PollingTimeoutError,
    ProviderError,
    ProviderProtocolError,
    ProviderUnavailableError,
    RateLimitedError,
    ValidationError,
)
from src.domain.models import (
    ContentVideoBinding,
    DirectUploadOptions,
    PendingVideo,
    PlaybackIdentifier,
    PlaybackPolicy,
    ProviderAsset,
    ProviderUploadHandle,
    UploadStatus,
    UploadStatusResult,
)
from src.domain.value_objects import MEDIA_ID_PATTERN, MediaId, is_valid_media_id

__all__ = [
    # Exceptions
    "DomainException",
    "ValidationError",
    "FileTooLargeError",
    "InvalidFileTypeError",
    "InvalidIdentifierError",
    "MissingParameterError",
    "AuthorizationError",
    "BadTokenError",
    "FeatureDisabledError",
    "GuestsNotAllowedError",
    "ProviderError",
    "ProviderUnavailableError",
    "ProviderProtocolError",
    "NoCredentialsError",
    "PollingTimeoutError",
    "RateLimitedError",
    # Upload
    "UploadStatus",
    "UploadStatusResult",
    "ProviderUploadHandle",
    "DirectUploadOptions",
    "ProviderAsset",
    "PlaybackIdentifier",
    "PlaybackPolicy",
    # Binding
    "ContentVideoBinding",
    "PendingVideo",
    # Value Objects
    "MediaId",
    "MEDIA_ID_PATTERN",
    "is_valid_media_id",
]
