"""Domain exceptions for the video upload system."""

from __future__ import annotations


class DomainException(Exception):
    """Base exception for domain errors."""


# =============================================================================
# Validation
# =============================================================================


class ValidationError(DomainException):
    """Raised when user-supplied input fails local policy. Never retried."""


class FileTooLargeError(ValidationError):
    """Raised when a file exceeds the configured upload ceiling."""

    def __init__(self, size_bytes: int, max_size_mb: int) -> None:
        self.size_bytes = size_bytes
        self.max_size_mb = max_size_mb
        super().__init__(
            f"File exceeds the maximum allowed size of {max_size_mb} MB."
        )


class InvalidFileTypeError(ValidationError):
    """Raised when a file is not recognised as a video."""

    def __init__(self, file_name: str, reason: str = "") -> None:
        self.file_name = file_name
        self.reason = reason
        super().__init__(
            reason or "That file type is not allowed. Please upload a video file."
        )


class InvalidIdentifierError(ValidationError):
    """Raised when an upload, asset or playback identifier is malformed."""

    def __init__(self, kind: str, value: str | None) -> None:
        self.kind = kind
        self.value = value
        super().__init__(f"Invalid {kind} ID.")


class MissingParameterError(ValidationError):
    """Raised when a required request parameter is absent."""

    def __init__(self, parameter: str) -> None:
        self.parameter = parameter
        super().__init__(f"{parameter} is required.")


# =============================================================================
# Authorization
# =============================================================================


class AuthorizationError(DomainException):
    """Raised when a request is not permitted. Terminal."""


class BadTokenError(AuthorizationError):
    """Raised when an upload token is missing, expired or wrongly scoped."""

    def __init__(self, reason: str = "") -> None:
        self.reason = reason
        super().__init__("Security check failed. Please refresh the page.")


class FeatureDisabledError(AuthorizationError):
    """Raised when video uploads are switched off."""

    def __init__(self) -> None:
        super().__init__("Video uploads are currently disabled.")


class GuestsNotAllowedError(AuthorizationError):
    """Raised when an anonymous user tries to upload and guests are not allowed."""

    def __init__(self) -> None:
        super().__init__("Video uploads are not available for guests.")


# =============================================================================
# Provider
# =============================================================================


class ProviderError(DomainException):
    """Base exception for media provider failures."""

    def __init__(self, provider: str, message: str) -> None:
        self.provider = provider
        super().__init__(message)


class ProviderUnavailableError(ProviderError):
    """Raised on transport or authentication failure talking to the provider."""

    def __init__(
        self,
        provider: str,
        message: str,
        status_code: int | None = None,
    ) -> None:
        self.status_code = status_code
        super().__init__(provider, message)


class ProviderProtocolError(ProviderError):
    """Raised when the provider returns a response missing required fields."""


class NoCredentialsError(ProviderError):
    """Raised when provider credentials are not configured."""

    def __init__(self, provider: str) -> None:
        super().__init__(
            provider,
            "Video provider credentials are not configured. "
            "Please contact the site administrator.",
        )


# =============================================================================
# Flow control
# =============================================================================


class PollingTimeoutError(DomainException):
    """Raised when status polling exceeds its attempt ceiling."""

    def __init__(self, upload_id: str, attempts: int, interval_seconds: float) -> None:
        self.upload_id = upload_id
        self.attempts = attempts
        self.interval_seconds = interval_seconds
        super().__init__(
            f"Timed out waiting for video {upload_id} to process "
            f"after {attempts} attempts."
        )


class RateLimitedError(DomainException):
    """Raised when a client exceeds its request allowance."""

    def __init__(self, retry_after: int) -> None:
        self.retry_after = retry_after
        super().__init__("Too many requests. Please wait a moment and try again.")
