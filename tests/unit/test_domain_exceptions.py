"""Unit tests for domain exceptions."""

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


class TestDomainException:
    """Tests for base DomainException."""

    def test_is_exception(self):
        exc = DomainException("Test error")
        assert isinstance(exc, Exception)

    def test_message(self):
        exc = DomainException("Custom message")
        assert str(exc) == "Custom message"


class TestValidationErrors:
    """Tests for validation failures."""

    def test_file_too_large(self):
        exc = FileTooLargeError(60 * 1024 * 1024, 50)
        assert exc.size_bytes == 60 * 1024 * 1024
        assert exc.max_size_mb == 50
        assert "50 MB" in str(exc)
        assert isinstance(exc, ValidationError)

    def test_invalid_file_type_default_message(self):
        exc = InvalidFileTypeError("notes.txt")
        assert exc.file_name == "notes.txt"
        assert "not allowed" in str(exc)

    def test_invalid_file_type_custom_reason(self):
        exc = InvalidFileTypeError("notes.txt", "Please select a video file.")
        assert str(exc) == "Please select a video file."

    def test_invalid_identifier(self):
        exc = InvalidIdentifierError("playback", "abc/123")
        assert exc.kind == "playback"
        assert exc.value == "abc/123"
        assert str(exc) == "Invalid playback ID."
        assert isinstance(exc, ValidationError)

    def test_missing_parameter(self):
        exc = MissingParameterError("upload_id")
        assert exc.parameter == "upload_id"
        assert "upload_id" in str(exc)


class TestAuthorizationErrors:
    """Tests for authorization failures."""

    def test_bad_token_keeps_reason_out_of_message(self):
        exc = BadTokenError("Signature has expired")
        assert exc.reason == "Signature has expired"
        assert "expired" not in str(exc)
        assert isinstance(exc, AuthorizationError)

    def test_feature_disabled(self):
        assert isinstance(FeatureDisabledError(), AuthorizationError)

    def test_guests_not_allowed(self):
        exc = GuestsNotAllowedError()
        assert "guests" in str(exc)
        assert isinstance(exc, AuthorizationError)


class TestProviderErrors:
    """Tests for provider failures."""

    def test_unavailable_carries_status(self):
        exc = ProviderUnavailableError("mux", "Not found", status_code=404)
        assert exc.provider == "mux"
        assert exc.status_code == 404
        assert str(exc) == "Not found"
        assert isinstance(exc, ProviderError)

    def test_protocol_error(self):
        exc = ProviderProtocolError("mux", "Missing upload URL")
        assert exc.provider == "mux"
        assert isinstance(exc, ProviderError)

    def test_no_credentials(self):
        exc = NoCredentialsError("mux")
        assert exc.provider == "mux"
        assert "administrator" in str(exc)
        assert isinstance(exc, ProviderError)


class TestFlowControlErrors:
    """Tests for polling and rate limiting errors."""

    def test_polling_timeout(self):
        exc = PollingTimeoutError("up-1", 60, 3.0)
        assert exc.upload_id == "up-1"
        assert exc.attempts == 60
        assert exc.interval_seconds == 3.0
        assert "60 attempts" in str(exc)

    def test_rate_limited(self):
        exc = RateLimitedError(retry_after=42)
        assert exc.retry_after == 42
        assert isinstance(exc, DomainException)
