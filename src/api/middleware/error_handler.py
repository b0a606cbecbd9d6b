"""Error handling middleware and exception handlers."""

from typing import Any

from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import RequestResponseEndpoint
from starlette.responses import Response

from src.commons.telemetry.logger import get_logger
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
    ProviderUnavailableError,
    RateLimitedError,
    ValidationError,
)

logger = get_logger(__name__)


class APIError(Exception):
    """Base API error with code and details."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = status.HTTP_400_BAD_REQUEST,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize API error.

        Args:
            code: Error code for clients.
            message: Human-readable error message.
            status_code: HTTP status code.
            details: Additional error details.
        """
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


def _build_error_response(
    request: Request,
    code: str,
    message: str,
    status_code: int,
    details: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Build standardized error response.

    Args:
        request: HTTP request.
        code: Error code.
        message: Error message.
        status_code: HTTP status code.
        details: Additional details.
        headers: Extra response headers.

    Returns:
        JSON error response.
    """
    request_id = getattr(request.state, "request_id", "unknown")

    return JSONResponse(
        status_code=status_code,
        content={
            "error": {
                "code": code,
                "message": message,
                "details": details or {},
                "request_id": request_id,
            }
        },
        headers=headers,
    )


# Most specific first: the first matching entry wins
_DOMAIN_ERROR_MAP: list[tuple[type[DomainException], str, int]] = [
    (FileTooLargeError, "TOO_LARGE", status.HTTP_413_REQUEST_ENTITY_TOO_LARGE),
    (InvalidFileTypeError, "INVALID_TYPE", status.HTTP_415_UNSUPPORTED_MEDIA_TYPE),
    (InvalidIdentifierError, "INVALID_ID", status.HTTP_400_BAD_REQUEST),
    (MissingParameterError, "MISSING_PARAM", status.HTTP_400_BAD_REQUEST),
    (ValidationError, "VALIDATION_ERROR", status.HTTP_400_BAD_REQUEST),
    (BadTokenError, "BAD_TOKEN", status.HTTP_403_FORBIDDEN),
    (FeatureDisabledError, "FEATURE_DISABLED", status.HTTP_403_FORBIDDEN),
    (GuestsNotAllowedError, "GUESTS_NOT_ALLOWED", status.HTTP_403_FORBIDDEN),
    (AuthorizationError, "FORBIDDEN", status.HTTP_403_FORBIDDEN),
    (NoCredentialsError, "NO_CREDENTIALS", status.HTTP_503_SERVICE_UNAVAILABLE),
    (ProviderError, "PROVIDER_ERROR", status.HTTP_502_BAD_GATEWAY),
    (PollingTimeoutError, "TIMEOUT", status.HTTP_504_GATEWAY_TIMEOUT),
    (RateLimitedError, "RATE_LIMITED", status.HTTP_429_TOO_MANY_REQUESTS),
]


def _domain_error_details(exc: DomainException) -> dict[str, Any]:
    if isinstance(exc, FileTooLargeError):
        return {"max_size_mb": exc.max_size_mb}
    if isinstance(exc, InvalidIdentifierError):
        return {"kind": exc.kind}
    if isinstance(exc, MissingParameterError):
        return {"parameter": exc.parameter}
    if isinstance(exc, ProviderUnavailableError) and exc.status_code is not None:
        return {"provider": exc.provider, "upstream_status": exc.status_code}
    if isinstance(exc, ProviderError):
        return {"provider": exc.provider}
    if isinstance(exc, RateLimitedError):
        return {"retry_after": exc.retry_after}
    return {}


def _handle_exception(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Handle exception and return appropriate error response.

    Args:
        request: HTTP request.
        exc: Exception to handle.

    Returns:
        JSON error response.
    """
    if isinstance(exc, APIError):
        logger.warning(
            f"API error: {exc.code}",
            extra={
                "error_code": exc.code,
                "error_message": exc.message,
                "details": exc.details,
            },
        )
        return _build_error_response(
            request=request,
            code=exc.code,
            message=exc.message,
            status_code=exc.status_code,
            details=exc.details,
        )

    if isinstance(exc, DomainException):
        for exc_type, code, status_code in _DOMAIN_ERROR_MAP:
            if isinstance(exc, exc_type):
                break
        else:
            code, status_code = "DOMAIN_ERROR", status.HTTP_400_BAD_REQUEST

        log = logger.error if isinstance(exc, ProviderError) else logger.warning
        log(
            f"Domain error: {code}",
            extra={"error_code": code, "error_message": str(exc)},
        )

        headers = None
        if isinstance(exc, RateLimitedError):
            headers = {"Retry-After": str(exc.retry_after)}

        return _build_error_response(
            request=request,
            code=code,
            message=str(exc),
            status_code=status_code,
            details=_domain_error_details(exc),
            headers=headers,
        )

    # Catch-all for unexpected errors
    logger.exception(f"Unexpected error: {exc}")
    return _build_error_response(
        request=request,
        code="INTERNAL_ERROR",
        message="An unexpected error occurred",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


async def error_handler_middleware(
    request: Request,
    call_next: RequestResponseEndpoint,
) -> Response:
    """Middleware to catch and format all exceptions.

    Args:
        request: HTTP request.
        call_next: Next handler in chain.

    Returns:
        HTTP response.
    """
    try:
        return await call_next(request)
    except Exception as exc:
        return _handle_exception(request, exc)
