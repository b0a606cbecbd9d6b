"""Request logging middleware."""

import time
import uuid
from collections.abc import Callable
from typing import Any

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from src.commons.telemetry.logger import get_logger, redact, set_correlation_id

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
UNKNOWN_CLIENT = "0.0.0.0"


def client_address(request: Request) -> str:
    """Socket address of the caller, used as the rate limiting key."""
    return request.client.host if request.client else UNKNOWN_CLIENT


class LoggingMiddleware(BaseHTTPMiddleware):
    """Logs one line when an upload API request arrives and one when it is answered.

    Tags every request with an id (reused from ``X-Request-ID`` when the
    host's proxy sets one) and makes it the log correlation id. Tokens in
    the query string are masked. Client errors log at warning, server
    errors at error.
    """

    def __init__(self, app: Any, user_header: str = "X-User-Id") -> None:
        super().__init__(app)
        self._user_header = user_header

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Any],
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id
        request.state.client_ip = client_address(request)
        set_correlation_id(request_id)

        caller = "user" if request.headers.get(self._user_header) else "guest"
        started = time.perf_counter()
        logger.info(
            "Request received",
            extra={
                "method": request.method,
                "path": request.url.path,
                "query": redact(dict(request.query_params)),
                "client_ip": request.state.client_ip,
                "caller": caller,
            },
        )

        response: Response = await call_next(request)

        status_code = response.status_code
        level = "error" if status_code >= 500 else "warning" if status_code >= 400 else "info"
        getattr(logger, level)(
            "Request answered",
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": status_code,
                "caller": caller,
                "duration_ms": round((time.perf_counter() - started) * 1000, 2),
            },
        )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
