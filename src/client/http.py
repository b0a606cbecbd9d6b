"""HTTP client for the upload endpoints and the direct transfer."""

from collections.abc import AsyncIterator, Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import httpx

from src.application.dtos.uploads import (
    CreateUploadResponse,
    DeleteUploadResponse,
    IssueTokensResponse,
    UploadStatusResponse,
)
from src.commons.telemetry import get_logger

logger = get_logger(__name__)

DEFAULT_CHUNK_SIZE = 256 * 1024


@dataclass(frozen=True)
class SelectedFile:
    """A file the user picked, described the way the browser would."""

    name: str
    size: int
    mime_type: str
    path: Path | None = None
    content: bytes | None = None

    async def iter_chunks(self, chunk_size: int = DEFAULT_CHUNK_SIZE) -> AsyncIterator[bytes]:
        """Yield the file body in chunks."""
        if self.content is not None:
            for offset in range(0, len(self.content), chunk_size):
                yield self.content[offset : offset + chunk_size]
            return
        if self.path is None:
            raise ValueError(f"No content or path for {self.name}")
        with self.path.open("rb") as f:
            while chunk := f.read(chunk_size):
                yield chunk


class UploadApiError(Exception):
    """Non-success response from the upload service or the transfer target.

    Carries the error envelope's code when the service produced one.
    """

    PROVIDER_ERROR = "PROVIDER_ERROR"

    def __init__(self, status_code: int, code: str, message: str) -> None:
        self.status_code = status_code
        self.code = code
        super().__init__(message)

    @property
    def message(self) -> str:
        return str(self)

    @property
    def is_provider_error(self) -> bool:
        return self.code == self.PROVIDER_ERROR


ProgressCallback = Callable[[int], None]


class UploadApiClient:
    """Talks to the service's upload endpoints and sends the file to the slot.

    The same httpx client is used for both; the transfer goes to an absolute
    URL and never carries the service's identity headers.
    """

    def __init__(
        self,
        base_url: str,
        upload_token: str = "",
        user_id: str | None = None,
        timeout: float = 30.0,
        transfer_timeout: float | None = None,
        api_prefix: str = "/v1",
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Service root URL.
            upload_token: Upload-scoped token from the token endpoint.
            user_id: Identity forwarded as X-User-Id, None for guests.
            timeout: Timeout for service calls in seconds.
            transfer_timeout: Timeout for the file transfer; None disables it.
            api_prefix: Versioned API prefix.
            transport: Optional httpx transport, used to stub the network.
        """
        self._upload_token = upload_token
        self._prefix = api_prefix.rstrip("/")
        self._timeout = httpx.Timeout(timeout)
        self._transfer_timeout = httpx.Timeout(transfer_timeout)
        self._headers: dict[str, str] = {"Accept": "application/json"}
        if user_id:
            self._headers["X-User-Id"] = user_id
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=self._timeout,
            transport=transport,
        )

    @property
    def upload_token(self) -> str:
        return self._upload_token

    @upload_token.setter
    def upload_token(self, value: str) -> None:
        self._upload_token = value

    async def issue_tokens(self) -> IssueTokensResponse:
        """Fetch a fresh token pair and keep the upload token."""
        data = await self._call("POST", "/tokens", json={})
        tokens = IssueTokensResponse.model_validate(data)
        self._upload_token = tokens.upload_token
        return tokens

    async def create_upload(self, file_name: str, file_size: int) -> CreateUploadResponse:
        """Request a direct upload slot."""
        data = await self._call(
            "POST",
            "/uploads",
            json={
                "file_name": file_name,
                "file_size": file_size,
                "token": self._upload_token,
            },
        )
        return CreateUploadResponse.model_validate(data)

    async def get_status(self, upload_id: str) -> UploadStatusResponse:
        """Poll the status of an upload once."""
        data = await self._call(
            "GET",
            "/uploads/status",
            params={"upload_id": upload_id, "token": self._upload_token},
        )
        return UploadStatusResponse.model_validate(data)

    async def discard(
        self,
        asset_id: str | None = None,
        upload_id: str | None = None,
    ) -> DeleteUploadResponse:
        """Ask the service to remove an abandoned upload's media."""
        params = {"token": self._upload_token}
        if asset_id:
            params["asset_id"] = asset_id
        elif upload_id:
            params["upload_id"] = upload_id
        data = await self._call("DELETE", "/uploads", params=params)
        return DeleteUploadResponse.model_validate(data)

    async def transfer(
        self,
        upload_url: str,
        file: SelectedFile,
        on_progress: ProgressCallback | None = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        """PUT the file body to the upload slot, reporting progress.

        Progress values are integer percentages of bytes handed to the
        transport; 100 is only reported once the target acknowledges.

        Raises:
            UploadApiError: If the target rejects the upload.
            httpx.HTTPError: On network failure.
        """

        async def body() -> AsyncIterator[bytes]:
            sent = 0
            async for chunk in file.iter_chunks(chunk_size):
                yield chunk
                sent += len(chunk)
                if on_progress is not None and file.size > 0:
                    on_progress(min(99, sent * 100 // file.size))

        response = await self._client.put(
            upload_url,
            content=body(),
            headers={
                "Content-Type": file.mime_type or "video/mp4",
                "Content-Length": str(file.size),
            },
            timeout=self._transfer_timeout,
        )
        if not response.is_success:
            raise UploadApiError(
                response.status_code,
                "TRANSFER_FAILED",
                "Upload failed.",
            )
        if on_progress is not None:
            on_progress(100)

    async def close(self) -> None:
        await self._client.aclose()

    async def _call(
        self,
        method: str,
        path: str,
        json: dict[str, Any] | None = None,
        params: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        response = await self._client.request(
            method,
            f"{self._prefix}{path}",
            json=json,
            params=params,
            headers=self._headers,
        )

        try:
            body = response.json()
        except ValueError:
            body = None

        if not response.is_success:
            code, message = "HTTP_ERROR", f"Request failed with HTTP {response.status_code}"
            if isinstance(body, dict) and isinstance(body.get("error"), dict):
                code = str(body["error"].get("code") or code)
                message = str(body["error"].get("message") or message)
            logger.debug(
                "Upload service returned an error",
                extra={"status_code": response.status_code, "error_code": code},
            )
            raise UploadApiError(response.status_code, code, message)

        if not isinstance(body, dict):
            raise UploadApiError(
                response.status_code,
                "BAD_RESPONSE",
                "Could not parse the upload service response.",
            )
        return body
