"""Mux Video implementation of the media provider."""

from typing import Any

import httpx

from src.commons.settings.models import ProviderCredentials
from src.commons.telemetry import get_logger, timed
from src.domain.exceptions import ProviderProtocolError, ProviderUnavailableError
from src.domain.models.upload import (
    DirectUploadOptions,
    PlaybackIdentifier,
    PlaybackPolicy,
    ProviderAsset,
    ProviderUploadHandle,
    UploadStatusResult,
)
from src.domain.value_objects import MediaId
from src.infrastructure.providers.base import VideoProviderBase
from src.infrastructure.providers.status_mapper import MuxStatusMapper

logger = get_logger(__name__)


class MuxVideoProvider(VideoProviderBase):
    """Talks to the Mux Video API using HTTP Basic auth.

    API reference: https://docs.mux.com/api-reference

    Endpoints used:
    POST   /uploads          create a direct upload
    GET    /uploads/{id}     upload status and asset ID
    GET    /assets/{id}      asset status and playback IDs
    DELETE /assets/{id}      remove an asset (204 on success)
    """

    PROVIDER_NAME = "mux"
    DEFAULT_BASE_URL = "https://api.mux.com/video/v1"

    def __init__(
        self,
        credentials: ProviderCredentials,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 15.0,
        status_mapper: MuxStatusMapper | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the Mux client.

        Args:
            credentials: Token ID / secret pair.
            base_url: Mux Video API root.
            timeout: Request timeout in seconds.
            status_mapper: Status normalizer (defaults to MuxStatusMapper).
            transport: Optional httpx transport, used to stub the network.
        """
        self._base_url = base_url.rstrip("/")
        self._mapper = status_mapper or MuxStatusMapper()
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            auth=httpx.BasicAuth(credentials.token_id, credentials.token_secret),
            headers={
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    @property
    def name(self) -> str:
        return self.PROVIDER_NAME

    @timed
    async def create_direct_upload(
        self,
        options: DirectUploadOptions,
    ) -> ProviderUploadHandle:
        """Create a Mux direct upload with a public playback policy."""
        body: dict[str, Any] = {
            "cors_origin": options.cors_origin,
            "new_asset_settings": {
                "playback_policy": [
                    PlaybackPolicy.PUBLIC.value
                    if options.public_playback
                    else PlaybackPolicy.SIGNED.value
                ],
            },
            "timeout": options.timeout_seconds,
        }

        payload = await self._request("POST", "/uploads", json=body)
        data = payload.get("data")

        if not isinstance(data, dict) or not data.get("id") or not data.get("url"):
            raise ProviderProtocolError(
                self.PROVIDER_NAME,
                "Unexpected response from Mux when creating upload.",
            )

        expires_at = data.get("timeout")
        handle = ProviderUploadHandle(
            upload_id=str(data["id"]),
            upload_url=str(data["url"]),
            expires_at=str(expires_at) if expires_at not in (None, "") else None,
        )
        logger.info(
            "Created direct upload",
            extra={"upload_id": handle.upload_id, "provider": self.PROVIDER_NAME},
        )
        return handle

    @timed
    async def get_upload_status(self, upload_id: str) -> UploadStatusResult:
        """Fetch upload status, following through to the asset when one exists."""
        upload = MediaId.parse(upload_id, kind="upload")

        payload = await self._request("GET", f"/uploads/{upload}")
        data = payload.get("data")

        if not isinstance(data, dict):
            raise ProviderProtocolError(
                self.PROVIDER_NAME,
                "Unexpected response from Mux when fetching upload status.",
            )

        raw_status = data.get("status")
        raw_asset_id = data.get("asset_id")
        asset_id = str(raw_asset_id) if raw_asset_id else None
        status = self._mapper.map_upload_status(raw_status)

        asset: ProviderAsset | None = None
        if self._mapper.needs_asset_lookup(status, asset_id):
            try:
                asset = await self._get_asset(str(asset_id))
            except (ProviderUnavailableError, ProviderProtocolError) as e:
                # Second hop failing leaves the upload at asset_created
                logger.warning(
                    "Asset lookup failed, keeping upload-level status",
                    extra={"asset_id": asset_id, "error": str(e)},
                )

        return self._mapper.resolve(raw_status, asset_id=asset_id, asset=asset)

    @timed
    async def delete_asset(self, asset_id: str) -> None:
        """Delete an asset. A 404 means it is already gone."""
        asset = MediaId.parse(asset_id, kind="asset")

        try:
            await self._request("DELETE", f"/assets/{asset}")
        except ProviderUnavailableError as e:
            if e.status_code == httpx.codes.NOT_FOUND:
                logger.info(
                    "Asset already deleted",
                    extra={"asset_id": str(asset)},
                )
                return
            raise

        logger.info("Deleted asset", extra={"asset_id": str(asset)})

    async def close(self) -> None:
        await self._client.aclose()

    async def _get_asset(self, asset_id: str) -> ProviderAsset:
        asset = MediaId.parse(asset_id, kind="asset")
        payload = await self._request("GET", f"/assets/{asset}")
        data = payload.get("data")

        if not isinstance(data, dict):
            raise ProviderProtocolError(
                self.PROVIDER_NAME,
                "Unexpected response from Mux when fetching asset.",
            )

        playback_ids = [
            PlaybackIdentifier(id=str(pb["id"]), policy=str(pb.get("policy", "")))
            for pb in data.get("playback_ids") or []
            if isinstance(pb, dict) and pb.get("id")
        ]
        return ProviderAsset(
            asset_id=str(data.get("id") or asset),
            status=str(data.get("status") or ""),
            playback_ids=playback_ids,
        )

    async def _request(
        self,
        method: str,
        path: str,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Make an authenticated request and decode the JSON envelope.

        Returns:
            Decoded body; empty dict for 204 No Content.

        Raises:
            ProviderUnavailableError: On transport failure or non-2xx status.
            ProviderProtocolError: If a 2xx body is not a JSON object.
        """
        try:
            response = await self._client.request(method, path, json=json)
        except httpx.HTTPError as e:
            raise ProviderUnavailableError(
                self.PROVIDER_NAME,
                f"Could not reach Mux: {e.__class__.__name__}",
            ) from e

        if response.status_code == httpx.codes.NO_CONTENT:
            return {}

        try:
            body = response.json()
        except ValueError:
            body = None

        if not response.is_success:
            raise ProviderUnavailableError(
                self.PROVIDER_NAME,
                self._error_message(body, response.status_code),
                status_code=response.status_code,
            )

        if not isinstance(body, dict):
            raise ProviderProtocolError(
                self.PROVIDER_NAME,
                "Could not parse Mux API response.",
            )
        return body

    @staticmethod
    def _error_message(body: Any, status_code: int) -> str:
        if isinstance(body, dict):
            error = body.get("error")
            if isinstance(error, dict):
                messages = error.get("messages")
                if isinstance(messages, list) and messages:
                    return str(messages[0])
        return f"Mux API returned HTTP {status_code}"
