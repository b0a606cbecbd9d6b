"""Upload and asset domain models."""

from enum import Enum

from pydantic import BaseModel, Field


class UploadStatus(str, Enum):
    """Canonical processing status of a direct upload."""

    WAITING = "waiting"  # Upload slot issued, no asset yet
    ASSET_CREATED = "asset_created"  # Asset exists but is not playable yet
    READY = "ready"  # Asset is playable and has a public playback ID
    ERRORED = "errored"  # Terminal failure (errored or cancelled upstream)


class PlaybackPolicy(str, Enum):
    """Access policy attached to a playback ID."""

    PUBLIC = "public"
    SIGNED = "signed"


class ProviderUploadHandle(BaseModel):
    """Single-use slot returned by the provider for a direct upload.

    Treated as a capability token: the orchestrator hands it to the client
    and never manages it as a resource of its own.
    """

    upload_id: str = Field(description="Provider upload identifier")
    upload_url: str = Field(description="Time-boxed target for the binary transfer")
    expires_at: str | None = Field(
        default=None,
        description="Upload URL expiry as reported by the provider",
    )


class PlaybackIdentifier(BaseModel):
    """A playback ID and the policy it was issued under."""

    id: str = Field(description="Playback identifier")
    policy: str = Field(description="Provider playback policy name")


class ProviderAsset(BaseModel):
    """The provider's durable representation of a processed media item."""

    asset_id: str = Field(description="Provider asset identifier")
    status: str = Field(default="", description="Backend-native processing status")
    playback_ids: list[PlaybackIdentifier] = Field(
        default_factory=list,
        description="All playback IDs attached to the asset",
    )

    @property
    def public_playback_id(self) -> str | None:
        """First playback ID issued under the public policy, if any."""
        for playback in self.playback_ids:
            if playback.policy == PlaybackPolicy.PUBLIC.value and playback.id:
                return playback.id
        return None


class UploadStatusResult(BaseModel):
    """Normalized result of an upload status query."""

    status: UploadStatus = Field(description="Canonical processing status")
    asset_id: str | None = Field(default=None, description="Asset ID once created")
    playback_id: str | None = Field(
        default=None,
        description="Public playback ID, present only when ready",
    )

    @property
    def is_ready(self) -> bool:
        """Whether the upload resolved to a playable asset."""
        return self.status == UploadStatus.READY and bool(self.playback_id)

    @property
    def is_terminal(self) -> bool:
        """Whether polling can stop."""
        return self.status in (UploadStatus.READY, UploadStatus.ERRORED)


class DirectUploadOptions(BaseModel):
    """Options passed to the provider when requesting an upload slot."""

    cors_origin: str = Field(
        default="*",
        description="Origin allowed to perform the browser transfer",
    )
    timeout_seconds: int = Field(
        default=3600,
        ge=60,
        le=7 * 24 * 3600,
        description="Lifetime of the upload URL in seconds",
    )
    public_playback: bool = Field(
        default=True,
        description="Whether new assets get a public playback policy",
    )
