"""DTOs for direct upload operations."""

from pydantic import BaseModel, Field

from src.domain.models.upload import UploadStatus


class CreateUploadRequest(BaseModel):
    """Request for a direct upload slot."""

    file_name: str = Field(
        default="",
        max_length=512,
        description="Original file name, used for the extension check",
    )
    file_size: int = Field(ge=0, description="File size in bytes")
    token: str = Field(default="", description="Upload-scoped token")


class CreateUploadResponse(BaseModel):
    """Direct upload slot handed to the client."""

    upload_id: str = Field(description="Provider upload identifier")
    upload_url: str = Field(description="Single-use URL the file is sent to")
    expires_at: str | None = Field(
        default=None,
        description="Upload URL expiry as reported by the provider",
    )


class UploadStatusResponse(BaseModel):
    """Canonical status of an upload."""

    status: UploadStatus = Field(description="Canonical processing status")
    asset_id: str | None = Field(default=None, description="Asset ID once created")
    playback_id: str | None = Field(
        default=None,
        description="Public playback ID, only when status is ready",
    )


class DeleteUploadResponse(BaseModel):
    """Result of a client-initiated remote cleanup."""

    deleted: bool = Field(description="Whether a remote asset was deleted")
    asset_id: str | None = Field(
        default=None,
        description="Asset that was targeted, if one was resolved",
    )


class IssueTokensResponse(BaseModel):
    """Tokens and limits the client needs to render the upload control."""

    upload_token: str = Field(description="Token for the upload endpoints")
    submit_token: str = Field(description="Token for the comment submission")
    expires_in: int = Field(description="Token lifetime in seconds")
    max_size_mb: int = Field(description="Maximum upload size in megabytes")
    allowed_extensions: list[str] = Field(
        default_factory=list,
        description="Accepted file extensions",
    )
