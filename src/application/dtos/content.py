"""DTOs for content record video bindings."""

from pydantic import BaseModel, Field


class BindVideoRequest(BaseModel):
    """Video fields carried by a content submission."""

    playback_id: str = Field(default="", description="Playback ID from a ready poll")
    asset_id: str = Field(default="", description="Asset ID for remote cleanup")
    submit_token: str = Field(default="", description="Submission-scoped token")


class BindVideoResponse(BaseModel):
    """Outcome of the after-insert hook. Never an error."""

    bound: bool = Field(description="Whether the content record has a video")
    playback_id: str | None = Field(
        default=None,
        description="Bound playback ID",
    )


class AdminUpdateVideoRequest(BaseModel):
    """Administrative edit of a binding; empty clears it."""

    playback_id: str = Field(default="", description="New playback ID or empty")


class ContentVideoResponse(BaseModel):
    """Read model for a content record's video."""

    content_id: int = Field(description="Host content record ID")
    playback_id: str | None = Field(default=None, description="Bound playback ID")


class DeleteContentVideoResponse(BaseModel):
    """Outcome of the after-delete hook."""

    content_id: int = Field(description="Host content record ID")
    remote_deleted: bool = Field(
        description="Whether a remote asset deletion was performed",
    )
