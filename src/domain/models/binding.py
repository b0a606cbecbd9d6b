"""Content-to-video binding domain model."""

from datetime import UTC, datetime
from typing import Any, Self

from pydantic import BaseModel, Field


class ContentVideoBinding(BaseModel):
    """Durable association between one content record and one video.

    A content record has zero or one binding. The binding is written once
    when the record is created and is only changed afterwards by an
    administrative edit.
    """

    content_id: int = Field(ge=1, description="Host content record ID")
    provider: str = Field(description="Name of the backend that hosts the video")
    playback_id: str = Field(description="Public playback ID used by players")
    asset_id: str | None = Field(
        default=None,
        description="Provider asset ID, needed for remote cleanup",
    )
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="When the binding was first written",
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="Last administrative change",
    )

    def to_document(self) -> dict[str, Any]:
        """Serialize for the document store, keyed by content ID."""
        doc = self.model_dump()
        doc["id"] = str(self.content_id)
        return doc

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> Self:
        """Rebuild a binding from a stored document."""
        data = {k: v for k, v in doc.items() if k not in ("id", "_id")}
        return cls(**data)


class PendingVideo(BaseModel):
    """Video fields captured from a submission before the host strips them."""

    playback_id: str = Field(default="", description="Submitted playback ID")
    asset_id: str = Field(default="", description="Submitted asset ID")

    @property
    def is_empty(self) -> bool:
        """Whether the submission carried no video at all."""
        return not self.playback_id
