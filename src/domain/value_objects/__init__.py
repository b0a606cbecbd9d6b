"""Domain value objects."""

from src.domain.value_objects.media_identifier import (
    MEDIA_ID_PATTERN,
    MediaId,
    is_valid_media_id,
)

__all__ = [
    "MEDIA_ID_PATTERN",
    "MediaId",
    "is_valid_media_id",
]
