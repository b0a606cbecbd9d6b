"""Media identifier value object."""

from __future__ import annotations

import re
from typing import Annotated

from pydantic import BaseModel, Field, field_validator

from src.domain.exceptions import InvalidIdentifierError

# Provider-issued identifiers (upload, asset, playback) are alphanumeric + hyphen
MEDIA_ID_PATTERN = re.compile(r"^[A-Za-z0-9-]+$")


def is_valid_media_id(value: object) -> bool:
    """Check whether a value is an acceptable provider identifier.

    Args:
        value: Candidate identifier.

    Returns:
        True if value is a non-empty string of letters, digits and hyphens.
    """
    return isinstance(value, str) and bool(MEDIA_ID_PATTERN.fullmatch(value))


class MediaId(BaseModel):
    """Value object representing a validated provider identifier.

    Used for playback IDs before they are bound to content, and for
    upload/asset IDs before they are placed in a provider URL path.

    Examples:
        >>> MediaId(value="a1B2-c3").value
        'a1B2-c3'

        >>> MediaId.parse("abc/123", kind="playback")
        Traceback (most recent call last):
        ...
        src.domain.exceptions.InvalidIdentifierError: Invalid playback ID.
    """

    value: Annotated[
        str,
        Field(min_length=1, max_length=255, description="Provider identifier"),
    ]

    @field_validator("value")
    @classmethod
    def validate_format(cls, v: str) -> str:
        """Validate that the value only holds letters, digits and hyphens."""
        if not MEDIA_ID_PATTERN.fullmatch(v):
            msg = (
                f"Invalid media identifier format: '{v}'. "
                "Must contain only letters, digits, or hyphens."
            )
            raise ValueError(msg)
        return v

    @classmethod
    def parse(cls, value: str | None, kind: str = "media") -> MediaId:
        """Build a MediaId, raising a domain error on bad input.

        Args:
            value: Raw identifier, possibly padded with whitespace.
            kind: Identifier kind used in the error message.

        Returns:
            A MediaId instance.

        Raises:
            InvalidIdentifierError: If the value is empty or malformed.
        """
        candidate = value.strip() if isinstance(value, str) else ""
        if not is_valid_media_id(candidate) or len(candidate) > 255:
            raise InvalidIdentifierError(kind, value)
        return cls(value=candidate)

    def __str__(self) -> str:
        return self.value

    def __hash__(self) -> int:
        return hash(self.value)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, MediaId):
            return self.value == other.value
        if isinstance(other, str):
            return self.value == other
        return False
