"""Request-scoped security primitives."""

from src.commons.security.tokens import TokenScope, UploadTokenService

__all__ = [
    "TokenScope",
    "UploadTokenService",
]
