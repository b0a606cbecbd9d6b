"""API route handlers."""

from src.api.openapi.routes import content, health, tokens, uploads

__all__ = [
    "content",
    "health",
    "tokens",
    "uploads",
]
