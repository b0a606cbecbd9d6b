"""Media hosting provider implementations."""

from src.infrastructure.providers.base import VideoProviderBase
from src.infrastructure.providers.mux_provider import MuxVideoProvider
from src.infrastructure.providers.status_mapper import MuxStatusMapper

__all__ = [
    "MuxStatusMapper",
    "MuxVideoProvider",
    "VideoProviderBase",
]
