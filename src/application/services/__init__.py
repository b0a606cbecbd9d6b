"""Application services for direct uploads and content bindings."""

from src.application.services.bindings import BindingManager
from src.application.services.direct_upload import DirectUploadService
from src.application.services.polling import PollingCoordinator
from src.application.services.rate_limiter import (
    FixedWindowRateLimiter,
    RateLimitDecision,
)

__all__ = [
    "BindingManager",
    "DirectUploadService",
    "FixedWindowRateLimiter",
    "PollingCoordinator",
    "RateLimitDecision",
]
