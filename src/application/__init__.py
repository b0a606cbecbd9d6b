"""Application layer - use cases and orchestration.

This layer contains:
- Services: Upload slot issuing, status polling, bindings, rate limiting
- DTOs: Data transfer objects for API boundaries
"""

from src.application.dtos import (
    AdminUpdateVideoRequest,
    BindVideoRequest,
    BindVideoResponse,
    ContentVideoResponse,
    CreateUploadRequest,
    CreateUploadResponse,
    DeleteContentVideoResponse,
    DeleteUploadResponse,
    IssueTokensResponse,
    UploadStatusResponse,
)
from src.application.services import (
    BindingManager,
    DirectUploadService,
    FixedWindowRateLimiter,
    PollingCoordinator,
    RateLimitDecision,
)

__all__ = [
    # DTOs
    "AdminUpdateVideoRequest",
    "BindVideoRequest",
    "BindVideoResponse",
    "ContentVideoResponse",
    "CreateUploadRequest",
    "CreateUploadResponse",
    "DeleteContentVideoResponse",
    "DeleteUploadResponse",
    "IssueTokensResponse",
    "UploadStatusResponse",
    # Services
    "BindingManager",
    "DirectUploadService",
    "FixedWindowRateLimiter",
    "PollingCoordinator",
    "RateLimitDecision",
]
