"""Data Transfer Objects for API boundaries."""

from src.application.dtos.content import (
    AdminUpdateVideoRequest,
    BindVideoRequest,
    BindVideoResponse,
    ContentVideoResponse,
    DeleteContentVideoResponse,
)
from src.application.dtos.uploads import (
    CreateUploadRequest,
    CreateUploadResponse,
    DeleteUploadResponse,
    IssueTokensResponse,
    UploadStatusResponse,
)

__all__ = [
    # Uploads
    "CreateUploadRequest",
    "CreateUploadResponse",
    "UploadStatusResponse",
    "DeleteUploadResponse",
    "IssueTokensResponse",
    # Content
    "BindVideoRequest",
    "BindVideoResponse",
    "AdminUpdateVideoRequest",
    "ContentVideoResponse",
    "DeleteContentVideoResponse",
]
