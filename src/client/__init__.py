"""Client library: upload session state machine and HTTP client."""

from src.client.http import SelectedFile, UploadApiClient, UploadApiError
from src.client.session import (
    ErrorKind,
    InvalidTransitionError,
    SessionError,
    SessionState,
    UploadSession,
)

__all__ = [
    "ErrorKind",
    "InvalidTransitionError",
    "SelectedFile",
    "SessionError",
    "SessionState",
    "UploadApiClient",
    "UploadApiError",
    "UploadSession",
]
