"""Content/video binding storage."""

from src.infrastructure.bindings.base import BindingRepositoryBase
from src.infrastructure.bindings.document_repository import DocumentBindingRepository

__all__ = [
    "BindingRepositoryBase",
    "DocumentBindingRepository",
]
