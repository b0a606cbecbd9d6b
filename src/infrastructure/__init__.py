"""Infrastructure layer - external service implementations."""

from src.infrastructure.bindings import BindingRepositoryBase, DocumentBindingRepository
from src.infrastructure.factory import (
    InfrastructureFactory,
    get_factory,
    reset_factory,
)
from src.infrastructure.providers import (
    MuxStatusMapper,
    MuxVideoProvider,
    VideoProviderBase,
)

__all__ = [
    # Factory
    "InfrastructureFactory",
    "get_factory",
    "reset_factory",
    # Providers
    "VideoProviderBase",
    "MuxVideoProvider",
    "MuxStatusMapper",
    # Bindings
    "BindingRepositoryBase",
    "DocumentBindingRepository",
]
