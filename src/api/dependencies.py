"""FastAPI dependency injection for services and settings."""

import hmac
from dataclasses import dataclass
from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Request, status

from src.api.middleware.error_handler import APIError
from src.api.middleware.logging import client_address
from src.application.services import (
    BindingManager,
    DirectUploadService,
    FixedWindowRateLimiter,
    PollingCoordinator,
)
from src.commons.security import TokenScope, UploadTokenService
from src.commons.settings.loader import get_settings as _load_settings
from src.commons.settings.models import Settings
from src.domain.exceptions import (
    FeatureDisabledError,
    GuestsNotAllowedError,
    RateLimitedError,
)
from src.infrastructure.factory import (
    InfrastructureFactory,
    get_factory,
    reset_factory,
)


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Returns:
        Application settings loaded from config files and environment.
    """
    return _load_settings()


def get_infrastructure_factory(
    settings: Annotated[Settings, Depends(get_settings)],
) -> InfrastructureFactory:
    """Get infrastructure factory with all providers.

    Args:
        settings: Application settings.

    Returns:
        Configured infrastructure factory.
    """
    return get_factory(settings)


def get_token_service(
    factory: Annotated[InfrastructureFactory, Depends(get_infrastructure_factory)],
) -> UploadTokenService:
    return factory.get_token_service()


def get_direct_upload_service(
    factory: Annotated[InfrastructureFactory, Depends(get_infrastructure_factory)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> DirectUploadService:
    """Get the direct upload service.

    The provider is resolved lazily so a missing credential pair surfaces as
    a typed error from the service rather than from dependency resolution.
    """
    return DirectUploadService(
        settings=settings,
        provider_resolver=factory.get_video_provider,
        binding_repository=factory.get_binding_repository(),
    )


def get_polling_coordinator(
    factory: Annotated[InfrastructureFactory, Depends(get_infrastructure_factory)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> PollingCoordinator:
    return PollingCoordinator(
        settings=settings,
        provider_resolver=factory.get_video_provider,
    )


def get_binding_manager(
    factory: Annotated[InfrastructureFactory, Depends(get_infrastructure_factory)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> BindingManager:
    """Get the content binding manager with all dependencies."""
    return BindingManager(
        repository=factory.get_binding_repository(),
        settings=settings,
        token_service=factory.get_token_service(),
        provider_resolver=factory.get_video_provider,
    )


class _RateLimiterHolder:
    """Holder for the process-wide rate limiter."""

    instance: FixedWindowRateLimiter | None = None


def get_rate_limiter(
    settings: Annotated[Settings, Depends(get_settings)],
) -> FixedWindowRateLimiter:
    """Get the shared upload-slot rate limiter."""
    if _RateLimiterHolder.instance is None:
        _RateLimiterHolder.instance = FixedWindowRateLimiter(
            max_requests=settings.rate_limiting.requests,
            window_seconds=settings.rate_limiting.window_seconds,
        )
    return _RateLimiterHolder.instance


@dataclass(frozen=True)
class Caller:
    """Who is making the request, as asserted by the host's proxy."""

    user_id: str | None
    client_ip: str
    is_admin: bool = False

    @property
    def is_authenticated(self) -> bool:
        return bool(self.user_id)


def get_caller(
    request: Request,
    settings: Annotated[Settings, Depends(get_settings)],
) -> Caller:
    """Identify the caller from trusted headers and the socket address."""
    security = settings.security
    user_id = request.headers.get(security.user_header) or None
    admin_token = request.headers.get(security.admin_header) or ""
    is_admin = bool(security.admin_token) and hmac.compare_digest(
        admin_token.encode(),
        security.admin_token.encode(),
    )
    return Caller(
        user_id=user_id,
        client_ip=client_address(request),
        is_admin=is_admin,
    )


class UploadAccessGuard:
    """Checks shared by every upload endpoint, in order.

    1. feature enabled
    2. guests allowed, or caller authenticated
    3. upload-scoped token valid
    """

    def __init__(
        self,
        settings: Settings,
        token_service: UploadTokenService,
        rate_limiter: FixedWindowRateLimiter,
    ) -> None:
        self._settings = settings
        self._tokens = token_service
        self._limiter = rate_limiter

    def ensure_available(self, caller: Caller) -> None:
        """Raise if the feature is off or the caller is a disallowed guest."""
        feature = self._settings.feature
        if not feature.enabled:
            raise FeatureDisabledError()
        if not caller.is_authenticated and not feature.allow_guests:
            raise GuestsNotAllowedError()

    def authorize(self, caller: Caller, token: str | None) -> None:
        """Run the availability checks, then verify the upload token."""
        self.ensure_available(caller)
        self._tokens.verify(token, TokenScope.UPLOAD)

    async def enforce_rate_limit(self, caller: Caller) -> None:
        """Count the request against the caller's address."""
        if not self._settings.rate_limiting.enabled:
            return
        decision = await self._limiter.hit(caller.client_ip)
        if not decision.allowed:
            raise RateLimitedError(decision.retry_after)


def get_upload_guard(
    settings: Annotated[Settings, Depends(get_settings)],
    token_service: Annotated[UploadTokenService, Depends(get_token_service)],
    rate_limiter: Annotated[FixedWindowRateLimiter, Depends(get_rate_limiter)],
) -> UploadAccessGuard:
    return UploadAccessGuard(settings, token_service, rate_limiter)


def require_admin(
    caller: Annotated[Caller, Depends(get_caller)],
) -> Caller:
    """Reject callers without the administrative token."""
    if not caller.is_admin:
        raise APIError(
            code="FORBIDDEN",
            message="Administrative access required.",
            status_code=status.HTTP_403_FORBIDDEN,
        )
    return caller


# Type aliases for cleaner route signatures
SettingsDep = Annotated[Settings, Depends(get_settings)]
FactoryDep = Annotated[InfrastructureFactory, Depends(get_infrastructure_factory)]
TokenServiceDep = Annotated[UploadTokenService, Depends(get_token_service)]
DirectUploadServiceDep = Annotated[
    DirectUploadService, Depends(get_direct_upload_service)
]
PollingCoordinatorDep = Annotated[PollingCoordinator, Depends(get_polling_coordinator)]
BindingManagerDep = Annotated[BindingManager, Depends(get_binding_manager)]
CallerDep = Annotated[Caller, Depends(get_caller)]
AdminDep = Annotated[Caller, Depends(require_admin)]
UploadGuardDep = Annotated[UploadAccessGuard, Depends(get_upload_guard)]


async def init_services(settings: Settings) -> None:
    """Initialize all infrastructure services on startup.

    Args:
        settings: Application settings.
    """
    factory = get_factory(settings)

    # Pre-initialize critical services to fail fast
    factory.get_document_db()
    factory.get_token_service()


async def shutdown_services() -> None:
    """Shutdown all infrastructure services."""
    try:
        factory = get_factory()
        await factory.close_all()
    except ValueError:
        pass  # Factory not initialized
    finally:
        reset_factory()
        _RateLimiterHolder.instance = None
        get_settings.cache_clear()
