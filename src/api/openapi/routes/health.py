"""Health check endpoints."""

from enum import Enum

from fastapi import APIRouter
from pydantic import BaseModel, Field

from src.api.dependencies import FactoryDep, SettingsDep

router = APIRouter()


class HealthStatus(str, Enum):
    """Health check status."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


class ComponentHealth(BaseModel):
    """Health status of a single component."""

    name: str = Field(description="Component name")
    status: HealthStatus = Field(description="Component health status")
    message: str | None = Field(default=None, description="Additional details")
    latency_ms: float | None = Field(default=None, description="Probe latency")


class HealthResponse(BaseModel):
    """Health check response."""

    status: HealthStatus = Field(description="Overall health status")
    version: str = Field(description="Application version")
    environment: str = Field(description="Deployment environment")
    components: list[ComponentHealth] = Field(
        default_factory=list,
        description="Individual component health",
    )


class LivenessResponse(BaseModel):
    """Simple liveness response."""

    status: str = Field(default="ok")


class ReadinessResponse(BaseModel):
    """Readiness check response."""

    ready: bool = Field(description="Whether the service is ready to accept requests")
    checks: dict[str, bool] = Field(
        default_factory=dict,
        description="Individual readiness checks",
    )


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Get overall health status of the service and its components.",
)
async def health_check(
    settings: SettingsDep,
    factory: FactoryDep,
) -> HealthResponse:
    """Check health of all service components."""
    components: list[ComponentHealth] = []

    # Document database
    try:
        result = await factory.get_document_db().health_check()
        components.append(
            ComponentHealth(
                name="document_db",
                status=HealthStatus.HEALTHY if result.healthy else HealthStatus.UNHEALTHY,
                message=result.message,
                latency_ms=round(result.latency_ms, 2),
            )
        )
    except Exception as e:
        components.append(
            ComponentHealth(
                name="document_db",
                status=HealthStatus.UNHEALTHY,
                message=str(e),
            )
        )

    # Media provider: only whether it can be called at all
    if settings.has_provider_credentials():
        components.append(
            ComponentHealth(
                name="video_provider",
                status=HealthStatus.HEALTHY,
                message=f"Provider: {settings.provider.name}",
            )
        )
    else:
        components.append(
            ComponentHealth(
                name="video_provider",
                status=HealthStatus.DEGRADED,
                message="Provider credentials are not configured",
            )
        )

    statuses = {c.status for c in components}
    if HealthStatus.UNHEALTHY in statuses:
        overall_status = HealthStatus.UNHEALTHY
    elif HealthStatus.DEGRADED in statuses:
        overall_status = HealthStatus.DEGRADED
    else:
        overall_status = HealthStatus.HEALTHY

    return HealthResponse(
        status=overall_status,
        version=settings.app.version,
        environment=settings.app.environment,
        components=components,
    )


@router.get(
    "/health/live",
    response_model=LivenessResponse,
    summary="Liveness probe",
    description="Simple liveness check for Kubernetes probes.",
)
async def liveness() -> LivenessResponse:
    """Simple liveness check - just verifies the app is running."""
    return LivenessResponse(status="ok")


@router.get(
    "/health/ready",
    response_model=ReadinessResponse,
    summary="Readiness probe",
    description="Readiness check for Kubernetes probes.",
)
async def readiness(
    settings: SettingsDep,
    factory: FactoryDep,
) -> ReadinessResponse:
    """Check if service is ready to accept requests."""
    checks: dict[str, bool] = {}

    try:
        result = await factory.get_document_db().health_check()
        checks["document_db"] = result.healthy
    except Exception:
        checks["document_db"] = False

    checks["provider_credentials"] = settings.has_provider_credentials()

    return ReadinessResponse(ready=all(checks.values()), checks=checks)
