"""Direct upload endpoints."""

from typing import Annotated

from fastapi import APIRouter, Query

from src.api.dependencies import (
    CallerDep,
    DirectUploadServiceDep,
    PollingCoordinatorDep,
    UploadGuardDep,
)
from src.application.dtos.uploads import (
    CreateUploadRequest,
    CreateUploadResponse,
    DeleteUploadResponse,
    UploadStatusResponse,
)

router = APIRouter()


@router.post(
    "/uploads",
    response_model=CreateUploadResponse,
    summary="Create a direct upload",
    description=(
        "Validate the described file and return a single-use URL the client "
        "sends the file to. Rate limited per client address."
    ),
)
async def create_upload(
    request: CreateUploadRequest,
    caller: CallerDep,
    guard: UploadGuardDep,
    service: DirectUploadServiceDep,
) -> CreateUploadResponse:
    """Issue a direct upload slot."""
    guard.authorize(caller, request.token)
    await guard.enforce_rate_limit(caller)
    return await service.create(request)


@router.get(
    "/uploads/status",
    response_model=UploadStatusResponse,
    response_model_exclude_none=True,
    summary="Get upload status",
    description=(
        "Poll the canonical status of an upload. The playback ID is only "
        "returned once the video is ready."
    ),
)
async def get_upload_status(
    caller: CallerDep,
    guard: UploadGuardDep,
    coordinator: PollingCoordinatorDep,
    upload_id: Annotated[str | None, Query(description="Upload to poll")] = None,
    token: Annotated[str | None, Query(description="Upload-scoped token")] = None,
) -> UploadStatusResponse:
    """Poll an upload."""
    guard.authorize(caller, token)
    return await coordinator.get_status(upload_id)


@router.delete(
    "/uploads",
    response_model=DeleteUploadResponse,
    summary="Discard an upload",
    description=(
        "Best-effort removal of the remote media for an upload the client "
        "abandoned. Accepts an asset ID, or an upload ID that is resolved to "
        "its asset."
    ),
)
async def discard_upload(
    caller: CallerDep,
    guard: UploadGuardDep,
    service: DirectUploadServiceDep,
    asset_id: Annotated[str | None, Query(description="Asset to delete")] = None,
    upload_id: Annotated[str | None, Query(description="Upload to resolve")] = None,
    token: Annotated[str | None, Query(description="Upload-scoped token")] = None,
) -> DeleteUploadResponse:
    """Discard an abandoned upload."""
    guard.authorize(caller, token)
    return await service.discard(asset_id=asset_id, upload_id=upload_id)
