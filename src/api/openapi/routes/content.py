"""Content record video hooks exposed over HTTP."""

from typing import Annotated

from fastapi import APIRouter, Path

from src.api.dependencies import AdminDep, BindingManagerDep, CallerDep
from src.application.dtos.content import (
    AdminUpdateVideoRequest,
    BindVideoRequest,
    BindVideoResponse,
    ContentVideoResponse,
    DeleteContentVideoResponse,
)

router = APIRouter()

ContentId = Annotated[int, Path(ge=1, description="Host content record ID")]


@router.post(
    "/content/{content_id}/video",
    response_model=BindVideoResponse,
    summary="Bind a video to new content",
    description=(
        "After-insert hook. Attaches the submitted playback ID to the content "
        "record when every check passes. Never fails the host's request."
    ),
)
async def bind_video(
    content_id: ContentId,
    request: BindVideoRequest,
    caller: CallerDep,
    manager: BindingManagerDep,
) -> BindVideoResponse:
    """Bind a submitted video."""
    pending = manager.capture_submission(request.model_dump())
    binding = await manager.bind_on_create(
        content_id=content_id,
        pending=pending,
        submit_token=request.submit_token,
        is_authenticated=caller.is_authenticated,
    )
    return BindVideoResponse(
        bound=binding is not None,
        playback_id=binding.playback_id if binding else None,
    )


@router.put(
    "/content/{content_id}/video",
    response_model=ContentVideoResponse,
    summary="Edit a content record's video",
    description=(
        "Administrative edit. An empty playback ID removes the video and its "
        "remote asset."
    ),
)
async def update_video(
    content_id: ContentId,
    request: AdminUpdateVideoRequest,
    _admin: AdminDep,
    manager: BindingManagerDep,
) -> ContentVideoResponse:
    """Apply an administrative edit."""
    binding = await manager.admin_update(content_id, request.playback_id)
    return ContentVideoResponse(
        content_id=content_id,
        playback_id=binding.playback_id if binding else None,
    )


@router.delete(
    "/content/{content_id}/video",
    response_model=DeleteContentVideoResponse,
    summary="Clean up after content deletion",
    description="After-delete hook. Removes the remote asset and the binding.",
)
async def delete_video(
    content_id: ContentId,
    _admin: AdminDep,
    manager: BindingManagerDep,
) -> DeleteContentVideoResponse:
    """Run cleanup for a deleted content record."""
    remote_deleted = await manager.on_delete(content_id)
    return DeleteContentVideoResponse(
        content_id=content_id,
        remote_deleted=remote_deleted,
    )


@router.get(
    "/content/{content_id}/video",
    response_model=ContentVideoResponse,
    summary="Get a content record's video",
)
async def get_video(
    content_id: ContentId,
    manager: BindingManagerDep,
) -> ContentVideoResponse:
    """Read the bound playback ID."""
    return ContentVideoResponse(
        content_id=content_id,
        playback_id=await manager.get_playback_id(content_id),
    )
