"""Token issuing endpoint."""

from fastapi import APIRouter

from src.api.dependencies import CallerDep, SettingsDep, TokenServiceDep, UploadGuardDep
from src.application.dtos.uploads import IssueTokensResponse
from src.commons.security import TokenScope

router = APIRouter()


@router.post(
    "/tokens",
    response_model=IssueTokensResponse,
    summary="Issue upload tokens",
    description=(
        "Issue the upload and submission tokens plus the limits a page needs "
        "to render the upload control."
    ),
)
async def issue_tokens(
    caller: CallerDep,
    guard: UploadGuardDep,
    tokens: TokenServiceDep,
    settings: SettingsDep,
) -> IssueTokensResponse:
    """Issue a token pair for the current caller."""
    guard.ensure_available(caller)

    return IssueTokensResponse(
        upload_token=tokens.issue(TokenScope.UPLOAD, subject=caller.user_id),
        submit_token=tokens.issue(TokenScope.COMMENT_SUBMIT, subject=caller.user_id),
        expires_in=tokens.ttl_seconds,
        max_size_mb=settings.feature.max_size_mb,
        allowed_extensions=settings.feature.allowed_extensions,
    )
