"""
Admin API Routes - System Administration Endpoints

These endpoints are for internal back-office tooling.
Authentication is via Admin API Key, not user access tokens.
"""

from uuid import UUID
from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field

from src.api.error import raise_for_error
from src.api.utils.admin_auth import verify_admin_api_key
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.sessions import ManageSessionsUseCase
from src.app.use_cases.users import UpdateUserStatusUseCase, UserStatusResponse
from src.depends import get_unit_of_work

router = APIRouter(prefix="/admin", tags=["Admin"])


class UpdateUserStatusRequest(BaseModel):
    active: bool = Field(..., description="False disables the account and signs it out everywhere")


class CleanupSessionsResponse(BaseModel):
    deleted_count: int


@router.patch(
    "/users/{user_id}/status",
    status_code=status.HTTP_200_OK,
    response_model=UserStatusResponse,
    dependencies=[Depends(verify_admin_api_key)],
)
async def update_user_status(
    user_id: UUID,
    request: UpdateUserStatusRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Enable or Disable User

    Disabling revokes every refresh token and session of the user.

    Raises:
        - 401 Unauthorized: Missing or invalid admin API key
        - 404 Not Found: User not found
    """
    use_case = UpdateUserStatusUseCase(uow)
    result = await use_case.execute(user_id, request.active)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.post(
    "/sessions/cleanup",
    status_code=status.HTTP_200_OK,
    response_model=CleanupSessionsResponse,
    dependencies=[Depends(verify_admin_api_key)],
)
async def cleanup_sessions(
    older_than_days: int = Query(30, ge=1),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Delete ended sessions older than the given number of days"""
    use_case = ManageSessionsUseCase(uow)
    result = await use_case.cleanup_inactive(older_than_days)

    if result.is_err():
        raise_for_error(result.error)

    return CleanupSessionsResponse(deleted_count=result.value)
