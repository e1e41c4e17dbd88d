from uuid import UUID

from fastapi import APIRouter, Depends, Request, status

from src.api.error import raise_for_error
from src.api.utils.request_context import device_id_header
from src.app.services.token_issuer import AccessTokenClaims
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.sessions import (
    ManageSessionsUseCase,
    RevokeSessionsResponse,
    SessionListResponse,
)
from src.depends import get_current_user, get_unit_of_work

router = APIRouter(prefix="/sessions", tags=["Sessions"])


@router.get("", status_code=status.HTTP_200_OK, response_model=SessionListResponse)
async def list_sessions(
    request: Request,
    current_user: AccessTokenClaims = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    List Active Sessions

    The session of the device named in X-Device-Id is flagged as current.
    """
    use_case = ManageSessionsUseCase(uow)
    result = await use_case.list_sessions(current_user.user_id, device_id_header(request))

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.delete(
    "/{session_id}",
    status_code=status.HTTP_200_OK,
    response_model=RevokeSessionsResponse,
)
async def revoke_session(
    session_id: UUID,
    current_user: AccessTokenClaims = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Revoke Specific Session

    Ends one session and its refresh token.

    Raises:
        - 403 Forbidden: Session belongs to another user
        - 404 Not Found: Session not found
    """
    use_case = ManageSessionsUseCase(uow)
    result = await use_case.revoke_session(current_user.user_id, session_id)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.post(
    "/revoke-others",
    status_code=status.HTTP_200_OK,
    response_model=RevokeSessionsResponse,
)
async def revoke_other_sessions(
    request: Request,
    current_user: AccessTokenClaims = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Revoke every session except the one on the calling device (X-Device-Id)"""
    use_case = ManageSessionsUseCase(uow)
    result = await use_case.revoke_other_sessions(
        current_user.user_id, device_id_header(request)
    )

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.post(
    "/revoke-all",
    status_code=status.HTTP_200_OK,
    response_model=RevokeSessionsResponse,
)
async def revoke_all_sessions(
    current_user: AccessTokenClaims = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Revoke All Sessions, the calling one included"""
    use_case = ManageSessionsUseCase(uow)
    result = await use_case.revoke_all_sessions(current_user.user_id)

    if result.is_err():
        raise_for_error(result.error)

    return result.value
