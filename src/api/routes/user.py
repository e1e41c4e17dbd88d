from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from pydantic import BaseModel, Field

from src.api.error import raise_for_error
from src.api.utils.request_context import device_id_header
from src.app.services.token_issuer import AccessTokenClaims
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.users import (
    ChangePasswordResponse,
    ChangePasswordUseCase,
    GetProfileUseCase,
    UserProfileResponse,
)
from src.depends import get_current_user, get_unit_of_work

router = APIRouter(prefix="/me", tags=["User"])


@router.get("", status_code=status.HTTP_200_OK, response_model=UserProfileResponse)
async def get_me(
    current_user: AccessTokenClaims = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Profile of the authenticated user"""
    use_case = GetProfileUseCase(uow)
    result = await use_case.execute(current_user.user_id)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class ChangePasswordRequest(BaseModel):
    current_password: Optional[str] = Field(
        None, description="Required unless the account has no password yet"
    )
    new_password: str = Field(..., min_length=8, description="New password (min 8 chars)")


@router.post("/password", status_code=status.HTTP_200_OK, response_model=ChangePasswordResponse)
async def change_password(
    request: ChangePasswordRequest,
    http_request: Request,
    current_user: AccessTokenClaims = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Change or Set Password

    Signs out every other device (X-Device-Id names the calling one).

    Raises:
        - 400 Bad Request: Current password wrong or new password unchanged
    """
    use_case = ChangePasswordUseCase(uow)
    result = await use_case.execute(
        current_user.user_id,
        request.new_password,
        current_password=request.current_password,
        current_device_id=device_id_header(http_request),
    )

    if result.is_err():
        raise_for_error(result.error)

    return result.value
