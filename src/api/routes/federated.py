from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from pydantic import BaseModel, Field

from src.api.error import raise_for_error
from src.api.utils.request_context import client_ip
from src.app.use_cases.auth import FederatedLoginUseCase, LoginResult
from src.depends import get_federated_login_use_case
from src.domain.entities import DeviceInfo

router = APIRouter(prefix="/auth/federated", tags=["Federated Login"])


class GoogleLoginRequest(BaseModel):
    id_token: str = Field(..., min_length=1, description="Google ID token from the client SDK")
    role: Optional[str] = Field(None, description="USER (default) or SERVICE_PROVIDER")
    device: Optional[DeviceInfo] = Field(None, description="Calling device")


@router.post("/google", status_code=status.HTTP_200_OK, response_model=LoginResult)
async def google_login(
    request: GoogleLoginRequest,
    http_request: Request,
    use_case: FederatedLoginUseCase = Depends(get_federated_login_use_case),
):
    """
    Google Sign-In

    Signs in an existing account or creates one on first sight.

    Raises:
        - 401 Unauthorized: ID token rejected
        - 403 Forbidden: Email not verified by Google, or account disabled
        - 409 Conflict: Email registered under another role
        - 503 Service Unavailable: Google sign-in not configured or unreachable
    """
    result = await use_case.execute(
        request.id_token, request.role, request.device, client_ip(http_request)
    )

    if result.is_err():
        raise_for_error(result.error)

    return result.value
