from typing import Optional

from fastapi import APIRouter, Depends, Header, Request, status
from pydantic import BaseModel, EmailStr, Field

from src.api.error import raise_for_error
from src.api.utils.request_context import client_ip
from src.app.services.token_issuer import TokenIssuer
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth import (
    LoginCommand,
    LoginResult,
    LoginUseCase,
    LogoutUseCase,
    MessageResponse,
    RefreshTokenResponse,
    RefreshTokenUseCase,
    RegisterCommand,
    RegisterUseCase,
    TokenValidationResponse,
    ValidateTokenUseCase,
)
from src.depends import (
    get_login_use_case,
    get_refresh_token_use_case,
    get_register_use_case,
    get_token_issuer,
    get_unit_of_work,
)
from src.domain.entities import DeviceInfo, Role

router = APIRouter(prefix="/auth", tags=["Authentication"])


class RegisterRequest(BaseModel):
    """
    Register HTTP request payload

    Validates incoming HTTP request before converting to RegisterCommand.
    """

    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., min_length=8, description="User password (min 8 chars)")
    full_name: Optional[str] = Field(None, max_length=255, description="Display name")
    phone_number: Optional[str] = Field(None, max_length=20, description="Phone number")
    role: Role = Field(Role.USER, description="USER or SERVICE_PROVIDER")
    device: Optional[DeviceInfo] = Field(None, description="Calling device")


@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=LoginResult)
async def register(
    request: RegisterRequest,
    http_request: Request,
    use_case: RegisterUseCase = Depends(get_register_use_case),
):
    """
    User Registration

    Creates an account and signs it in on the calling device.

    Raises:
        - 400 Bad Request: Role cannot be self-registered
        - 409 Conflict: Email or phone number already registered
        - 422 Unprocessable Entity: Invalid input (handled by FastAPI)
    """
    command = RegisterCommand(
        email=request.email,
        password=request.password,
        full_name=request.full_name,
        phone_number=request.phone_number,
        role=request.role,
        device=request.device or DeviceInfo(),
        ip_address=client_ip(http_request),
    )
    result = await use_case.execute(command)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class LoginRequest(BaseModel):
    """Email + password login payload"""

    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., description="User password")
    device: Optional[DeviceInfo] = Field(None, description="Calling device")


@router.post("/login", status_code=status.HTTP_200_OK, response_model=LoginResult)
async def login(
    request: LoginRequest,
    http_request: Request,
    use_case: LoginUseCase = Depends(get_login_use_case),
):
    """
    User Login

    Raises:
        - 400 Bad Request: Account uses external sign-in only
        - 401 Unauthorized: Invalid credentials
        - 403 Forbidden: Account disabled
    """
    result = await use_case.execute(
        LoginCommand(
            email=request.email,
            password=request.password,
            device=request.device or DeviceInfo(),
            ip_address=client_ip(http_request),
        )
    )

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class PhoneLoginRequest(BaseModel):
    """Phone + password login payload"""

    phone_number: str = Field(..., min_length=4, max_length=20, description="Phone number")
    password: str = Field(..., description="User password")
    device: Optional[DeviceInfo] = Field(None, description="Calling device")


@router.post("/login/phone", status_code=status.HTTP_200_OK, response_model=LoginResult)
async def login_with_phone(
    request: PhoneLoginRequest,
    http_request: Request,
    use_case: LoginUseCase = Depends(get_login_use_case),
):
    """Phone Number Login"""
    result = await use_case.execute(
        LoginCommand(
            phone_number=request.phone_number,
            password=request.password,
            device=request.device or DeviceInfo(),
            ip_address=client_ip(http_request),
        )
    )

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class RefreshRequest(BaseModel):
    """Refresh token HTTP request payload"""

    refresh_token: str = Field(..., description="Refresh token")


@router.post("/refresh", status_code=status.HTTP_200_OK, response_model=RefreshTokenResponse)
async def refresh(
    request: RefreshRequest,
    use_case: RefreshTokenUseCase = Depends(get_refresh_token_use_case),
):
    """
    Refresh Access Token

    Exchanges a refresh token for a new pair. The presented token is
    revoked (rotation).

    Raises:
        - 401 Unauthorized: Invalid, expired or already used token
        - 403 Forbidden: Account disabled
    """
    result = await use_case.execute(request.refresh_token)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.post("/logout", status_code=status.HTTP_200_OK, response_model=MessageResponse)
async def logout(request: RefreshRequest, uow: UnitOfWork = Depends(get_unit_of_work)):
    """Logout: revokes the refresh token and ends its session"""
    use_case = LogoutUseCase(uow)
    result = await use_case.execute(request.refresh_token)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class ValidateTokenRequest(BaseModel):
    token: Optional[str] = Field(None, description="Access token; falls back to the Authorization header")


@router.post("/validate", status_code=status.HTTP_200_OK, response_model=TokenValidationResponse)
async def validate_token(
    request: ValidateTokenRequest,
    authorization: Optional[str] = Header(None),
    token_issuer: TokenIssuer = Depends(get_token_issuer),
):
    """
    Validate Access Token

    For other services. Always 200; the body says whether the token is valid.
    """
    token = request.token or authorization or ""
    result = ValidateTokenUseCase(token_issuer).execute(token)
    return result.value
