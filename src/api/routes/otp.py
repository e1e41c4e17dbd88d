from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from pydantic import BaseModel, EmailStr, Field

from src.api.error import raise_for_error
from src.api.utils.request_context import client_ip
from src.app.use_cases.auth import LoginResult, OtpSentResponse
from src.app.use_cases.otp import EmailOtpLoginUseCase, PhoneOtpLoginUseCase
from src.depends import get_email_otp_login_use_case, get_phone_otp_login_use_case
from src.domain.entities import DeviceInfo

router = APIRouter(prefix="/auth/otp", tags=["OTP Login"])


class EmailOtpSendRequest(BaseModel):
    email: EmailStr = Field(..., description="Email of an existing account")


class EmailOtpVerifyRequest(BaseModel):
    email: EmailStr = Field(..., description="Email the code was sent to")
    otp: str = Field(..., min_length=4, max_length=10, description="Code from the email")
    device: Optional[DeviceInfo] = Field(None, description="Calling device")


class PhoneOtpSendRequest(BaseModel):
    phone_number: str = Field(..., min_length=4, max_length=20, description="Phone of an existing account")


class PhoneOtpVerifyRequest(BaseModel):
    phone_number: str = Field(..., min_length=4, max_length=20, description="Phone the code was sent to")
    otp: str = Field(..., min_length=4, max_length=10, description="Code from the SMS")
    device: Optional[DeviceInfo] = Field(None, description="Calling device")


@router.post("/email/send", status_code=status.HTTP_200_OK, response_model=OtpSentResponse)
async def send_email_otp(
    request: EmailOtpSendRequest,
    use_case: EmailOtpLoginUseCase = Depends(get_email_otp_login_use_case),
):
    """
    Send Email Login Code

    Raises:
        - 404 Not Found: No active account for this email
        - 429 Too Many Requests: A code was sent less than a minute ago
        - 503 Service Unavailable: Delivery failed, retry later
    """
    result = await use_case.send(request.email)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.post("/email/verify", status_code=status.HTTP_200_OK, response_model=LoginResult)
async def verify_email_otp(
    request: EmailOtpVerifyRequest,
    http_request: Request,
    use_case: EmailOtpLoginUseCase = Depends(get_email_otp_login_use_case),
):
    """
    Verify Email Login Code

    Raises:
        - 400 Bad Request: Wrong code (remaining attempts in the message)
        - 404 Not Found: No pending code
        - 410 Gone: Code expired
        - 429 Too Many Requests: Attempts exhausted
    """
    result = await use_case.verify(
        request.email, request.otp, request.device, client_ip(http_request)
    )

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.post("/phone/send", status_code=status.HTTP_200_OK, response_model=OtpSentResponse)
async def send_phone_otp(
    request: PhoneOtpSendRequest,
    use_case: PhoneOtpLoginUseCase = Depends(get_phone_otp_login_use_case),
):
    """Send Phone Login Code"""
    result = await use_case.send(request.phone_number)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.post("/phone/verify", status_code=status.HTTP_200_OK, response_model=LoginResult)
async def verify_phone_otp(
    request: PhoneOtpVerifyRequest,
    http_request: Request,
    use_case: PhoneOtpLoginUseCase = Depends(get_phone_otp_login_use_case),
):
    """Verify Phone Login Code"""
    result = await use_case.verify(
        request.phone_number, request.otp, request.device, client_ip(http_request)
    )

    if result.is_err():
        raise_for_error(result.error)

    return result.value
