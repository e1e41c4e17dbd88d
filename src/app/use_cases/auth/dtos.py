"""
Authentication Use Case DTOs (Data Transfer Objects)

All Command and Response classes for auth domain.
Provides type safety and clear contracts between layers.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr, Field

from src.domain.entities import DeviceInfo, Role


# ============================================================================
# Command DTOs
# ============================================================================


class RegisterCommand(BaseModel):
    """Self-service registration"""

    email: EmailStr
    password: str = Field(..., min_length=8)
    full_name: Optional[str] = None
    phone_number: Optional[str] = None
    role: Role = Role.USER
    device: DeviceInfo = Field(default_factory=DeviceInfo)
    ip_address: Optional[str] = None


class LoginCommand(BaseModel):
    """Password login by email or by phone number (exactly one of them)"""

    email: Optional[str] = None
    phone_number: Optional[str] = None
    password: str
    device: DeviceInfo = Field(default_factory=DeviceInfo)
    ip_address: Optional[str] = None


# ============================================================================
# Response DTOs
# ============================================================================


class UserInfo(BaseModel):
    """User summary returned with every token pair"""

    id: str
    email: str
    full_name: Optional[str] = None
    role: str
    email_verified: bool
    phone_verified: bool


class LoginResult(BaseModel):
    """Token pair produced by every login-style operation"""

    access_token: str
    refresh_token: str
    token_type: str = "Bearer"
    expires_in: int
    expires_at: datetime
    session_id: str
    user: UserInfo
    is_new_user: bool = False


class RefreshTokenResponse(BaseModel):
    """Response for refresh token use case"""

    access_token: str
    refresh_token: str
    token_type: str = "Bearer"
    expires_in: int
    expires_at: datetime
    session_id: Optional[str] = None


class OtpSentResponse(BaseModel):
    """Response for OTP send use cases"""

    message: str
    destination: str


class TokenValidationResponse(BaseModel):
    """Response for access token validation"""

    valid: bool
    user_id: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None
    token_type: Optional[str] = None
    issued_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None


class MessageResponse(BaseModel):
    message: str
