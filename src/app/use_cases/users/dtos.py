"""
User Use Case DTOs
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class UserProfileResponse(BaseModel):
    """Current user's profile"""

    id: str
    email: str
    phone_number: Optional[str] = None
    full_name: Optional[str] = None
    role: str
    status: str
    email_verified: bool
    phone_verified: bool
    has_password: bool
    created_at: datetime
    last_login_at: Optional[datetime] = None


class UserStatusResponse(BaseModel):
    """Response for admin status change"""

    user_id: str
    status: str
    revoked_credentials: int
    revoked_sessions: int


class ChangePasswordResponse(BaseModel):
    message: str
    revoked_credentials: int
    revoked_sessions: int
