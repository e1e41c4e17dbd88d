from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel


class SessionResponse(BaseModel):
    """One device session of the current user"""

    id: str
    device_id: str
    device_name: Optional[str] = None
    device_model: Optional[str] = None
    platform: Optional[str] = None
    system_version: Optional[str] = None
    app_version: Optional[str] = None
    ip_address: Optional[str] = None
    is_trusted: bool
    is_current_session: bool
    last_activity_at: datetime
    created_at: datetime


class SessionListResponse(BaseModel):
    sessions: List[SessionResponse]
    total: int


class RevokeSessionsResponse(BaseModel):
    message: str
    revoked_count: int
