from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel


class TrustedDeviceResponse(BaseModel):
    id: str
    device_id: str
    device_name: Optional[str] = None
    custom_name: Optional[str] = None
    device_model: Optional[str] = None
    platform: Optional[str] = None
    trusted_at: datetime
    last_used_at: datetime


class TrustedDeviceListResponse(BaseModel):
    devices: List[TrustedDeviceResponse]
    total: int


class UntrustDeviceResponse(BaseModel):
    message: str
    device_id: str
