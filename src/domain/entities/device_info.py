"""
DeviceInfo Value Object

Metadata a client reports about the device it is signing in from.
"""

from typing import Optional

from pydantic import BaseModel, Field

# Used when a client signs in without describing its device
DEFAULT_DEVICE_ID = "unknown"


class DeviceInfo(BaseModel):
    device_id: str = Field(default=DEFAULT_DEVICE_ID, min_length=1, max_length=255)
    device_name: Optional[str] = Field(default=None, max_length=255)
    device_model: Optional[str] = Field(default=None, max_length=255)
    platform: Optional[str] = Field(default=None, max_length=50)  # ios, android, web
    system_version: Optional[str] = Field(default=None, max_length=50)
    app_version: Optional[str] = Field(default=None, max_length=50)
    custom_name: Optional[str] = Field(default=None, max_length=255)
