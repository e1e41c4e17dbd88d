"""
TrustedDevice Entity

Device-level trust that outlives any single session.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, SQLModel, UniqueConstraint

from src.domain.base import utcnow


class TrustedDevice(SQLModel, table=True):
    """
    TrustedDevice entity.

    Business Rules:
    - Unique per (user_id, device_id), active or not
    - Untrusting sets is_active=False; re-trusting reactivates the same row
    - trusted_at is set once, on first creation
    """

    __tablename__ = "trusted_devices"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    user_id: UUID = Field(foreign_key="users.id", nullable=False, index=True)
    device_id: str = Field(max_length=255, index=True)

    device_name: Optional[str] = Field(default=None, max_length=255)
    custom_name: Optional[str] = Field(default=None, max_length=255)
    device_model: Optional[str] = Field(default=None, max_length=255)
    platform: Optional[str] = Field(default=None, max_length=50)
    system_version: Optional[str] = Field(default=None, max_length=50)
    app_version: Optional[str] = Field(default=None, max_length=50)

    is_active: bool = Field(default=True)

    # Timestamps
    trusted_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    last_used_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        UniqueConstraint("user_id", "device_id", name="uk_trusted_device_user_device"),
    )
