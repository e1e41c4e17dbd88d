"""
UserSession Entity

Tracks one user being signed in on one device.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import text
from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utcnow


class UserSession(SQLModel, table=True):
    """
    UserSession entity - per (user, device) sign-in record.

    Business Rules:
    - At most one active session per (user_id, device_id)
    - Re-login from the same device updates the active row in place
    - is_trusted is copied from the trusted device registry at upsert time
    - refresh_credential_id follows the credential through rotations
    - Revoked sessions are kept with is_active=False
    """

    __tablename__ = "sessions"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    user_id: UUID = Field(foreign_key="users.id", nullable=False, index=True)
    refresh_credential_id: Optional[UUID] = Field(
        default=None, foreign_key="refresh_credentials.id", index=True
    )

    # Device
    device_id: str = Field(max_length=255, index=True)
    device_name: Optional[str] = Field(default=None, max_length=255)
    device_model: Optional[str] = Field(default=None, max_length=255)
    platform: Optional[str] = Field(default=None, max_length=50)
    system_version: Optional[str] = Field(default=None, max_length=50)
    app_version: Optional[str] = Field(default=None, max_length=50)
    ip_address: Optional[str] = Field(default=None, max_length=45)

    is_trusted: bool = Field(default=False)
    is_active: bool = Field(default=True)

    # Timestamps
    last_activity_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index(
            "uq_session_user_device_active",
            "user_id",
            "device_id",
            unique=True,
            sqlite_where=text("is_active = 1"),
            postgresql_where=text("is_active = true"),
        ),
        Index("idx_session_user_active", "user_id", "is_active"),
    )
