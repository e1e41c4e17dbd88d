"""
User Entity

Represents a person that can sign in with a password, a one-time code, or
a federated identity.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utcnow
from .enums import Role, UserStatus


class User(SQLModel, table=True):
    """
    User entity - one identity per email address.

    Business Rules:
    - Email must be unique across all users (stored lower-cased)
    - Phone number is optional but unique when present
    - Password hash is absent for federated-only accounts
    - Role is immutable once assigned
    - Users are disabled, never deleted
    """

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(unique=True, index=True, max_length=255)
    phone_number: Optional[str] = Field(
        default=None, unique=True, index=True, max_length=20
    )
    password_hash: Optional[str] = Field(default=None, max_length=60)  # Bcrypt output
    full_name: Optional[str] = Field(default=None, max_length=255)

    role: Role = Field(default=Role.USER)
    status: UserStatus = Field(default=UserStatus.active)

    email_verified: bool = Field(default=False)
    phone_verified: bool = Field(default=False)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    last_login_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_user_status", "status"),)

    @property
    def is_active(self) -> bool:
        return self.status == UserStatus.active

    @property
    def has_password(self) -> bool:
        return bool(self.password_hash)

    @property
    def display_name(self) -> str:
        return self.full_name or self.email.split("@")[0]
