"""
RefreshCredential Entity

Long-lived opaque credentials exchanged for fresh access tokens.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utcnow


class RefreshCredential(SQLModel, table=True):
    """
    RefreshCredential entity - one row per issued refresh token.

    Business Rules:
    - Only the SHA-256 hash of the token is stored
    - Single-use: rotation revokes the presented row and issues a new one
    - Revoked rows are kept (retention is handled outside the service)
    - Expires after 7 days by default
    """

    __tablename__ = "refresh_credentials"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    user_id: UUID = Field(foreign_key="users.id", nullable=False, index=True)
    token_hash: str = Field(unique=True, index=True, max_length=64)  # SHA-256 hex

    revoked: bool = Field(default=False)
    revoked_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    expires_at: datetime = Field(sa_column=Column(DateTime, nullable=False))

    __table_args__ = (
        Index("idx_refresh_credential_expires_at", "expires_at"),
        Index("idx_refresh_credential_user_revoked", "user_id", "revoked"),
    )
