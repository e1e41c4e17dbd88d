from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import delete, update
from sqlalchemy.exc import IntegrityError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.session_repository import ISessionRepository
from src.domain.base import utcnow
from src.domain.entities import UserSession
from src.domain.errors import DuplicateEntityError


class SessionRepository(ISessionRepository):
    """Session repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, session_id: UUID) -> Optional[UserSession]:
        """Get session by ID"""
        stmt = select(UserSession).where(UserSession.id == session_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_active_by_user_and_device(
        self, user_id: UUID, device_id: str
    ) -> Optional[UserSession]:
        """Get the active session of a user on a device"""
        stmt = select(UserSession).where(
            UserSession.user_id == user_id,
            UserSession.device_id == device_id,
            UserSession.is_active == True,
        )
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_active_by_refresh_credential(
        self, refresh_credential_id: UUID
    ) -> Optional[UserSession]:
        """Get the active session backed by a refresh credential"""
        stmt = select(UserSession).where(
            UserSession.refresh_credential_id == refresh_credential_id,
            UserSession.is_active == True,
        )
        result = await self.session.exec(stmt)
        return result.first()

    async def list_active_by_user_id(self, user_id: UUID) -> List[UserSession]:
        """Active sessions for a user, most recent activity first"""
        stmt = (
            select(UserSession)
            .where(UserSession.user_id == user_id, UserSession.is_active == True)
            .order_by(UserSession.last_activity_at.desc())
        )
        result = await self.session.exec(stmt)
        return list(result.all())

    async def create(self, session_obj: UserSession) -> UserSession:
        """
        Create a new session

        Raises:
            DuplicateEntityError: the user already has an active session on the device
        """
        try:
            async with self.session.begin_nested():
                self.session.add(session_obj)
                await self.session.flush()
        except IntegrityError as exc:
            raise DuplicateEntityError(
                f"Active session exists for device {session_obj.device_id}"
            ) from exc
        await self.session.refresh(session_obj)
        return session_obj

    async def update(self, session_obj: UserSession) -> UserSession:
        """Update existing session"""
        session_obj.updated_at = utcnow()
        self.session.add(session_obj)
        await self.session.flush()
        await self.session.refresh(session_obj)
        return session_obj

    async def revoke_all_by_user_id(self, user_id: UUID) -> int:
        """Deactivate all active sessions for a user"""
        stmt = (
            update(UserSession)
            .where(UserSession.user_id == user_id, UserSession.is_active == True)
            .values(is_active=False, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount

    async def revoke_all_except_device(self, user_id: UUID, device_id: str) -> int:
        """Deactivate all active sessions for a user except one device"""
        stmt = (
            update(UserSession)
            .where(
                UserSession.user_id == user_id,
                UserSession.device_id != device_id,
                UserSession.is_active == True,
            )
            .values(is_active=False, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount

    async def delete_inactive_older_than(self, threshold: datetime) -> int:
        """Delete inactive sessions last updated before threshold"""
        stmt = delete(UserSession).where(
            UserSession.is_active == False,
            UserSession.updated_at < threshold,
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount
