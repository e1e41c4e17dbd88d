"""
Session Registry

Per-device session tracking: one active session per (user, device).
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import List, Optional
from uuid import UUID

from src.app.services.trusted_device_registry import TrustedDeviceRegistry
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.entities import DeviceInfo, UserSession
from src.domain.errors import AuthErrorCode, DuplicateEntityError, auth_error
from src.domain.result import Result, Return

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionView:
    id: UUID
    device_id: str
    device_name: Optional[str]
    device_model: Optional[str]
    platform: Optional[str]
    system_version: Optional[str]
    app_version: Optional[str]
    ip_address: Optional[str]
    is_trusted: bool
    is_current_session: bool
    last_activity_at: datetime
    created_at: datetime

    @classmethod
    def from_session(cls, session: UserSession, current_device_id: Optional[str]):
        return cls(
            id=session.id,
            device_id=session.device_id,
            device_name=session.device_name,
            device_model=session.device_model,
            platform=session.platform,
            system_version=session.system_version,
            app_version=session.app_version,
            ip_address=session.ip_address,
            is_trusted=session.is_trusted,
            is_current_session=current_device_id is not None
            and session.device_id == current_device_id,
            last_activity_at=session.last_activity_at,
            created_at=session.created_at,
        )


def _apply_device(
    session: UserSession,
    device: DeviceInfo,
    refresh_credential_id: Optional[UUID],
    ip_address: Optional[str],
    is_trusted: bool,
    now: datetime,
) -> None:
    session.refresh_credential_id = refresh_credential_id
    session.device_name = device.device_name
    session.device_model = device.device_model
    session.platform = device.platform
    session.system_version = device.system_version
    session.app_version = device.app_version
    session.ip_address = ip_address
    session.is_trusted = is_trusted
    session.last_activity_at = now


class SessionRegistry:
    """
    Business Rules:
    - Logging in again from the same device updates the active row in place
      and revokes the refresh credential the row pointed at before
    - is_trusted is read from the trusted device registry at upsert time
    - Only the owner may revoke a session
    - Revoking a session does not revoke its refresh credential; callers do both
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow
        self.trusted_devices = TrustedDeviceRegistry(uow)

    async def upsert(
        self,
        user_id: UUID,
        device: DeviceInfo,
        refresh_credential_id: Optional[UUID],
        ip_address: Optional[str] = None,
    ) -> UserSession:
        now = utcnow()
        is_trusted = await self.trusted_devices.is_trusted(user_id, device.device_id)

        session = await self.uow.sessions.get_active_by_user_and_device(
            user_id, device.device_id
        )
        if session is None:
            session = UserSession(user_id=user_id, device_id=device.device_id, created_at=now)
            _apply_device(session, device, refresh_credential_id, ip_address, is_trusted, now)
            try:
                session = await self.uow.sessions.create(session)
                logger.info(
                    f"Created session {session.id} for user {user_id} on device {device.device_id}"
                )
                return session
            except DuplicateEntityError:
                # Another login on this device inserted the row first
                session = await self.uow.sessions.get_active_by_user_and_device(
                    user_id, device.device_id
                )
                if session is None:
                    raise

        superseded_id = session.refresh_credential_id
        _apply_device(session, device, refresh_credential_id, ip_address, is_trusted, now)
        session = await self.uow.sessions.update(session)
        if superseded_id is not None and superseded_id != refresh_credential_id:
            await self.uow.refresh_credentials.revoke_by_ids([superseded_id], now)
            logger.info(f"Revoked superseded refresh credential {superseded_id} of session {session.id}")
        logger.info(f"Updated session {session.id} for user {user_id} on device {device.device_id}")
        return session

    async def list_active(
        self, user_id: UUID, current_device_id: Optional[str] = None
    ) -> List[SessionView]:
        sessions = await self.uow.sessions.list_active_by_user_id(user_id)
        return [SessionView.from_session(s, current_device_id) for s in sessions]

    async def revoke(self, user_id: UUID, session_id: UUID) -> Result[UserSession]:
        session = await self.uow.sessions.get_by_id(session_id)
        if session is None:
            return Return.err(auth_error(AuthErrorCode.NOT_FOUND, "Session not found"))
        if session.user_id != user_id:
            return Return.err(
                auth_error(AuthErrorCode.NOT_AUTHORIZED, "Not authorized to revoke this session")
            )

        if session.is_active:
            session.is_active = False
            session = await self.uow.sessions.update(session)
            logger.info(f"Revoked session {session_id} for user {user_id}")
        return Return.ok(session)

    async def revoke_all_except(self, user_id: UUID, except_device_id: str) -> int:
        count = await self.uow.sessions.revoke_all_except_device(user_id, except_device_id)
        logger.info(f"Revoked {count} session(s) for user {user_id} except device {except_device_id}")
        return count

    async def revoke_all(self, user_id: UUID) -> int:
        count = await self.uow.sessions.revoke_all_by_user_id(user_id)
        logger.info(f"Revoked {count} session(s) for user {user_id}")
        return count

    async def touch_for_rotation(
        self, old_credential_id: UUID, new_credential_id: UUID
    ) -> Optional[UserSession]:
        """Point the session backed by the rotated credential at its successor."""
        session = await self.uow.sessions.get_active_by_refresh_credential(old_credential_id)
        if session is None:
            return None
        session.refresh_credential_id = new_credential_id
        session.last_activity_at = utcnow()
        return await self.uow.sessions.update(session)

    async def set_trust(
        self, user_id: UUID, device_id: str, trusted: bool
    ) -> Optional[UserSession]:
        session = await self.uow.sessions.get_active_by_user_and_device(user_id, device_id)
        if session is None:
            return None
        session.is_trusted = trusted
        return await self.uow.sessions.update(session)

    async def cleanup_inactive(self, older_than_days: int = 30) -> int:
        threshold = utcnow() - timedelta(days=older_than_days)
        count = await self.uow.sessions.delete_inactive_older_than(threshold)
        logger.info(f"Deleted {count} inactive session(s) older than {older_than_days} days")
        return count
