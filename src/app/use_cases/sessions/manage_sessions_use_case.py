"""
Manage Sessions Use Case

Lets a user see and end their own device sessions.
"""

from dataclasses import asdict
from typing import Optional
from uuid import UUID

from src.app.services.refresh_coordinator import RefreshCoordinator
from src.app.services.session_registry import SessionRegistry
from src.app.services.unit_of_work import UnitOfWork
from src.domain.result import Result, Return
from .dtos import RevokeSessionsResponse, SessionListResponse, SessionResponse


class ManageSessionsUseCase:
    """
    Use case for session management.

    Business Rules:
    - Users only see and revoke their own sessions
    - Ending a session also revokes the refresh credential behind it
    - Three revocation modes: specific, all-except-current, all
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def list_sessions(
        self, user_id: UUID, current_device_id: Optional[str] = None
    ) -> Result[SessionListResponse]:
        async with self.uow:
            views = await SessionRegistry(self.uow).list_active(user_id, current_device_id)
            sessions = [SessionResponse(**{**asdict(v), "id": str(v.id)}) for v in views]
            return Return.ok(SessionListResponse(sessions=sessions, total=len(sessions)))

    async def revoke_session(
        self, user_id: UUID, session_id: UUID
    ) -> Result[RevokeSessionsResponse]:
        async with self.uow:
            result = await SessionRegistry(self.uow).revoke(user_id, session_id)
            if result.is_err():
                return result

            session = result.value
            if session.refresh_credential_id is not None:
                await RefreshCoordinator(self.uow).revoke_by_ids([session.refresh_credential_id])

            await self.uow.commit()

            return Return.ok(
                RevokeSessionsResponse(message="Session revoked successfully", revoked_count=1)
            )

    async def revoke_other_sessions(
        self, user_id: UUID, current_device_id: str
    ) -> Result[RevokeSessionsResponse]:
        async with self.uow:
            registry = SessionRegistry(self.uow)
            sessions = await self.uow.sessions.list_active_by_user_id(user_id)
            credential_ids = [
                s.refresh_credential_id
                for s in sessions
                if s.device_id != current_device_id and s.refresh_credential_id is not None
            ]

            count = await registry.revoke_all_except(user_id, current_device_id)
            await RefreshCoordinator(self.uow).revoke_by_ids(credential_ids)

            await self.uow.commit()

            return Return.ok(
                RevokeSessionsResponse(
                    message=f"Successfully revoked {count} session(s)", revoked_count=count
                )
            )

    async def revoke_all_sessions(self, user_id: UUID) -> Result[RevokeSessionsResponse]:
        async with self.uow:
            count = await SessionRegistry(self.uow).revoke_all(user_id)
            await RefreshCoordinator(self.uow).revoke_all_for_user(user_id)

            await self.uow.commit()

            return Return.ok(
                RevokeSessionsResponse(
                    message=f"Successfully revoked {count} session(s)", revoked_count=count
                )
            )

    async def cleanup_inactive(self, older_than_days: int = 30) -> Result[int]:
        """Delete sessions that ended more than older_than_days ago."""
        async with self.uow:
            count = await SessionRegistry(self.uow).cleanup_inactive(older_than_days)
            await self.uow.commit()
            return Return.ok(count)
