"""
Update User Status Use Case

Administrative enable/disable of an account.
"""

import logging
from uuid import UUID

from src.app.services.refresh_coordinator import RefreshCoordinator
from src.app.services.session_registry import SessionRegistry
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import UserStatus
from src.domain.errors import AuthErrorCode, auth_error
from src.domain.result import Result, Return
from .dtos import UserStatusResponse

logger = logging.getLogger(__name__)


class UpdateUserStatusUseCase:
    """
    Use case for enabling or disabling a user.

    Business Rules:
    - Users are never deleted, only disabled
    - Disabling revokes every refresh credential and session in the same transaction
    - Re-enabling does not restore revoked credentials
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, user_id: UUID, active: bool) -> Result[UserStatusResponse]:
        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(auth_error(AuthErrorCode.NOT_FOUND, "User not found"))

            user.status = UserStatus.active if active else UserStatus.disabled
            user = await self.uow.users.update(user)

            revoked_credentials = 0
            revoked_sessions = 0
            if not active:
                revoked_credentials = await RefreshCoordinator(self.uow).revoke_all_for_user(
                    user.id
                )
                revoked_sessions = await SessionRegistry(self.uow).revoke_all(user.id)

            await self.uow.commit()

            logger.info(
                f"User {user.id} set to {user.status.value}, "
                f"revoked {revoked_credentials} credential(s)"
            )
            return Return.ok(
                UserStatusResponse(
                    user_id=str(user.id),
                    status=user.status.value,
                    revoked_credentials=revoked_credentials,
                    revoked_sessions=revoked_sessions,
                )
            )
