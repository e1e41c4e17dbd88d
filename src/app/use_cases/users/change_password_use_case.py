"""
Change Password Use Case

Sets or changes the password of the authenticated user.
"""

import logging
from typing import Optional
from uuid import UUID

from src.app.services.passwords import hash_password, verify_password
from src.app.services.refresh_coordinator import RefreshCoordinator
from src.app.services.session_registry import SessionRegistry
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import DEFAULT_DEVICE_ID
from src.domain.errors import AuthErrorCode, auth_error
from src.domain.result import Result, Return
from .dtos import ChangePasswordResponse

logger = logging.getLogger(__name__)


class ChangePasswordUseCase:
    """
    Use case for password change.

    Business Rules:
    - Accounts with a password must present the current one
    - Federated-only accounts may set a first password without one
    - The new password must differ from the current one
    - Every other device is signed out: credentials and sessions not
      belonging to the calling device are revoked
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        user_id: UUID,
        new_password: str,
        current_password: Optional[str] = None,
        current_device_id: str = DEFAULT_DEVICE_ID,
    ) -> Result[ChangePasswordResponse]:
        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(auth_error(AuthErrorCode.NOT_FOUND, "User not found"))

            if user.has_password:
                if not current_password or not verify_password(
                    current_password, user.password_hash
                ):
                    return Return.err(
                        auth_error(AuthErrorCode.INVALID_PASSWORD, "Current password is incorrect")
                    )
                if verify_password(new_password, user.password_hash):
                    return Return.err(
                        auth_error(
                            AuthErrorCode.INVALID_PASSWORD,
                            "New password must be different from the current password",
                        )
                    )

            had_password = user.has_password
            user.password_hash = hash_password(new_password)
            await self.uow.users.update(user)

            current_session = await self.uow.sessions.get_active_by_user_and_device(
                user.id, current_device_id
            )
            keep_id = current_session.refresh_credential_id if current_session else None

            revoked_credentials = await RefreshCoordinator(self.uow).revoke_all_for_user(
                user.id, keep_id=keep_id
            )
            revoked_sessions = await SessionRegistry(self.uow).revoke_all_except(
                user.id, current_device_id
            )

            await self.uow.commit()

            logger.info(f"User {user.id} {'changed' if had_password else 'set'} password")
            return Return.ok(
                ChangePasswordResponse(
                    message="Password changed successfully" if had_password else "Password set successfully",
                    revoked_credentials=revoked_credentials,
                    revoked_sessions=revoked_sessions,
                )
            )
