"""
Logout Use Case

Ends the session backed by a refresh token.
"""

import logging

from src.app.services.refresh_coordinator import hash_refresh_token
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.result import Result, Return
from .dtos import MessageResponse

logger = logging.getLogger(__name__)


class LogoutUseCase:
    """
    Business Rules:
    - Revokes the presented refresh token and deactivates its session
    - Idempotent: unknown or already revoked tokens still succeed
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, refresh_token: str) -> Result[MessageResponse]:
        async with self.uow:
            credential = await self.uow.refresh_credentials.get_by_token_hash(
                hash_refresh_token(refresh_token)
            )
            if credential is not None:
                await self.uow.refresh_credentials.revoke_if_active(credential.id, utcnow())
                session = await self.uow.sessions.get_active_by_refresh_credential(
                    credential.id
                )
                if session is not None:
                    session.is_active = False
                    await self.uow.sessions.update(session)
                await self.uow.commit()
                logger.info(f"User {credential.user_id} logged out")

            return Return.ok(MessageResponse(message="Logged out successfully"))
