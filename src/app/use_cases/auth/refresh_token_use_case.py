"""
Refresh Token Use Case

Exchanges a refresh token for a new token pair (rotation).
"""

from src.app.services.refresh_coordinator import RefreshCoordinator
from src.app.services.session_registry import SessionRegistry
from src.app.services.token_issuer import TokenIssuer
from src.app.services.unit_of_work import UnitOfWork
from src.domain.errors import AuthErrorCode
from src.domain.result import Result, Return
from .dtos import RefreshTokenResponse


class RefreshTokenUseCase:
    """
    Use case for refreshing access tokens.

    Business Rules:
    - Refresh token rotation: old token revoked, new token issued
    - Revoked or expired tokens are rejected
    - A disabled owner gets all tokens revoked and ACCOUNT_DISABLED
    - The device session follows the new credential
    """

    def __init__(self, uow: UnitOfWork, token_issuer: TokenIssuer, refresh_ttl_days: int = 7):
        self.uow = uow
        self.token_issuer = token_issuer
        self.refresh_ttl_days = refresh_ttl_days

    async def execute(self, refresh_token: str) -> Result[RefreshTokenResponse]:
        async with self.uow:
            coordinator = RefreshCoordinator(self.uow, ttl_days=self.refresh_ttl_days)
            result = await coordinator.rotate(refresh_token)

            if result.is_err():
                if result.error.code == AuthErrorCode.ACCOUNT_DISABLED.value:
                    # Persist the cascading revoke before reporting
                    await self.uow.commit()
                return result

            rotation = result.value
            session = await SessionRegistry(self.uow).touch_for_rotation(
                rotation.previous_credential_id, rotation.issued.credential.id
            )

            await self.uow.commit()

            user = rotation.user
            access = self.token_issuer.issue_access_token(user.id, user.email, user.role)
            return Return.ok(
                RefreshTokenResponse(
                    access_token=access.token,
                    refresh_token=rotation.issued.token,
                    expires_in=self.token_issuer.expire_minutes * 60,
                    expires_at=access.expires_at,
                    session_id=str(session.id) if session else None,
                )
            )
