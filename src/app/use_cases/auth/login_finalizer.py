"""
Login Finalizer

The tail shared by every login-style operation: stamp last login, issue a
refresh credential, mint an access token and record the device session.
"""

from typing import Optional

from src.app.services.refresh_coordinator import RefreshCoordinator
from src.app.services.session_registry import SessionRegistry
from src.app.services.token_issuer import TokenIssuer
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.entities import DeviceInfo, User
from src.domain.errors import ACCOUNT_DISABLED_MESSAGE, AuthErrorCode, auth_error
from src.domain.result import Result, Return
from .dtos import LoginResult, UserInfo


def to_user_info(user: User) -> UserInfo:
    return UserInfo(
        id=str(user.id),
        email=user.email,
        full_name=user.full_name,
        role=user.role.value,
        email_verified=user.email_verified,
        phone_verified=user.phone_verified,
    )


class LoginFinalizer:
    """Runs inside the caller's unit of work; the caller commits."""

    def __init__(self, uow: UnitOfWork, token_issuer: TokenIssuer, refresh_ttl_days: int = 7):
        self.uow = uow
        self.token_issuer = token_issuer
        self.refresh_coordinator = RefreshCoordinator(uow, ttl_days=refresh_ttl_days)
        self.session_registry = SessionRegistry(uow)

    async def complete(
        self,
        user: User,
        device: Optional[DeviceInfo] = None,
        ip_address: Optional[str] = None,
        is_new_user: bool = False,
    ) -> LoginResult:
        device = device or DeviceInfo()

        user.last_login_at = utcnow()
        user = await self.uow.users.update(user)

        issued = await self.refresh_coordinator.issue(user)
        access = self.token_issuer.issue_access_token(user.id, user.email, user.role)
        session = await self.session_registry.upsert(
            user.id, device, issued.credential.id, ip_address
        )

        return LoginResult(
            access_token=access.token,
            refresh_token=issued.token,
            expires_in=self.token_issuer.expire_minutes * 60,
            expires_at=access.expires_at,
            session_id=str(session.id),
            user=to_user_info(user),
            is_new_user=is_new_user,
        )

    async def reject_disabled(self, user: User) -> Result[LoginResult]:
        """Revoke every credential of a disabled user and report ACCOUNT_DISABLED. The caller commits."""
        await self.refresh_coordinator.revoke_all_for_user(user.id)
        await self.session_registry.revoke_all(user.id)
        return Return.err(auth_error(AuthErrorCode.ACCOUNT_DISABLED, ACCOUNT_DISABLED_MESSAGE))
