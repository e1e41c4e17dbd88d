"""
Federated Login Use Case

Sign in (or sign up) with an identity asserted by an external provider.
"""

import asyncio
import logging
from typing import Optional

from src.app.services.contact import normalize_email
from src.app.services.identity_resolver import IdentityResolver
from src.app.services.identity_verifier import (
    FederatedIdentityVerifier,
    IdentityVerificationError,
)
from src.app.services.notification_gateway import NotificationGateway
from src.app.services.token_issuer import TokenIssuer
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import SELF_REGISTRABLE_ROLES, DeviceInfo, Role
from src.domain.errors import AuthErrorCode, auth_error
from src.domain.result import Result, Return
from .dtos import LoginResult
from .login_finalizer import LoginFinalizer

logger = logging.getLogger(__name__)


class FederatedLoginUseCase:
    """
    Use case for federated (e.g. Google) login.

    Business Rules:
    - The assertion is verified before any local lookup
    - Only assertions with a verified email are accepted
    - Requested role defaults to USER; non self-registrable roles fall back to USER
    - Existing accounts keep their role; a mismatch fails ROLE_CONFLICT
    - New accounts get a best-effort welcome notification
    """

    def __init__(
        self,
        uow: UnitOfWork,
        token_issuer: TokenIssuer,
        verifier: Optional[FederatedIdentityVerifier],
        notifications: NotificationGateway,
        refresh_ttl_days: int = 7,
        call_timeout_seconds: float = 10.0,
    ):
        self.uow = uow
        self.token_issuer = token_issuer
        self.verifier = verifier
        self.notifications = notifications
        self.refresh_ttl_days = refresh_ttl_days
        self.call_timeout_seconds = call_timeout_seconds

    async def execute(
        self,
        assertion: str,
        requested_role: Optional[str] = None,
        device: Optional[DeviceInfo] = None,
        ip_address: Optional[str] = None,
    ) -> Result[LoginResult]:
        if self.verifier is None:
            return Return.err(
                auth_error(
                    AuthErrorCode.FEDERATED_LOGIN_UNAVAILABLE,
                    "Federated login is not configured",
                )
            )

        try:
            identity = await asyncio.wait_for(
                self.verifier.verify(assertion), timeout=self.call_timeout_seconds
            )
        except IdentityVerificationError as exc:
            logger.warning(f"Rejected identity assertion: {exc}")
            return Return.err(
                auth_error(AuthErrorCode.INVALID_IDENTITY_ASSERTION, "Invalid identity token")
            )
        except asyncio.TimeoutError:
            return Return.err(
                auth_error(
                    AuthErrorCode.FEDERATED_LOGIN_UNAVAILABLE,
                    "Identity provider did not respond. Please try again.",
                )
            )

        if not identity.email_verified:
            return Return.err(
                auth_error(
                    AuthErrorCode.IDENTITY_NOT_VERIFIED,
                    "Email address is not verified by the identity provider",
                )
            )

        role = self._resolve_role(requested_role)

        async with self.uow:
            resolved = await IdentityResolver(self.uow).resolve(
                identity.email, role, identity.display_name
            )
            if resolved.is_err():
                if resolved.error.code == AuthErrorCode.ACCOUNT_DISABLED.value:
                    user = await self.uow.users.get_by_email(normalize_email(identity.email))
                    finalizer = LoginFinalizer(self.uow, self.token_issuer, self.refresh_ttl_days)
                    result = await finalizer.reject_disabled(user)
                    await self.uow.commit()
                    return result
                if resolved.error.code == AuthErrorCode.ROLE_CONFLICT.value:
                    logger.warning(
                        f"Role mismatch for federated login: requested {role.value}"
                    )
                return resolved

            user = resolved.value.user
            is_new_user = resolved.value.is_new_user

            finalizer = LoginFinalizer(self.uow, self.token_issuer, self.refresh_ttl_days)
            result = await finalizer.complete(user, device, ip_address, is_new_user=is_new_user)

            await self.uow.commit()

            email, name = user.email, user.display_name

        if is_new_user:
            await self._send_welcome(email, name)

        return Return.ok(result)

    @staticmethod
    def _resolve_role(requested_role: Optional[str]) -> Role:
        if not requested_role:
            return Role.USER
        try:
            role = Role(requested_role.upper())
        except ValueError:
            logger.warning(f"Unknown role requested via federated login: {requested_role}")
            return Role.USER
        if role not in SELF_REGISTRABLE_ROLES:
            logger.warning(f"Role {role.value} cannot be requested via federated login")
            return Role.USER
        return role

    async def _send_welcome(self, email: str, name: str) -> None:
        try:
            sent = await asyncio.wait_for(
                self.notifications.send_welcome(email, name),
                timeout=self.call_timeout_seconds,
            )
        except asyncio.TimeoutError:
            sent = False
        if not sent:
            logger.warning("Welcome notification was not delivered")
