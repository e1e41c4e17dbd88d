"""
Refresh Coordinator

Issues, rotates and revokes opaque refresh credentials. Works inside the
caller's UnitOfWork and never commits on its own.
"""

import hashlib
import logging
import secrets
from dataclasses import dataclass
from datetime import timedelta
from typing import Iterable, Optional
from uuid import UUID

from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.entities import RefreshCredential, User
from src.domain.errors import ACCOUNT_DISABLED_MESSAGE, AuthErrorCode, auth_error
from src.domain.result import Result, Return

logger = logging.getLogger(__name__)

INVALID_REFRESH_TOKEN_MESSAGE = "Invalid or expired refresh token"


def hash_refresh_token(token: str) -> str:
    return hashlib.sha256(token.encode()).hexdigest()


@dataclass(frozen=True)
class IssuedRefreshToken:
    """Plain token (returned to the client once) and its stored row."""

    token: str
    credential: RefreshCredential


@dataclass(frozen=True)
class RefreshRotation:
    user: User
    previous_credential_id: UUID
    issued: IssuedRefreshToken


class RefreshCoordinator:
    """
    Refresh credential lifecycle.

    Business Rules:
    - Tokens are 256-bit random values; only their SHA-256 hash is stored
    - A credential is valid only while unrevoked and unexpired
    - Rotation is single-use: exactly one of two concurrent rotations wins
    - Rotating a token of a disabled user revokes all of that user's tokens
    - Presenting an already revoked token is logged as a possible replay
    """

    def __init__(self, uow: UnitOfWork, ttl_days: int = 7):
        self.uow = uow
        self.ttl = timedelta(days=ttl_days)

    async def issue(self, user: User) -> IssuedRefreshToken:
        token = secrets.token_urlsafe(32)
        now = utcnow()
        credential = RefreshCredential(
            user_id=user.id,
            token_hash=hash_refresh_token(token),
            created_at=now,
            expires_at=now + self.ttl,
        )
        credential = await self.uow.refresh_credentials.create(credential)
        return IssuedRefreshToken(token=token, credential=credential)

    async def rotate(self, token: str) -> Result[RefreshRotation]:
        """
        Exchange a refresh token for a new one.

        Returns:
            Result with RefreshRotation, or Error INVALID_CREDENTIAL /
            ACCOUNT_DISABLED. On ACCOUNT_DISABLED the owner's credentials
            have been revoked in the current unit of work; the caller must
            commit to persist that.
        """
        now = utcnow()
        token_hash = hash_refresh_token(token)

        credential = await self.uow.refresh_credentials.find_valid(token_hash, now)
        if credential is None:
            known = await self.uow.refresh_credentials.get_by_token_hash(token_hash)
            if known is not None and known.revoked:
                logger.warning(
                    f"Revoked refresh credential {known.id} presented for user {known.user_id}"
                )
            return Return.err(
                auth_error(AuthErrorCode.INVALID_CREDENTIAL, INVALID_REFRESH_TOKEN_MESSAGE)
            )

        user = await self.uow.users.get_by_id(credential.user_id)
        if user is None or not user.is_active:
            revoked = await self.uow.refresh_credentials.revoke_all_by_user_id(
                credential.user_id, now
            )
            logger.info(
                f"Refresh attempted for disabled user {credential.user_id}, revoked {revoked} credential(s)"
            )
            return Return.err(
                auth_error(AuthErrorCode.ACCOUNT_DISABLED, ACCOUNT_DISABLED_MESSAGE)
            )

        won = await self.uow.refresh_credentials.revoke_if_active(credential.id, now)
        if not won:
            return Return.err(
                auth_error(AuthErrorCode.INVALID_CREDENTIAL, INVALID_REFRESH_TOKEN_MESSAGE)
            )

        issued = await self.issue(user)
        return Return.ok(
            RefreshRotation(user=user, previous_credential_id=credential.id, issued=issued)
        )

    async def revoke(self, token: str) -> bool:
        """Revoke a token. Unknown or already revoked tokens return False."""
        credential = await self.uow.refresh_credentials.get_by_token_hash(
            hash_refresh_token(token)
        )
        if credential is None:
            return False
        return await self.uow.refresh_credentials.revoke_if_active(credential.id, utcnow())

    async def revoke_all_for_user(self, user_id: UUID, keep_id: Optional[UUID] = None) -> int:
        return await self.uow.refresh_credentials.revoke_all_by_user_id(
            user_id, utcnow(), keep_id
        )

    async def revoke_by_ids(self, credential_ids: Iterable[UUID]) -> int:
        return await self.uow.refresh_credentials.revoke_by_ids(credential_ids, utcnow())

    async def count_active_for_user(self, user_id: UUID) -> int:
        return await self.uow.refresh_credentials.count_active_by_user_id(user_id, utcnow())
