"""
Identity Resolver

Maps an externally verified email to a local user, creating one on first
sign-in and refusing to change the role of an existing one.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from src.app.services.contact import normalize_email
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import Role, User
from src.domain.errors import (
    ACCOUNT_DISABLED_MESSAGE,
    AuthErrorCode,
    DuplicateEntityError,
    auth_error,
)
from src.domain.result import Result, Return

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedIdentity:
    user: User
    is_new_user: bool


class IdentityResolver:
    """
    Business Rules:
    - A disabled account fails ACCOUNT_DISABLED whatever role was requested
    - An existing account registered under another role fails ROLE_CONFLICT
      and is left untouched
    - Unknown emails get a new account with the requested role, a verified
      email and no password
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def resolve(
        self, email: str, requested_role: Role, display_name: Optional[str] = None
    ) -> Result[ResolvedIdentity]:
        email = normalize_email(email)
        user = await self.uow.users.get_by_email(email)
        if user is not None:
            return self._existing(user, requested_role)

        user = User(
            email=email,
            full_name=display_name or email.split("@")[0],
            role=requested_role,
            email_verified=True,
        )
        try:
            user = await self.uow.users.create(user)
        except DuplicateEntityError:
            # A concurrent first sign-in created the account
            user = await self.uow.users.get_by_email(email)
            if user is None:
                raise
            return self._existing(user, requested_role)

        logger.info(f"Created user {user.id} from federated identity with role {requested_role.value}")
        return Return.ok(ResolvedIdentity(user=user, is_new_user=True))

    @staticmethod
    def _existing(user: User, requested_role: Role) -> Result[ResolvedIdentity]:
        if not user.is_active:
            return Return.err(auth_error(AuthErrorCode.ACCOUNT_DISABLED, ACCOUNT_DISABLED_MESSAGE))
        if user.role != requested_role:
            existing = Role(user.role).display_name
            return Return.err(
                auth_error(
                    AuthErrorCode.ROLE_CONFLICT,
                    f"This email is already registered as a {existing}. "
                    "Please sign in from the correct app screen.",
                )
            )
        return Return.ok(ResolvedIdentity(user=user, is_new_user=False))
