"""
Register Use Case

Self-service account creation with a password.
"""

import logging

from src.app.services.contact import normalize_email, normalize_phone
from src.app.services.passwords import hash_password
from src.app.services.token_issuer import TokenIssuer
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import SELF_REGISTRABLE_ROLES, User
from src.domain.errors import AuthErrorCode, DuplicateEntityError, auth_error
from src.domain.result import Result, Return
from .dtos import LoginResult, RegisterCommand
from .login_finalizer import LoginFinalizer

logger = logging.getLogger(__name__)


class RegisterUseCase:
    """
    Use case for user registration.

    Business Rules:
    - Only self-registrable roles (USER, SERVICE_PROVIDER) may be requested
    - Email must be unique (compared lower-cased)
    - Phone number, when given, must be unique (compared normalized)
    - Password hashed with bcrypt cost factor 12
    - Registration signs the user in on the calling device
    """

    def __init__(self, uow: UnitOfWork, token_issuer: TokenIssuer, refresh_ttl_days: int = 7):
        self.uow = uow
        self.token_issuer = token_issuer
        self.refresh_ttl_days = refresh_ttl_days

    async def execute(self, command: RegisterCommand) -> Result[LoginResult]:
        if command.role not in SELF_REGISTRABLE_ROLES:
            return Return.err(
                auth_error(
                    AuthErrorCode.INVALID_ROLE,
                    f"Role {command.role.value} cannot be self-registered",
                )
            )

        email = normalize_email(command.email)
        phone = normalize_phone(command.phone_number) if command.phone_number else None

        async with self.uow:
            if await self.uow.users.get_by_email(email):
                return Return.err(
                    auth_error(AuthErrorCode.EMAIL_ALREADY_EXISTS, "Email already registered")
                )

            if phone and await self.uow.users.get_by_phone_number(phone):
                return Return.err(
                    auth_error(
                        AuthErrorCode.PHONE_ALREADY_EXISTS, "Phone number already registered"
                    )
                )

            user = User(
                email=email,
                phone_number=phone,
                password_hash=hash_password(command.password),
                full_name=command.full_name,
                role=command.role,
            )
            try:
                user = await self.uow.users.create(user)
            except DuplicateEntityError:
                if await self.uow.users.get_by_email(email):
                    return Return.err(
                        auth_error(AuthErrorCode.EMAIL_ALREADY_EXISTS, "Email already registered")
                    )
                return Return.err(
                    auth_error(AuthErrorCode.PHONE_ALREADY_EXISTS, "Phone number already registered")
                )

            finalizer = LoginFinalizer(self.uow, self.token_issuer, self.refresh_ttl_days)
            result = await finalizer.complete(
                user, command.device, command.ip_address, is_new_user=True
            )

            await self.uow.commit()

            logger.info(f"Registered user {user.id} with role {user.role.value}")
            return Return.ok(result)
