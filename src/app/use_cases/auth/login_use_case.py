"""
Login Use Case

Password login by email or phone number.
"""

from src.app.services.contact import normalize_email, normalize_phone
from src.app.services.passwords import burn_password_check, verify_password
from src.app.services.token_issuer import TokenIssuer
from src.app.services.unit_of_work import UnitOfWork
from src.domain.errors import AuthErrorCode, auth_error
from src.domain.result import Result, Return
from .dtos import LoginCommand, LoginResult
from .login_finalizer import LoginFinalizer


class LoginUseCase:
    """
    Use case for password login.

    Business Rules:
    - Constant-time password comparison to prevent timing attacks
    - Same error for unknown account and wrong password
    - Accounts without a password (federated-only) must use their external sign-in
    - User must have status=active
    - Successful login issues a token pair and records the device session
    """

    def __init__(self, uow: UnitOfWork, token_issuer: TokenIssuer, refresh_ttl_days: int = 7):
        self.uow = uow
        self.token_issuer = token_issuer
        self.refresh_ttl_days = refresh_ttl_days

    async def execute(self, command: LoginCommand) -> Result[LoginResult]:
        """
        Execute login use case.

        Args:
            command: LoginCommand with email or phone_number, password and device

        Returns:
            Result with LoginResult, or Error
        """
        async with self.uow:
            if command.phone_number:
                user = await self.uow.users.get_by_phone_number(
                    normalize_phone(command.phone_number)
                )
                invalid_message = "Invalid phone number or password"
            else:
                user = await self.uow.users.get_by_email(normalize_email(command.email or ""))
                invalid_message = "Invalid email or password"

            if user is None:
                burn_password_check(command.password)
                return Return.err(auth_error(AuthErrorCode.INVALID_LOGIN, invalid_message))

            if not user.has_password:
                return Return.err(
                    auth_error(
                        AuthErrorCode.EXTERNAL_SIGN_IN_REQUIRED,
                        "This account uses external sign-in. Please sign in with Google "
                        "or set a password first.",
                    )
                )

            if not verify_password(command.password, user.password_hash):
                return Return.err(auth_error(AuthErrorCode.INVALID_LOGIN, invalid_message))

            finalizer = LoginFinalizer(self.uow, self.token_issuer, self.refresh_ttl_days)

            if not user.is_active:
                result = await finalizer.reject_disabled(user)
                await self.uow.commit()
                return result

            result = await finalizer.complete(user, command.device, command.ip_address)

            await self.uow.commit()

            return Return.ok(result)
