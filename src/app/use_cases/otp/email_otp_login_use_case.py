"""
Email OTP Login Use Case

Passwordless login with a numeric code delivered by email.
"""

import asyncio
import logging
import secrets
import string
from datetime import timedelta
from typing import Callable, Optional

from src.app.services.challenge_store import ChallengeStore
from src.app.services.contact import mask_email, normalize_email
from src.app.services.notification_gateway import NotificationGateway
from src.app.services.token_issuer import TokenIssuer
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth.dtos import LoginResult, OtpSentResponse
from src.app.use_cases.auth.login_finalizer import LoginFinalizer
from src.domain.base import utcnow
from src.domain.entities import DeviceInfo, EmailOtpChallenge
from src.domain.errors import AuthErrorCode, auth_error
from src.domain.result import Result, Return

logger = logging.getLogger(__name__)


def generate_numeric_code(length: int) -> str:
    return "".join(secrets.choice(string.digits) for _ in range(length))


def _remaining_message(remaining: int) -> str:
    noun = "attempt" if remaining == 1 else "attempts"
    return f"Invalid code. {remaining} {noun} remaining."


class EmailOtpLoginUseCase:
    """
    Use case for email one-time-code login.

    Business Rules:
    - Codes are only sent to active accounts
    - One code per email per rate-limit window (default 1 minute)
    - A new code replaces the previous one
    - Codes expire after 5 minutes and allow 3 attempts
    - The attempt counter is incremented before the code is compared
    - The last failed attempt clears the challenge
    - A correct code is consumed exactly once and marks the email verified
    - Delivery failure keeps the stored challenge
    """

    def __init__(
        self,
        uow: UnitOfWork,
        token_issuer: TokenIssuer,
        challenge_store: ChallengeStore,
        notifications: NotificationGateway,
        code_length: int = 6,
        expiration_minutes: int = 5,
        max_attempts: int = 3,
        rate_limit_minutes: int = 1,
        refresh_ttl_days: int = 7,
        call_timeout_seconds: float = 10.0,
        code_generator: Optional[Callable[[int], str]] = None,
    ):
        self.uow = uow
        self.token_issuer = token_issuer
        self.challenge_store = challenge_store
        self.notifications = notifications
        self.code_length = code_length
        self.expiration = timedelta(minutes=expiration_minutes)
        self.max_attempts = max_attempts
        self.rate_limit_window = timedelta(minutes=rate_limit_minutes)
        self.refresh_ttl_days = refresh_ttl_days
        self.call_timeout_seconds = call_timeout_seconds
        self.code_generator = code_generator or generate_numeric_code

    async def send(self, email: str) -> Result[OtpSentResponse]:
        """
        Issue and deliver a login code.

        Returns:
            Result with the masked destination, or Error NOT_FOUND /
            RATE_LIMITED / DELIVERY_FAILED
        """
        email = normalize_email(email)

        async with self.uow:
            user = await self.uow.users.get_by_email(email)
            if user is None or not user.is_active:
                return Return.err(
                    auth_error(AuthErrorCode.NOT_FOUND, "No active account found for this email")
                )
            user_id, name = user.id, user.display_name

        now = utcnow()
        code = self.code_generator(self.code_length)
        challenge = EmailOtpChallenge(
            code=code,
            user_id=user_id,
            attempts=0,
            max_attempts=self.max_attempts,
            created_at=now,
            expires_at=now + self.expiration,
        )

        issued = await self.challenge_store.issue_email_challenge(
            email, challenge, self.rate_limit_window, now
        )
        if not issued:
            return Return.err(
                auth_error(
                    AuthErrorCode.RATE_LIMITED,
                    "Please wait before requesting another code",
                )
            )

        try:
            delivered = await asyncio.wait_for(
                self.notifications.send_email_otp(email, name, code),
                timeout=self.call_timeout_seconds,
            )
        except asyncio.TimeoutError:
            delivered = False

        if not delivered:
            logger.error(f"Failed to deliver login code to {mask_email(email)}")
            return Return.err(
                auth_error(
                    AuthErrorCode.DELIVERY_FAILED,
                    "Failed to send code. Please try again.",
                )
            )

        logger.info(f"Login code sent to {mask_email(email)}")
        return Return.ok(
            OtpSentResponse(message="OTP sent successfully", destination=mask_email(email))
        )

    async def verify(
        self,
        email: str,
        code: str,
        device: Optional[DeviceInfo] = None,
        ip_address: Optional[str] = None,
    ) -> Result[LoginResult]:
        """
        Check a code and sign the user in.

        Returns:
            Result with LoginResult, or Error NOT_FOUND / EXPIRED /
            ATTEMPTS_EXHAUSTED / INVALID_CODE / ACCOUNT_DISABLED
        """
        email = normalize_email(email)

        challenge = await self.challenge_store.get_email_challenge(email)
        if challenge is None:
            return Return.err(
                auth_error(AuthErrorCode.NOT_FOUND, "No OTP found. Please request a new one.")
            )

        if challenge.is_expired(utcnow()):
            await self.challenge_store.delete_email_challenge(email)
            return Return.err(
                auth_error(AuthErrorCode.EXPIRED, "OTP has expired. Please request a new one.")
            )

        if challenge.attempts >= challenge.max_attempts:
            await self.challenge_store.delete_email_challenge(email)
            return Return.err(
                auth_error(
                    AuthErrorCode.ATTEMPTS_EXHAUSTED,
                    "Too many failed attempts. Please request a new OTP.",
                )
            )

        challenge = await self.challenge_store.increment_email_attempts(email)
        if challenge is None:
            return Return.err(
                auth_error(AuthErrorCode.NOT_FOUND, "No OTP found. Please request a new one.")
            )

        if not secrets.compare_digest(challenge.code, code):
            remaining = challenge.remaining_attempts
            if remaining == 0:
                await self.challenge_store.delete_email_challenge(email)
            return Return.err(auth_error(AuthErrorCode.INVALID_CODE, _remaining_message(remaining)))

        # Only the caller that removes the challenge may use it
        if not await self.challenge_store.delete_email_challenge(email):
            return Return.err(
                auth_error(AuthErrorCode.NOT_FOUND, "No OTP found. Please request a new one.")
            )

        async with self.uow:
            user = await self.uow.users.get_by_id(challenge.user_id)
            if user is None:
                return Return.err(auth_error(AuthErrorCode.NOT_FOUND, "User not found"))

            finalizer = LoginFinalizer(self.uow, self.token_issuer, self.refresh_ttl_days)

            if not user.is_active:
                result = await finalizer.reject_disabled(user)
                await self.uow.commit()
                return result

            user.email_verified = True
            result = await finalizer.complete(user, device, ip_address)

            await self.uow.commit()

            logger.info(f"User {user.id} logged in with email OTP")
            return Return.ok(result)
