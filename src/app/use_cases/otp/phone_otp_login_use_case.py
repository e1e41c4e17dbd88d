"""
Phone OTP Login Use Case

Passwordless login with a code sent by SMS through an external
verification provider.
"""

import asyncio
import logging
from datetime import timedelta
from typing import Optional

from src.app.services.challenge_store import ChallengeStore
from src.app.services.contact import mask_phone, normalize_phone
from src.app.services.otp_provider import ExternalOtpProvider, OtpProviderError
from src.app.services.token_issuer import TokenIssuer
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth.dtos import LoginResult, OtpSentResponse
from src.app.use_cases.auth.login_finalizer import LoginFinalizer
from src.domain.entities import DeviceInfo
from src.domain.errors import AuthErrorCode, auth_error
from src.domain.result import Result, Return

logger = logging.getLogger(__name__)

DELIVERY_FAILED_MESSAGE = "Verification service unavailable. Please try again."


class PhoneOtpLoginUseCase:
    """
    Use case for phone one-time-code login.

    Business Rules:
    - Code generation, delivery and expiry belong to the provider
    - A pending entry maps phone number to user, newest request wins
    - Nothing is recorded when the provider fails to send
    - An approved code clears the pending entry and marks the phone verified
    """

    def __init__(
        self,
        uow: UnitOfWork,
        token_issuer: TokenIssuer,
        challenge_store: ChallengeStore,
        otp_provider: ExternalOtpProvider,
        pending_minutes: int = 10,
        refresh_ttl_days: int = 7,
        call_timeout_seconds: float = 10.0,
    ):
        self.uow = uow
        self.token_issuer = token_issuer
        self.challenge_store = challenge_store
        self.otp_provider = otp_provider
        self.pending_ttl = timedelta(minutes=pending_minutes)
        self.refresh_ttl_days = refresh_ttl_days
        self.call_timeout_seconds = call_timeout_seconds

    async def send(self, phone_number: str) -> Result[OtpSentResponse]:
        phone = normalize_phone(phone_number)

        async with self.uow:
            user = await self.uow.users.get_by_phone_number(phone)
            if user is None:
                return Return.err(
                    auth_error(AuthErrorCode.NOT_FOUND, "No account found for this phone number")
                )
            if not user.is_active:
                return await self._reject_disabled(user)
            user_id = user.id

        try:
            await asyncio.wait_for(
                self.otp_provider.start_verification(phone),
                timeout=self.call_timeout_seconds,
            )
        except (OtpProviderError, asyncio.TimeoutError) as exc:
            logger.error(f"Failed to start verification for {mask_phone(phone)}: {exc!r}")
            return Return.err(auth_error(AuthErrorCode.DELIVERY_FAILED, DELIVERY_FAILED_MESSAGE))

        await self.challenge_store.set_pending_phone(phone, user_id, self.pending_ttl)

        logger.info(f"Login code sent to {mask_phone(phone)}")
        return Return.ok(
            OtpSentResponse(message="OTP sent successfully", destination=mask_phone(phone))
        )

    async def verify(
        self,
        phone_number: str,
        code: str,
        device: Optional[DeviceInfo] = None,
        ip_address: Optional[str] = None,
    ) -> Result[LoginResult]:
        phone = normalize_phone(phone_number)

        user_id = await self.challenge_store.get_pending_phone(phone)
        if user_id is None:
            return Return.err(
                auth_error(
                    AuthErrorCode.NO_PENDING_CHALLENGE,
                    "No pending login. Please request a new OTP.",
                )
            )

        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                await self.challenge_store.delete_pending_phone(phone)
                return Return.err(auth_error(AuthErrorCode.NOT_FOUND, "User not found"))
            if not user.is_active:
                await self.challenge_store.delete_pending_phone(phone)
                return await self._reject_disabled(user)

        # No transaction is held while the provider checks the code
        try:
            approved = await asyncio.wait_for(
                self.otp_provider.check_verification(phone, code),
                timeout=self.call_timeout_seconds,
            )
        except (OtpProviderError, asyncio.TimeoutError) as exc:
            logger.error(f"Failed to check verification for {mask_phone(phone)}: {exc!r}")
            return Return.err(auth_error(AuthErrorCode.DELIVERY_FAILED, DELIVERY_FAILED_MESSAGE))

        if not approved:
            return Return.err(
                auth_error(
                    AuthErrorCode.INVALID_OR_EXPIRED_CODE,
                    "Invalid or expired OTP. Please try again.",
                )
            )

        await self.challenge_store.delete_pending_phone(phone)

        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(auth_error(AuthErrorCode.NOT_FOUND, "User not found"))
            if not user.is_active:
                return await self._reject_disabled(user)

            user.phone_verified = True
            finalizer = LoginFinalizer(self.uow, self.token_issuer, self.refresh_ttl_days)
            result = await finalizer.complete(user, device, ip_address)

            await self.uow.commit()

            logger.info(f"User {user_id} logged in with phone OTP")
            return Return.ok(result)

    async def _reject_disabled(self, user) -> Result[LoginResult]:
        finalizer = LoginFinalizer(self.uow, self.token_issuer, self.refresh_ttl_days)
        result = await finalizer.reject_disabled(user)
        await self.uow.commit()
        return result
