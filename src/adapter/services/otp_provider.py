"""
External OTP provider implementations.
"""

import logging
import secrets
from typing import Optional

import httpx

from src.app.services.contact import mask_phone
from src.app.services.otp_provider import ExternalOtpProvider, OtpProviderError

logger = logging.getLogger(__name__)


class StubOtpProvider(ExternalOtpProvider):
    """Accepts one fixed code for every phone number. Development and tests only."""

    def __init__(self, code: str = "123456"):
        self.code = code

    async def start_verification(self, phone: str) -> None:
        logger.info(f"[stub] verification started for {mask_phone(phone)}")

    async def check_verification(self, phone: str, code: str) -> bool:
        return secrets.compare_digest(self.code, code)


class TwilioVerifyOtpProvider(ExternalOtpProvider):
    """Twilio Verify v2 over its REST API."""

    BASE_URL = "https://verify.twilio.com/v2"

    def __init__(
        self,
        account_sid: str,
        auth_token: str,
        service_sid: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.service_sid = service_sid
        self._client = httpx.AsyncClient(
            base_url=self.BASE_URL,
            auth=(account_sid, auth_token),
            timeout=timeout,
            transport=transport,
        )

    async def start_verification(self, phone: str) -> None:
        try:
            response = await self._client.post(
                f"/Services/{self.service_sid}/Verifications",
                data={"To": phone, "Channel": "sms"},
            )
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise OtpProviderError(f"Twilio verification start failed: {exc}") from exc

        logger.info(f"Verification sent to {mask_phone(phone)}")

    async def check_verification(self, phone: str, code: str) -> bool:
        try:
            response = await self._client.post(
                f"/Services/{self.service_sid}/VerificationCheck",
                data={"To": phone, "Code": code},
            )
            # Twilio answers 404 once the verification expired or was approved
            if response.status_code == httpx.codes.NOT_FOUND:
                return False
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise OtpProviderError(f"Twilio verification check failed: {exc}") from exc

        return response.json().get("status") == "approved"

    async def close(self) -> None:
        await self._client.aclose()
