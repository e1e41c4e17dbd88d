"""
External OTP Provider

Phone codes are generated, delivered and checked by a third party; this
service only correlates the phone number with the user awaiting login.
"""

from abc import ABC, abstractmethod


class OtpProviderError(Exception):
    """The provider could not be reached or answered with an error."""


class ExternalOtpProvider(ABC):
    @abstractmethod
    async def start_verification(self, phone: str) -> None:
        """Send a code to the phone. Raises OtpProviderError on failure."""
        pass

    @abstractmethod
    async def check_verification(self, phone: str, code: str) -> bool:
        """
        Check a code.

        Returns True if approved, False if wrong or expired.
        Raises OtpProviderError if the provider failed.
        """
        pass
