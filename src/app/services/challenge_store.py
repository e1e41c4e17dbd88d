"""
Challenge Store

Transient one-time-code state: email OTP challenges and pending phone
verifications. Implementations live in src/adapter/services.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Optional
from uuid import UUID

from src.domain.entities import EmailOtpChallenge


class ChallengeStore(ABC):
    """Challenge store interface - application layer"""

    @abstractmethod
    async def issue_email_challenge(
        self,
        email: str,
        challenge: EmailOtpChallenge,
        rate_limit_window: timedelta,
        now: datetime,
    ) -> bool:
        """
        Store a challenge for an email, replacing any previous one.

        Returns False without storing anything if the current challenge was
        created less than rate_limit_window ago. The check and the write are
        atomic with respect to other issuers.
        """
        pass

    @abstractmethod
    async def get_email_challenge(self, email: str) -> Optional[EmailOtpChallenge]:
        """Get the live challenge for an email"""
        pass

    @abstractmethod
    async def increment_email_attempts(self, email: str) -> Optional[EmailOtpChallenge]:
        """Atomically increment the attempt counter, returning the updated challenge"""
        pass

    @abstractmethod
    async def delete_email_challenge(self, email: str) -> bool:
        """Delete a challenge. Only the caller that actually removed it gets True."""
        pass

    @abstractmethod
    async def set_pending_phone(self, phone: str, user_id: UUID, ttl: timedelta) -> None:
        """Record a pending phone verification, replacing any previous one"""
        pass

    @abstractmethod
    async def get_pending_phone(self, phone: str) -> Optional[UUID]:
        """Get the user awaiting verification on a phone number"""
        pass

    @abstractmethod
    async def delete_pending_phone(self, phone: str) -> bool:
        """Clear a pending phone verification"""
        pass
