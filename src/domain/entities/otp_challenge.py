"""
EmailOtpChallenge

Transient one-time-code challenge held in the ChallengeStore, keyed by
lower-cased email. Never persisted in the relational store.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel


class EmailOtpChallenge(BaseModel):
    code: str
    user_id: UUID
    attempts: int = 0
    max_attempts: int
    created_at: datetime
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at <= now

    @property
    def remaining_attempts(self) -> int:
        return max(0, self.max_attempts - self.attempts)
