"""
Challenge Store implementations.

InMemoryChallengeStore keeps state in the process (single instance, tests).
RedisChallengeStore shares state across instances with native key expiry.
"""

import asyncio
from datetime import datetime, timedelta
from typing import Dict, Optional, Tuple
from uuid import UUID

import redis.asyncio as aioredis
from redis.exceptions import WatchError

from src.app.services.challenge_store import ChallengeStore
from src.domain.base import utcnow
from src.domain.entities import EmailOtpChallenge

# Expired challenges stay readable this long so callers can report EXPIRED
EXPIRED_GRACE = timedelta(seconds=60)


class InMemoryChallengeStore(ChallengeStore):
    """Process-local store guarded by one asyncio lock. Expired entries are purged on every write."""

    def __init__(self):
        self._lock = asyncio.Lock()
        self._email_challenges: Dict[str, EmailOtpChallenge] = {}
        self._pending_phones: Dict[str, Tuple[UUID, datetime]] = {}

    async def issue_email_challenge(
        self,
        email: str,
        challenge: EmailOtpChallenge,
        rate_limit_window: timedelta,
        now: datetime,
    ) -> bool:
        async with self._lock:
            self._purge_expired(now)
            current = self._email_challenges.get(email)
            if current is not None and now - current.created_at < rate_limit_window:
                return False
            self._email_challenges[email] = challenge.model_copy()
            return True

    async def get_email_challenge(self, email: str) -> Optional[EmailOtpChallenge]:
        async with self._lock:
            challenge = self._email_challenges.get(email)
            return challenge.model_copy() if challenge else None

    async def increment_email_attempts(self, email: str) -> Optional[EmailOtpChallenge]:
        async with self._lock:
            challenge = self._email_challenges.get(email)
            if challenge is None:
                return None
            challenge.attempts += 1
            return challenge.model_copy()

    async def delete_email_challenge(self, email: str) -> bool:
        async with self._lock:
            return self._email_challenges.pop(email, None) is not None

    async def set_pending_phone(self, phone: str, user_id: UUID, ttl: timedelta) -> None:
        now = utcnow()
        async with self._lock:
            self._purge_expired(now)
            self._pending_phones[phone] = (user_id, now + ttl)

    async def get_pending_phone(self, phone: str) -> Optional[UUID]:
        async with self._lock:
            entry = self._pending_phones.get(phone)
            if entry is None:
                return None
            user_id, expires_at = entry
            if expires_at <= utcnow():
                del self._pending_phones[phone]
                return None
            return user_id

    async def delete_pending_phone(self, phone: str) -> bool:
        async with self._lock:
            return self._pending_phones.pop(phone, None) is not None

    def _purge_expired(self, now: datetime) -> None:
        """Drop dead entries; the caller holds the lock."""
        for email in [
            e for e, c in self._email_challenges.items() if c.expires_at + EXPIRED_GRACE <= now
        ]:
            del self._email_challenges[email]
        for phone in [p for p, (_, expires_at) in self._pending_phones.items() if expires_at <= now]:
            del self._pending_phones[phone]


class RedisChallengeStore(ChallengeStore):
    """Redis-backed store; keys expire on their own."""

    EMAIL_KEY_PREFIX = "otp:email:"
    PHONE_KEY_PREFIX = "otp:phone:"

    EXPIRED_GRACE_SECONDS = int(EXPIRED_GRACE.total_seconds())

    _INCREMENT_SCRIPT = """
if redis.call('EXISTS', KEYS[1]) == 0 then
  return nil
end
redis.call('HINCRBY', KEYS[1], 'attempts', 1)
return redis.call('HGETALL', KEYS[1])
"""

    def __init__(
        self,
        redis_url: Optional[str] = None,
        *,
        client: Optional[aioredis.Redis] = None,
        socket_timeout: float = 5.0,
    ):
        if client is None:
            if not redis_url:
                raise ValueError("redis_url or client is required")
            client = aioredis.from_url(
                redis_url,
                decode_responses=True,
                socket_timeout=socket_timeout,
                socket_connect_timeout=socket_timeout,
            )
        # A supplied client must be created with decode_responses=True
        self.client = client
        self._increment = self.client.register_script(self._INCREMENT_SCRIPT)

    @staticmethod
    def _serialize(challenge: EmailOtpChallenge) -> Dict[str, str]:
        return {
            "code": challenge.code,
            "user_id": str(challenge.user_id),
            "attempts": str(challenge.attempts),
            "max_attempts": str(challenge.max_attempts),
            "created_at": challenge.created_at.isoformat(),
            "expires_at": challenge.expires_at.isoformat(),
        }

    @staticmethod
    def _deserialize(data: Dict[str, str]) -> Optional[EmailOtpChallenge]:
        if not data:
            return None
        return EmailOtpChallenge(
            code=data["code"],
            user_id=UUID(data["user_id"]),
            attempts=int(data["attempts"]),
            max_attempts=int(data["max_attempts"]),
            created_at=datetime.fromisoformat(data["created_at"]),
            expires_at=datetime.fromisoformat(data["expires_at"]),
        )

    async def issue_email_challenge(
        self,
        email: str,
        challenge: EmailOtpChallenge,
        rate_limit_window: timedelta,
        now: datetime,
    ) -> bool:
        key = self.EMAIL_KEY_PREFIX + email
        ttl = max(1, int((challenge.expires_at - now).total_seconds())) + self.EXPIRED_GRACE_SECONDS

        async with self.client.pipeline(transaction=True) as pipe:
            while True:
                try:
                    await pipe.watch(key)
                    created_at = await pipe.hget(key, "created_at")
                    if created_at and now - datetime.fromisoformat(created_at) < rate_limit_window:
                        await pipe.unwatch()
                        return False
                    pipe.multi()
                    pipe.delete(key)
                    pipe.hset(key, mapping=self._serialize(challenge))
                    pipe.expire(key, ttl)
                    await pipe.execute()
                    return True
                except WatchError:
                    continue

    async def get_email_challenge(self, email: str) -> Optional[EmailOtpChallenge]:
        data = await self.client.hgetall(self.EMAIL_KEY_PREFIX + email)
        return self._deserialize(data)

    async def increment_email_attempts(self, email: str) -> Optional[EmailOtpChallenge]:
        flat = await self._increment(keys=[self.EMAIL_KEY_PREFIX + email])
        if not flat:
            return None
        return self._deserialize(dict(zip(flat[::2], flat[1::2])))

    async def delete_email_challenge(self, email: str) -> bool:
        return await self.client.delete(self.EMAIL_KEY_PREFIX + email) == 1

    async def set_pending_phone(self, phone: str, user_id: UUID, ttl: timedelta) -> None:
        await self.client.set(
            self.PHONE_KEY_PREFIX + phone,
            str(user_id),
            ex=max(1, int(ttl.total_seconds())),
        )

    async def get_pending_phone(self, phone: str) -> Optional[UUID]:
        value = await self.client.get(self.PHONE_KEY_PREFIX + phone)
        return UUID(value) if value else None

    async def delete_pending_phone(self, phone: str) -> bool:
        return await self.client.delete(self.PHONE_KEY_PREFIX + phone) == 1

    async def close(self) -> None:
        await self.client.aclose()
