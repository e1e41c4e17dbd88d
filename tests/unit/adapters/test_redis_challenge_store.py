import asyncio
from datetime import timedelta
from uuid import uuid4

import fakeredis
import pytest
import pytest_asyncio

from src.adapter.services.challenge_store import RedisChallengeStore
from src.domain.base import utcnow
from src.domain.entities import EmailOtpChallenge

EMAIL = "a@x.com"
EMAIL_KEY = RedisChallengeStore.EMAIL_KEY_PREFIX + EMAIL


def _challenge(now, code="111111", expires_in=timedelta(minutes=5)):
    return EmailOtpChallenge(
        code=code,
        user_id=uuid4(),
        max_attempts=3,
        created_at=now,
        expires_at=now + expires_in,
    )


@pytest_asyncio.fixture
async def redis_client():
    client = fakeredis.FakeAsyncRedis(decode_responses=True)
    yield client
    await client.flushall()


@pytest.fixture
def store(redis_client):
    return RedisChallengeStore(client=redis_client)


def test_requires_url_or_client():
    with pytest.raises(ValueError):
        RedisChallengeStore()


@pytest.mark.asyncio
async def test_issue_and_read_back(store):
    now = utcnow()
    challenge = _challenge(now)

    assert await store.issue_email_challenge(EMAIL, challenge, timedelta(minutes=1), now)

    stored = await store.get_email_challenge(EMAIL)
    assert stored == challenge


@pytest.mark.asyncio
async def test_issue_respects_rate_limit_window(store):
    now = utcnow()
    window = timedelta(minutes=1)

    assert await store.issue_email_challenge(EMAIL, _challenge(now, "111111"), window, now)
    assert not await store.issue_email_challenge(
        EMAIL, _challenge(now, "222222"), window, now + timedelta(seconds=30)
    )
    later = now + timedelta(seconds=61)
    assert await store.issue_email_challenge(EMAIL, _challenge(later, "333333"), window, later)

    stored = await store.get_email_challenge(EMAIL)
    assert stored.code == "333333"
    assert stored.attempts == 0


@pytest.mark.asyncio
async def test_concurrent_issue_has_one_winner(store):
    now = utcnow()

    results = await asyncio.gather(
        *[
            store.issue_email_challenge(EMAIL, _challenge(now), timedelta(minutes=1), now)
            for _ in range(5)
        ]
    )

    assert results.count(True) == 1


@pytest.mark.asyncio
async def test_key_lives_past_expiry_for_grace_period(store, redis_client):
    now = utcnow()

    await store.issue_email_challenge(EMAIL, _challenge(now), timedelta(minutes=1), now)

    ttl = await redis_client.ttl(EMAIL_KEY)
    assert 300 < ttl <= 300 + RedisChallengeStore.EXPIRED_GRACE_SECONDS


@pytest.mark.asyncio
async def test_expired_challenge_is_still_readable(store):
    now = utcnow()
    expired = _challenge(now - timedelta(minutes=6))

    await store.issue_email_challenge(EMAIL, expired, timedelta(minutes=1), now)

    stored = await store.get_email_challenge(EMAIL)
    assert stored is not None
    assert stored.is_expired(now)


@pytest.mark.asyncio
async def test_increment_attempts(store):
    now = utcnow()
    await store.issue_email_challenge(EMAIL, _challenge(now), timedelta(minutes=1), now)

    first = await store.increment_email_attempts(EMAIL)
    second = await store.increment_email_attempts(EMAIL)

    assert first.attempts == 1
    assert second.attempts == 2
    assert second.code == "111111"
    assert (await store.get_email_challenge(EMAIL)).attempts == 2


@pytest.mark.asyncio
async def test_concurrent_increments_are_not_lost(store):
    now = utcnow()
    await store.issue_email_challenge(EMAIL, _challenge(now), timedelta(minutes=1), now)

    results = await asyncio.gather(*[store.increment_email_attempts(EMAIL) for _ in range(4)])

    assert sorted(r.attempts for r in results) == [1, 2, 3, 4]
    assert (await store.get_email_challenge(EMAIL)).attempts == 4


@pytest.mark.asyncio
async def test_increment_missing_challenge_returns_none(store):
    assert await store.increment_email_attempts(EMAIL) is None
    assert await store.get_email_challenge(EMAIL) is None


@pytest.mark.asyncio
async def test_concurrent_delete_has_one_winner(store):
    now = utcnow()
    await store.issue_email_challenge(EMAIL, _challenge(now), timedelta(minutes=1), now)

    results = await asyncio.gather(*[store.delete_email_challenge(EMAIL) for _ in range(3)])

    assert results.count(True) == 1
    assert await store.get_email_challenge(EMAIL) is None


@pytest.mark.asyncio
async def test_pending_phone_overwrite_and_ttl(store, redis_client):
    # Arrange
    phone = "+15550001111"
    first, second = uuid4(), uuid4()

    # Act
    await store.set_pending_phone(phone, first, timedelta(minutes=10))
    await store.set_pending_phone(phone, second, timedelta(minutes=10))

    # Assert
    assert await store.get_pending_phone(phone) == second
    ttl = await redis_client.ttl(RedisChallengeStore.PHONE_KEY_PREFIX + phone)
    assert 590 < ttl <= 600

    assert await store.delete_pending_phone(phone) is True
    assert await store.delete_pending_phone(phone) is False
    assert await store.get_pending_phone(phone) is None


@pytest.mark.asyncio
async def test_pending_phone_with_elapsed_ttl_gets_shortest_expiry(store, redis_client):
    phone = "+15550002222"

    await store.set_pending_phone(phone, uuid4(), timedelta(seconds=-1))

    ttl = await redis_client.ttl(RedisChallengeStore.PHONE_KEY_PREFIX + phone)
    assert 0 <= ttl <= 1

