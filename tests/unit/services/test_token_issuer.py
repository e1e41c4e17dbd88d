from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest
from jose import jwt

from src.app.services.token_issuer import TokenIssuer
from src.domain.entities import Role
from src.domain.errors import ConfigurationError


def test_issue_and_validate_round_trip(token_issuer):
    # Arrange
    user_id = uuid4()

    # Act
    access = token_issuer.issue_access_token(user_id, "user@example.com", Role.SERVICE_PROVIDER)
    claims = token_issuer.validate(access.token)

    # Assert
    assert claims is not None
    assert claims.user_id == user_id
    assert claims.email == "user@example.com"
    assert claims.role == Role.SERVICE_PROVIDER
    assert claims.token_type == "ACCESS"
    assert access.expires_at - access.issued_at == timedelta(minutes=15)


def test_claim_set(token_issuer):
    access = token_issuer.issue_access_token(uuid4(), "user@example.com", Role.USER)

    payload = jwt.get_unverified_claims(access.token)

    assert payload["sub"] == "user@example.com"
    assert payload["tokenType"] == "ACCESS"
    assert payload["role"] == "USER"
    assert payload["iss"] == "identity-service"
    assert {"userId", "iat", "exp"} <= set(payload)


def test_validate_accepts_bearer_prefix(token_issuer):
    access = token_issuer.issue_access_token(uuid4(), "user@example.com", Role.USER)

    assert token_issuer.validate(f"Bearer {access.token}") is not None


def test_validate_rejects_non_access_token_type(token_issuer):
    now = datetime.now(UTC)
    token = jwt.encode(
        {
            "sub": "user@example.com",
            "userId": str(uuid4()),
            "role": "USER",
            "tokenType": "REFRESH",
            "iat": int(now.timestamp()),
            "exp": int((now + timedelta(minutes=5)).timestamp()),
            "iss": "identity-service",
        },
        "unit-test-secret",
        algorithm="HS256",
    )

    assert token_issuer.validate(token) is None


def test_validate_rejects_expired_token(token_issuer):
    now = datetime.now(UTC)
    token = jwt.encode(
        {
            "sub": "user@example.com",
            "userId": str(uuid4()),
            "role": "USER",
            "tokenType": "ACCESS",
            "iat": int((now - timedelta(hours=1)).timestamp()),
            "exp": int((now - timedelta(minutes=1)).timestamp()),
            "iss": "identity-service",
        },
        "unit-test-secret",
        algorithm="HS256",
    )

    assert token_issuer.validate(token) is None


def test_validate_rejects_other_issuer_and_other_key(token_issuer):
    foreign_issuer = TokenIssuer(secret="unit-test-secret", issuer="someone-else")
    foreign_key = TokenIssuer(secret="another-secret", issuer="identity-service")

    assert token_issuer.validate(
        foreign_issuer.issue_access_token(uuid4(), "a@x.com", Role.USER).token
    ) is None
    assert token_issuer.validate(
        foreign_key.issue_access_token(uuid4(), "a@x.com", Role.USER).token
    ) is None


def test_validate_rejects_garbage(token_issuer):
    assert token_issuer.validate("not-a-token") is None
    assert token_issuer.validate("") is None


def test_empty_secret_fails_at_construction():
    with pytest.raises(ConfigurationError):
        TokenIssuer(secret="")
