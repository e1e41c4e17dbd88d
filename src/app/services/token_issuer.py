"""
Access Token Issuer

Mints and validates short-lived signed access tokens.
"""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Optional
from uuid import UUID

from jose import JWTError, jwt

from src.domain.entities import Role, TokenType
from src.domain.errors import ConfigurationError

BEARER_PREFIX = "Bearer "


@dataclass(frozen=True)
class AccessToken:
    token: str
    issued_at: datetime
    expires_at: datetime


@dataclass(frozen=True)
class AccessTokenClaims:
    user_id: UUID
    email: str
    role: Role
    token_type: str
    issued_at: datetime
    expires_at: datetime


class TokenIssuer:
    """
    Signs access tokens with a fixed claim set.

    Claims:
    - sub: user email
    - userId: user UUID
    - role: Role value
    - tokenType: always "ACCESS"
    - iat, exp, iss

    Validation is pure: signature, issuer and expiry are checked and any
    tokenType other than ACCESS is rejected.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        issuer: str = "identity-service",
        expire_minutes: int = 15,
    ):
        if not secret:
            raise ConfigurationError("JWT_SECRET must be set")
        if expire_minutes <= 0:
            raise ConfigurationError("ACCESS_TOKEN_EXPIRE_MINUTES must be positive")
        self.secret = secret
        self.algorithm = algorithm
        self.issuer = issuer
        self.expire_minutes = expire_minutes

    def issue_access_token(self, user_id: UUID, email: str, role: Role) -> AccessToken:
        issued_at = datetime.now(UTC).replace(microsecond=0)
        expires_at = issued_at + timedelta(minutes=self.expire_minutes)
        payload = {
            "sub": email,
            "userId": str(user_id),
            "role": Role(role).value,
            "tokenType": TokenType.ACCESS.value,
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
            "iss": self.issuer,
        }
        token = jwt.encode(payload, self.secret, algorithm=self.algorithm)
        return AccessToken(token=token, issued_at=issued_at, expires_at=expires_at)

    def validate(self, token: str) -> Optional[AccessTokenClaims]:
        """
        Decode and verify an access token.

        Args:
            token: Encoded token, with or without a "Bearer " prefix

        Returns:
            AccessTokenClaims, or None if the token is invalid for any reason
        """
        if token.startswith(BEARER_PREFIX):
            token = token[len(BEARER_PREFIX):]
        try:
            payload = jwt.decode(
                token, self.secret, algorithms=[self.algorithm], issuer=self.issuer
            )
        except JWTError:
            return None

        if payload.get("tokenType") != TokenType.ACCESS.value:
            return None

        try:
            return AccessTokenClaims(
                user_id=UUID(payload["userId"]),
                email=payload["sub"],
                role=Role(payload["role"]),
                token_type=payload["tokenType"],
                issued_at=datetime.fromtimestamp(payload["iat"], UTC),
                expires_at=datetime.fromtimestamp(payload["exp"], UTC),
            )
        except (KeyError, TypeError, ValueError):
            return None
