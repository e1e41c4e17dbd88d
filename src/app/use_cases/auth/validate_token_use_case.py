"""
Validate Token Use Case

Lets other services check an access token without sharing the signing key.
"""

from src.app.services.token_issuer import TokenIssuer
from src.domain.result import Result, Return
from .dtos import TokenValidationResponse


class ValidateTokenUseCase:
    """Pure check: signature, issuer, expiry and tokenType. No storage access."""

    def __init__(self, token_issuer: TokenIssuer):
        self.token_issuer = token_issuer

    def execute(self, token: str) -> Result[TokenValidationResponse]:
        claims = self.token_issuer.validate(token.strip())
        if claims is None:
            return Return.ok(TokenValidationResponse(valid=False))

        return Return.ok(
            TokenValidationResponse(
                valid=True,
                user_id=str(claims.user_id),
                email=claims.email,
                role=claims.role.value,
                token_type=claims.token_type,
                issued_at=claims.issued_at,
                expires_at=claims.expires_at,
            )
        )
