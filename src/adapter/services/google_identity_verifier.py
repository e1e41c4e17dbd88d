import asyncio
from typing import List

from google.auth import exceptions as google_exceptions
from google.auth.transport import requests
from google.oauth2 import id_token

from src.app.services.identity_verifier import (
    FederatedIdentity,
    FederatedIdentityVerifier,
    IdentityVerificationError,
)


class GoogleIdentityVerifier(FederatedIdentityVerifier):
    """Verifies Google ID tokens against a list of accepted client IDs."""

    def __init__(self, client_ids: List[str]):
        self._client_ids = list(client_ids)
        self._request = requests.Request()

    async def verify(self, assertion: str) -> FederatedIdentity:
        # google-auth is blocking (certificate fetch)
        payload = await asyncio.to_thread(self._verify_sync, assertion)

        email = payload.get("email")
        if not email:
            raise IdentityVerificationError("Google id_token missing email claim.")

        email_verified_raw = payload.get("email_verified", False)
        email_verified = bool(email_verified_raw)
        if isinstance(email_verified_raw, str):
            email_verified = email_verified_raw.lower() == "true"

        name = payload.get("name") if isinstance(payload.get("name"), str) else None
        return FederatedIdentity(
            email=str(email),
            email_verified=email_verified,
            display_name=name,
            subject=str(payload.get("sub")) if payload.get("sub") else None,
        )

    def _verify_sync(self, token: str) -> dict:
        try:
            return id_token.verify_oauth2_token(token, self._request, self._client_ids)
        except (ValueError, google_exceptions.GoogleAuthError) as exc:
            raise IdentityVerificationError("Invalid Google id_token.") from exc
