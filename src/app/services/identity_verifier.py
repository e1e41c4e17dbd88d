from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


class IdentityVerificationError(Exception):
    """The identity assertion is malformed, forged, expired or for another audience."""


@dataclass(frozen=True)
class FederatedIdentity:
    email: str
    email_verified: bool
    display_name: Optional[str] = None
    subject: Optional[str] = None


class FederatedIdentityVerifier(ABC):
    @abstractmethod
    async def verify(self, assertion: str) -> FederatedIdentity:
        """Verify an identity assertion (e.g. an ID token). Raises IdentityVerificationError."""
        pass
