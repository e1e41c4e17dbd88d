from abc import ABC, abstractmethod
from datetime import datetime
from typing import Iterable, Optional
from uuid import UUID

from src.domain.entities import RefreshCredential


class IRefreshCredentialRepository(ABC):
    """RefreshCredential repository interface - application layer"""

    @abstractmethod
    async def create(self, credential: RefreshCredential) -> RefreshCredential:
        """Persist a newly issued credential"""
        pass

    @abstractmethod
    async def get_by_token_hash(self, token_hash: str) -> Optional[RefreshCredential]:
        """Get credential by token hash, whatever its state"""
        pass

    @abstractmethod
    async def find_valid(
        self, token_hash: str, now: datetime
    ) -> Optional[RefreshCredential]:
        """Get credential by token hash only if not revoked and not expired"""
        pass

    @abstractmethod
    async def revoke_if_active(self, credential_id: UUID, now: datetime) -> bool:
        """
        Conditionally revoke a credential.

        Returns True only for the caller whose UPDATE flipped revoked from
        False to True; a concurrent second caller gets False.
        """
        pass

    @abstractmethod
    async def revoke_all_by_user_id(
        self, user_id: UUID, now: datetime, keep_id: Optional[UUID] = None
    ) -> int:
        """Revoke every non-revoked credential of a user, except keep_id. Returns count."""
        pass

    @abstractmethod
    async def revoke_by_ids(self, credential_ids: Iterable[UUID], now: datetime) -> int:
        """Revoke the given non-revoked credentials. Returns count."""
        pass

    @abstractmethod
    async def count_active_by_user_id(self, user_id: UUID, now: datetime) -> int:
        """Count non-revoked, non-expired credentials of a user"""
        pass
