from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from src.domain.entities import UserSession


class ISessionRepository(ABC):
    """Session repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, session_id: UUID) -> Optional[UserSession]:
        """Get session by ID"""
        pass

    @abstractmethod
    async def get_active_by_user_and_device(
        self, user_id: UUID, device_id: str
    ) -> Optional[UserSession]:
        """Get the active session of a user on a device"""
        pass

    @abstractmethod
    async def get_active_by_refresh_credential(
        self, refresh_credential_id: UUID
    ) -> Optional[UserSession]:
        """Get the active session backed by a refresh credential"""
        pass

    @abstractmethod
    async def list_active_by_user_id(self, user_id: UUID) -> List[UserSession]:
        """Active sessions of a user, most recent activity first"""
        pass

    @abstractmethod
    async def create(self, session: UserSession) -> UserSession:
        """Create a new session; raises DuplicateEntityError if the device already has an active one"""
        pass

    @abstractmethod
    async def update(self, session: UserSession) -> UserSession:
        """Update existing session"""
        pass

    @abstractmethod
    async def revoke_all_by_user_id(self, user_id: UUID) -> int:
        """Deactivate all sessions of a user. Returns count."""
        pass

    @abstractmethod
    async def revoke_all_except_device(self, user_id: UUID, device_id: str) -> int:
        """Deactivate all sessions of a user except one device. Returns count."""
        pass

    @abstractmethod
    async def delete_inactive_older_than(self, threshold: datetime) -> int:
        """Physically delete inactive sessions not updated since threshold"""
        pass
