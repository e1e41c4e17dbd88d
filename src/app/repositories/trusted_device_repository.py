from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from src.domain.entities import TrustedDevice


class ITrustedDeviceRepository(ABC):
    """TrustedDevice repository interface - application layer"""

    @abstractmethod
    async def get_by_user_and_device(
        self, user_id: UUID, device_id: str
    ) -> Optional[TrustedDevice]:
        """Get the trust record of a device, active or not"""
        pass

    @abstractmethod
    async def exists_active(self, user_id: UUID, device_id: str) -> bool:
        """Whether the device is currently trusted"""
        pass

    @abstractmethod
    async def list_active_by_user_id(self, user_id: UUID) -> List[TrustedDevice]:
        """Active trusted devices, most recently used first"""
        pass

    @abstractmethod
    async def create(self, device: TrustedDevice) -> TrustedDevice:
        """Create a new trust record"""
        pass

    @abstractmethod
    async def update(self, device: TrustedDevice) -> TrustedDevice:
        """Update existing trust record"""
        pass

    @abstractmethod
    async def revoke_all_by_user_id(self, user_id: UUID) -> int:
        """Untrust all devices of a user. Returns count."""
        pass
