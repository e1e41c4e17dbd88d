from typing import List, Optional
from uuid import UUID

from sqlalchemy import update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.trusted_device_repository import ITrustedDeviceRepository
from src.domain.entities import TrustedDevice


class TrustedDeviceRepository(ITrustedDeviceRepository):
    """TrustedDevice repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_user_and_device(
        self, user_id: UUID, device_id: str
    ) -> Optional[TrustedDevice]:
        """Get trust record of a device, active or not"""
        stmt = select(TrustedDevice).where(
            TrustedDevice.user_id == user_id,
            TrustedDevice.device_id == device_id,
        )
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def exists_active(self, user_id: UUID, device_id: str) -> bool:
        """Whether the device is currently trusted"""
        stmt = select(TrustedDevice.id).where(
            TrustedDevice.user_id == user_id,
            TrustedDevice.device_id == device_id,
            TrustedDevice.is_active == True,
        )
        result = await self.session.exec(stmt)
        return result.first() is not None

    async def list_active_by_user_id(self, user_id: UUID) -> List[TrustedDevice]:
        """Active trusted devices for a user, most recently used first"""
        stmt = (
            select(TrustedDevice)
            .where(TrustedDevice.user_id == user_id, TrustedDevice.is_active == True)
            .order_by(TrustedDevice.last_used_at.desc())
        )
        result = await self.session.exec(stmt)
        return list(result.all())

    async def create(self, device: TrustedDevice) -> TrustedDevice:
        """Create a new trust record"""
        self.session.add(device)
        await self.session.flush()
        await self.session.refresh(device)
        return device

    async def update(self, device: TrustedDevice) -> TrustedDevice:
        """Update existing trust record"""
        self.session.add(device)
        await self.session.flush()
        await self.session.refresh(device)
        return device

    async def revoke_all_by_user_id(self, user_id: UUID) -> int:
        """Untrust all devices for a user"""
        stmt = (
            update(TrustedDevice)
            .where(TrustedDevice.user_id == user_id, TrustedDevice.is_active == True)
            .values(is_active=False)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount
