"""
Trusted Device Registry

Device-level trust that outlives individual sessions.
"""

import logging
from typing import List
from uuid import UUID

from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.entities import DeviceInfo, TrustedDevice

logger = logging.getLogger(__name__)


class TrustedDeviceRegistry:
    """
    Business Rules:
    - One row per (user, device); re-trusting reactivates the existing row
    - trusted_at is kept from the first trust, last_used_at is refreshed
    - Untrusting only flips is_active, the row stays
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def trust(self, user_id: UUID, device: DeviceInfo) -> TrustedDevice:
        now = utcnow()
        existing = await self.uow.trusted_devices.get_by_user_and_device(
            user_id, device.device_id
        )

        if existing is not None:
            existing.is_active = True
            existing.last_used_at = now
            existing.device_name = device.device_name
            existing.device_model = device.device_model
            existing.platform = device.platform
            existing.system_version = device.system_version
            existing.app_version = device.app_version
            if device.custom_name:
                existing.custom_name = device.custom_name
            trusted = await self.uow.trusted_devices.update(existing)
            logger.info(f"Re-trusted device {device.device_id} for user {user_id}")
            return trusted

        trusted = await self.uow.trusted_devices.create(
            TrustedDevice(
                user_id=user_id,
                device_id=device.device_id,
                device_name=device.device_name,
                custom_name=device.custom_name,
                device_model=device.device_model,
                platform=device.platform,
                system_version=device.system_version,
                app_version=device.app_version,
                trusted_at=now,
                last_used_at=now,
            )
        )
        logger.info(f"Trusted new device {device.device_id} for user {user_id}")
        return trusted

    async def untrust(self, user_id: UUID, device_id: str) -> bool:
        """Returns False if the device was not trusted."""
        existing = await self.uow.trusted_devices.get_by_user_and_device(user_id, device_id)
        if existing is None or not existing.is_active:
            return False
        existing.is_active = False
        await self.uow.trusted_devices.update(existing)
        logger.info(f"Untrusted device {device_id} for user {user_id}")
        return True

    async def list(self, user_id: UUID) -> List[TrustedDevice]:
        return await self.uow.trusted_devices.list_active_by_user_id(user_id)

    async def is_trusted(self, user_id: UUID, device_id: str) -> bool:
        return await self.uow.trusted_devices.exists_active(user_id, device_id)

    async def untrust_all(self, user_id: UUID) -> int:
        return await self.uow.trusted_devices.revoke_all_by_user_id(user_id)
