"""
Manage Trusted Devices Use Case

Trust and untrust devices, keeping the active session's flag in step.
"""

from uuid import UUID

from src.app.services.session_registry import SessionRegistry
from src.app.services.trusted_device_registry import TrustedDeviceRegistry
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import DeviceInfo, TrustedDevice
from src.domain.errors import AuthErrorCode, auth_error
from src.domain.result import Result, Return
from .dtos import TrustedDeviceListResponse, TrustedDeviceResponse, UntrustDeviceResponse


def to_trusted_device_response(device: TrustedDevice) -> TrustedDeviceResponse:
    return TrustedDeviceResponse(
        id=str(device.id),
        device_id=device.device_id,
        device_name=device.device_name,
        custom_name=device.custom_name,
        device_model=device.device_model,
        platform=device.platform,
        trusted_at=device.trusted_at,
        last_used_at=device.last_used_at,
    )


class ManageTrustedDevicesUseCase:
    """
    Business Rules:
    - Trusting an already known device reactivates its row
    - The active session on the device reflects the trust flag immediately
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def trust_device(
        self, user_id: UUID, device: DeviceInfo
    ) -> Result[TrustedDeviceResponse]:
        async with self.uow:
            trusted = await TrustedDeviceRegistry(self.uow).trust(user_id, device)
            await SessionRegistry(self.uow).set_trust(user_id, device.device_id, True)

            await self.uow.commit()

            return Return.ok(to_trusted_device_response(trusted))

    async def untrust_device(
        self, user_id: UUID, device_id: str
    ) -> Result[UntrustDeviceResponse]:
        async with self.uow:
            removed = await TrustedDeviceRegistry(self.uow).untrust(user_id, device_id)
            if not removed:
                return Return.err(auth_error(AuthErrorCode.NOT_FOUND, "Trusted device not found"))

            await SessionRegistry(self.uow).set_trust(user_id, device_id, False)

            await self.uow.commit()

            return Return.ok(
                UntrustDeviceResponse(message="Device removed from trusted devices", device_id=device_id)
            )

    async def list_devices(self, user_id: UUID) -> Result[TrustedDeviceListResponse]:
        async with self.uow:
            devices = await TrustedDeviceRegistry(self.uow).list(user_id)
            items = [to_trusted_device_response(d) for d in devices]
            return Return.ok(TrustedDeviceListResponse(devices=items, total=len(items)))
