from datetime import datetime
from uuid import uuid4

import pytest

from src.app.services.trusted_device_registry import TrustedDeviceRegistry
from src.domain.entities import DeviceInfo, TrustedDevice


@pytest.mark.asyncio
async def test_trust_new_device(mock_uow):
    user_id = uuid4()

    trusted = await TrustedDeviceRegistry(mock_uow).trust(
        user_id, DeviceInfo(device_id="d1", custom_name="My phone")
    )

    mock_uow.trusted_devices.create.assert_called_once()
    assert trusted.device_id == "d1"
    assert trusted.custom_name == "My phone"
    assert trusted.is_active is True


@pytest.mark.asyncio
async def test_retrust_reactivates_and_keeps_trusted_at(mock_uow):
    # Arrange
    user_id = uuid4()
    first_trusted_at = datetime(2024, 1, 1, 12, 0, 0)
    existing = TrustedDevice(
        user_id=user_id,
        device_id="d1",
        custom_name="My phone",
        is_active=False,
        trusted_at=first_trusted_at,
        last_used_at=first_trusted_at,
    )
    mock_uow.trusted_devices.get_by_user_and_device.return_value = existing

    # Act
    trusted = await TrustedDeviceRegistry(mock_uow).trust(user_id, DeviceInfo(device_id="d1"))

    # Assert
    mock_uow.trusted_devices.create.assert_not_called()
    assert trusted.id == existing.id
    assert trusted.is_active is True
    assert trusted.trusted_at == first_trusted_at
    assert trusted.last_used_at > first_trusted_at
    assert trusted.custom_name == "My phone"


@pytest.mark.asyncio
async def test_untrust(mock_uow):
    user_id = uuid4()
    existing = TrustedDevice(user_id=user_id, device_id="d1")
    mock_uow.trusted_devices.get_by_user_and_device.return_value = existing

    assert await TrustedDeviceRegistry(mock_uow).untrust(user_id, "d1") is True
    assert existing.is_active is False


@pytest.mark.asyncio
async def test_untrust_unknown_device(mock_uow):
    assert await TrustedDeviceRegistry(mock_uow).untrust(uuid4(), "nope") is False
    mock_uow.trusted_devices.update.assert_not_called()


@pytest.mark.asyncio
async def test_untrust_all(mock_uow):
    user_id = uuid4()
    mock_uow.trusted_devices.revoke_all_by_user_id.return_value = 2

    count = await TrustedDeviceRegistry(mock_uow).untrust_all(user_id)

    assert count == 2
    mock_uow.trusted_devices.revoke_all_by_user_id.assert_awaited_once_with(user_id)
