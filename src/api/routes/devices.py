from fastapi import APIRouter, Depends, status

from src.api.error import raise_for_error
from src.app.services.token_issuer import AccessTokenClaims
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.devices import (
    ManageTrustedDevicesUseCase,
    TrustedDeviceListResponse,
    TrustedDeviceResponse,
    UntrustDeviceResponse,
)
from src.depends import get_current_user, get_unit_of_work
from src.domain.entities import DeviceInfo

router = APIRouter(prefix="/devices/trust", tags=["Trusted Devices"])


@router.post("", status_code=status.HTTP_200_OK, response_model=TrustedDeviceResponse)
async def trust_device(
    request: DeviceInfo,
    current_user: AccessTokenClaims = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Trust a device (idempotent; re-trusting keeps the original trust date)"""
    use_case = ManageTrustedDevicesUseCase(uow)
    result = await use_case.trust_device(current_user.user_id, request)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.get("", status_code=status.HTTP_200_OK, response_model=TrustedDeviceListResponse)
async def list_trusted_devices(
    current_user: AccessTokenClaims = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """List trusted devices, most recently used first"""
    use_case = ManageTrustedDevicesUseCase(uow)
    result = await use_case.list_devices(current_user.user_id)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.delete("/{device_id}", status_code=status.HTTP_200_OK, response_model=UntrustDeviceResponse)
async def untrust_device(
    device_id: str,
    current_user: AccessTokenClaims = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Untrust a device

    Raises:
        - 404 Not Found: Device is not trusted
    """
    use_case = ManageTrustedDevicesUseCase(uow)
    result = await use_case.untrust_device(current_user.user_id, device_id)

    if result.is_err():
        raise_for_error(result.error)

    return result.value
