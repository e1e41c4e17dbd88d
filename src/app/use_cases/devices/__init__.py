"""
Trusted Device Use Cases
"""

from .manage_trusted_devices_use_case import ManageTrustedDevicesUseCase
from .dtos import TrustedDeviceListResponse, TrustedDeviceResponse, UntrustDeviceResponse

__all__ = [
    "ManageTrustedDevicesUseCase",
    "TrustedDeviceListResponse",
    "TrustedDeviceResponse",
    "UntrustDeviceResponse",
]
