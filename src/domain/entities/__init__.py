"""
Identity Service Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

# Export all enums
from .enums import Role, SELF_REGISTRABLE_ROLES, TokenType, UserStatus

# Export all entities
from .user import User
from .refresh_credential import RefreshCredential
from .session import UserSession
from .trusted_device import TrustedDevice

# Export value objects
from .device_info import DEFAULT_DEVICE_ID, DeviceInfo
from .otp_challenge import EmailOtpChallenge

__all__ = [
    # Enums
    "Role",
    "SELF_REGISTRABLE_ROLES",
    "TokenType",
    "UserStatus",
    # Entities
    "User",
    "RefreshCredential",
    "UserSession",
    "TrustedDevice",
    # Value objects
    "DEFAULT_DEVICE_ID",
    "DeviceInfo",
    "EmailOtpChallenge",
]
