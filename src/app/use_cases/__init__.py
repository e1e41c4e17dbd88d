"""
Use Cases

Organized into domain folders:
- auth/: Registration, password login, token refresh, logout, federated login
- otp/: Passwordless login by email or phone code
- sessions/: Device session management
- devices/: Trusted device management
- users/: Profile, password and account status

Import from subdirectories for better organization.
"""

from .auth import (
    RegisterUseCase,
    LoginUseCase,
    RefreshTokenUseCase,
    LogoutUseCase,
    ValidateTokenUseCase,
    FederatedLoginUseCase,
)
from .otp import EmailOtpLoginUseCase, PhoneOtpLoginUseCase
from .sessions import ManageSessionsUseCase
from .devices import ManageTrustedDevicesUseCase
from .users import ChangePasswordUseCase, GetProfileUseCase, UpdateUserStatusUseCase

__all__ = [
    # Auth
    "RegisterUseCase",
    "LoginUseCase",
    "RefreshTokenUseCase",
    "LogoutUseCase",
    "ValidateTokenUseCase",
    "FederatedLoginUseCase",
    # OTP
    "EmailOtpLoginUseCase",
    "PhoneOtpLoginUseCase",
    # Sessions and devices
    "ManageSessionsUseCase",
    "ManageTrustedDevicesUseCase",
    # Users
    "ChangePasswordUseCase",
    "GetProfileUseCase",
    "UpdateUserStatusUseCase",
]
