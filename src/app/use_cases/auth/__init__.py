"""
Authentication Use Cases

All authentication-related business logic.
"""

from .register_use_case import RegisterUseCase
from .login_use_case import LoginUseCase
from .refresh_token_use_case import RefreshTokenUseCase
from .logout_use_case import LogoutUseCase
from .validate_token_use_case import ValidateTokenUseCase
from .federated_login_use_case import FederatedLoginUseCase
from .login_finalizer import LoginFinalizer
from .dtos import (
    RegisterCommand,
    LoginCommand,
    LoginResult,
    UserInfo,
    RefreshTokenResponse,
    OtpSentResponse,
    TokenValidationResponse,
    MessageResponse,
)

__all__ = [
    # Use Cases
    "RegisterUseCase",
    "LoginUseCase",
    "RefreshTokenUseCase",
    "LogoutUseCase",
    "ValidateTokenUseCase",
    "FederatedLoginUseCase",
    "LoginFinalizer",
    # DTOs - Commands
    "RegisterCommand",
    "LoginCommand",
    # DTOs - Responses
    "LoginResult",
    "RefreshTokenResponse",
    "OtpSentResponse",
    "TokenValidationResponse",
    "MessageResponse",
    # DTOs - Nested Models
    "UserInfo",
]
