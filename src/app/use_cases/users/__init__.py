"""
User Management Use Cases

All user-related business logic.
"""

from .get_profile_use_case import GetProfileUseCase
from .update_user_status_use_case import UpdateUserStatusUseCase
from .change_password_use_case import ChangePasswordUseCase
from .dtos import ChangePasswordResponse, UserProfileResponse, UserStatusResponse

__all__ = [
    "GetProfileUseCase",
    "UpdateUserStatusUseCase",
    "ChangePasswordUseCase",
    "ChangePasswordResponse",
    "UserProfileResponse",
    "UserStatusResponse",
]
