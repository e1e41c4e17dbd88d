"""
Session Management Use Cases
"""

from .manage_sessions_use_case import ManageSessionsUseCase
from .dtos import RevokeSessionsResponse, SessionListResponse, SessionResponse

__all__ = [
    "ManageSessionsUseCase",
    "RevokeSessionsResponse",
    "SessionListResponse",
    "SessionResponse",
]
