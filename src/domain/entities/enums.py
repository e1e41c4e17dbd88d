"""
Identity Service Domain Enums

All enumeration types used across domain entities.
"""

from enum import Enum


class UserStatus(str, Enum):
    """User account status"""

    active = "active"
    disabled = "disabled"


class Role(str, Enum):
    """
    Closed set of user roles carried in access tokens.

    A user's role is fixed the first time it is assigned (registration or
    first federated sign-in) and never changes afterwards.
    """

    USER = "USER"
    SERVICE_PROVIDER = "SERVICE_PROVIDER"
    ADMIN = "ADMIN"
    SUPPORT = "SUPPORT"
    IT_ADMIN = "IT_ADMIN"

    @property
    def display_name(self) -> str:
        return _ROLE_DISPLAY_NAMES[self]


_ROLE_DISPLAY_NAMES = {
    Role.USER: "User",
    Role.SERVICE_PROVIDER: "Service Provider",
    Role.ADMIN: "Admin",
    Role.SUPPORT: "Support",
    Role.IT_ADMIN: "IT Admin",
}

# Roles a person may pick for themselves (registration, federated sign-up).
# Elevated roles are only ever assigned by an administrator.
SELF_REGISTRABLE_ROLES = frozenset({Role.USER, Role.SERVICE_PROVIDER})


class TokenType(str, Enum):
    """Value of the tokenType claim"""

    ACCESS = "ACCESS"
