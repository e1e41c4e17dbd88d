"""
Authentication Error Codes

Stable machine-readable codes carried by Error.code. The API layer maps
each code to an HTTP status; none of them are retried inside the core.
"""

from enum import Enum

from .result import Error


class AuthErrorCode(str, Enum):
    # Refresh credentials
    INVALID_CREDENTIAL = "INVALID_CREDENTIAL"
    ACCOUNT_DISABLED = "ACCOUNT_DISABLED"

    # Identity
    ROLE_CONFLICT = "ROLE_CONFLICT"
    NOT_FOUND = "NOT_FOUND"
    NOT_AUTHORIZED = "NOT_AUTHORIZED"

    # One-time codes
    RATE_LIMITED = "RATE_LIMITED"
    EXPIRED = "EXPIRED"
    ATTEMPTS_EXHAUSTED = "ATTEMPTS_EXHAUSTED"
    INVALID_CODE = "INVALID_CODE"
    NO_PENDING_CHALLENGE = "NO_PENDING_CHALLENGE"
    INVALID_OR_EXPIRED_CODE = "INVALID_OR_EXPIRED_CODE"

    # Delegated providers
    DELIVERY_FAILED = "DELIVERY_FAILED"

    # Password and registration flows
    INVALID_LOGIN = "INVALID_LOGIN"
    EXTERNAL_SIGN_IN_REQUIRED = "EXTERNAL_SIGN_IN_REQUIRED"
    EMAIL_ALREADY_EXISTS = "EMAIL_ALREADY_EXISTS"
    PHONE_ALREADY_EXISTS = "PHONE_ALREADY_EXISTS"
    INVALID_ROLE = "INVALID_ROLE"
    INVALID_PASSWORD = "INVALID_PASSWORD"

    # Federated sign-in
    INVALID_IDENTITY_ASSERTION = "INVALID_IDENTITY_ASSERTION"
    IDENTITY_NOT_VERIFIED = "IDENTITY_NOT_VERIFIED"
    FEDERATED_LOGIN_UNAVAILABLE = "FEDERATED_LOGIN_UNAVAILABLE"


ACCOUNT_DISABLED_MESSAGE = "Account is deactivated. Please contact support."


def auth_error(code: AuthErrorCode, message: str) -> Error:
    return Error(code.value, message, retryable=code is AuthErrorCode.DELIVERY_FAILED)


class ConfigurationError(RuntimeError):
    """Raised at startup when a required setting (signing key, provider credentials) is missing."""


class DuplicateEntityError(Exception):
    """Raised by a repository when an insert collides with a unique key held by another row."""
