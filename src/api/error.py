from fastapi import status
from src.domain.errors import AuthErrorCode
from src.domain.result import Error


class ClientError(Exception):
    def __init__(self, base_error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        self.base_error = base_error
        self.status_code = status_code
        super().__init__(base_error.message)


class ServerError(Exception):
    def __init__(self, base_error: Error):
        self.base_error = base_error
        super().__init__(base_error.message)


ERROR_STATUS_CODES = {
    AuthErrorCode.INVALID_CREDENTIAL: status.HTTP_401_UNAUTHORIZED,
    AuthErrorCode.INVALID_LOGIN: status.HTTP_401_UNAUTHORIZED,
    AuthErrorCode.INVALID_IDENTITY_ASSERTION: status.HTTP_401_UNAUTHORIZED,
    AuthErrorCode.ACCOUNT_DISABLED: status.HTTP_403_FORBIDDEN,
    AuthErrorCode.NOT_AUTHORIZED: status.HTTP_403_FORBIDDEN,
    AuthErrorCode.IDENTITY_NOT_VERIFIED: status.HTTP_403_FORBIDDEN,
    AuthErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    AuthErrorCode.ROLE_CONFLICT: status.HTTP_409_CONFLICT,
    AuthErrorCode.EMAIL_ALREADY_EXISTS: status.HTTP_409_CONFLICT,
    AuthErrorCode.PHONE_ALREADY_EXISTS: status.HTTP_409_CONFLICT,
    AuthErrorCode.EXPIRED: status.HTTP_410_GONE,
    AuthErrorCode.RATE_LIMITED: status.HTTP_429_TOO_MANY_REQUESTS,
    AuthErrorCode.ATTEMPTS_EXHAUSTED: status.HTTP_429_TOO_MANY_REQUESTS,
    AuthErrorCode.INVALID_CODE: status.HTTP_400_BAD_REQUEST,
    AuthErrorCode.INVALID_OR_EXPIRED_CODE: status.HTTP_400_BAD_REQUEST,
    AuthErrorCode.NO_PENDING_CHALLENGE: status.HTTP_400_BAD_REQUEST,
    AuthErrorCode.EXTERNAL_SIGN_IN_REQUIRED: status.HTTP_400_BAD_REQUEST,
    AuthErrorCode.INVALID_ROLE: status.HTTP_400_BAD_REQUEST,
    AuthErrorCode.INVALID_PASSWORD: status.HTTP_400_BAD_REQUEST,
    AuthErrorCode.DELIVERY_FAILED: status.HTTP_503_SERVICE_UNAVAILABLE,
    AuthErrorCode.FEDERATED_LOGIN_UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def raise_for_error(error: Error):
    """Raise the ClientError for a known error code, ServerError otherwise."""
    try:
        code = AuthErrorCode(error.code)
    except ValueError:
        raise ServerError(error) from None
    raise ClientError(
        error, status_code=ERROR_STATUS_CODES.get(code, status.HTTP_400_BAD_REQUEST)
    )
