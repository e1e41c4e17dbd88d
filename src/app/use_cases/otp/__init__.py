"""
One-Time Code Login Use Cases

Passwordless login by email or phone.
"""

from .email_otp_login_use_case import EmailOtpLoginUseCase, generate_numeric_code
from .phone_otp_login_use_case import PhoneOtpLoginUseCase

__all__ = [
    "EmailOtpLoginUseCase",
    "PhoneOtpLoginUseCase",
    "generate_numeric_code",
]
