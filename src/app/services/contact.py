"""
Contact normalization and masking helpers.

Emails are compared lower-cased; phone numbers are compared in their
E.164-like form (leading + and digits only). Masked values are what the
API echoes back and what the logs carry.
"""

import re

_NON_DIGITS = re.compile(r"\D")


def normalize_email(email: str) -> str:
    return email.strip().lower()


def normalize_phone(phone: str) -> str:
    phone = phone.strip()
    digits = _NON_DIGITS.sub("", phone)
    if phone.startswith("+"):
        return f"+{digits}"
    return digits


def mask_email(email: str) -> str:
    """a***@example.com style masking, only the first character is kept."""
    if "@" not in email:
        return "***"
    local, domain = email.split("@", 1)
    return f"{local[:1]}***@{domain}"


def mask_phone(phone: str) -> str:
    if len(phone) < 4:
        return "****"
    return f"****{phone[-4:]}"
