from typing import Optional

from fastapi import Request

from src.domain.entities import DEFAULT_DEVICE_ID


def client_ip(request: Request) -> Optional[str]:
    """Caller address, honouring the first X-Forwarded-For hop."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None


def device_id_header(request: Request) -> str:
    return request.headers.get("x-device-id") or DEFAULT_DEVICE_ID
