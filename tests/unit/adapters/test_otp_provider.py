import httpx
import pytest

from src.adapter.services.otp_provider import StubOtpProvider, TwilioVerifyOtpProvider
from src.app.services.otp_provider import OtpProviderError


def _provider(handler):
    return TwilioVerifyOtpProvider(
        account_sid="AC123",
        auth_token="secret",
        service_sid="VA456",
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_start_verification_posts_sms_request():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["body"] = request.content.decode()
        seen["auth"] = request.headers.get("authorization")
        return httpx.Response(201, json={"status": "pending"})

    provider = _provider(handler)
    await provider.start_verification("+15551234567")
    await provider.close()

    assert seen["path"] == "/v2/Services/VA456/Verifications"
    assert "Channel=sms" in seen["body"]
    assert "To=%2B15551234567" in seen["body"]
    assert seen["auth"].startswith("Basic ")


@pytest.mark.asyncio
async def test_start_verification_failure_raises():
    provider = _provider(lambda request: httpx.Response(500, json={"message": "boom"}))

    with pytest.raises(OtpProviderError):
        await provider.start_verification("+15551234567")


@pytest.mark.asyncio
async def test_check_verification_statuses():
    responses = {
        "111111": httpx.Response(200, json={"status": "approved"}),
        "222222": httpx.Response(200, json={"status": "pending"}),
        "333333": httpx.Response(404, json={"message": "not found"}),
    }

    def handler(request: httpx.Request) -> httpx.Response:
        code = dict(httpx.QueryParams(request.content.decode()))["Code"]
        return responses[code]

    provider = _provider(handler)

    assert await provider.check_verification("+15551234567", "111111") is True
    assert await provider.check_verification("+15551234567", "222222") is False
    assert await provider.check_verification("+15551234567", "333333") is False


@pytest.mark.asyncio
async def test_check_verification_transport_error_raises():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("unreachable", request=request)

    with pytest.raises(OtpProviderError):
        await _provider(handler).check_verification("+15551234567", "111111")


@pytest.mark.asyncio
async def test_stub_provider():
    provider = StubOtpProvider(code="424242")
    await provider.start_verification("+15551234567")

    assert await provider.check_verification("+15551234567", "424242") is True
    assert await provider.check_verification("+15551234567", "000000") is False
