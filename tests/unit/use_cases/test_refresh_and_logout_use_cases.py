from datetime import timedelta

import pytest

from src.app.services.refresh_coordinator import hash_refresh_token
from src.app.use_cases.auth import LogoutUseCase, RefreshTokenUseCase, ValidateTokenUseCase
from src.domain.base import utcnow
from src.domain.entities import RefreshCredential, UserSession, UserStatus


def _credential(user_id, token="refresh-token", **overrides):
    fields = {
        "user_id": user_id,
        "token_hash": hash_refresh_token(token),
        "expires_at": utcnow() + timedelta(days=7),
    }
    fields.update(overrides)
    return RefreshCredential(**fields)


@pytest.mark.asyncio
async def test_refresh_rotates_and_moves_session(mock_uow, token_issuer, make_user):
    # Arrange
    user = make_user()
    old = _credential(user.id)
    session = UserSession(user_id=user.id, device_id="phone", refresh_credential_id=old.id)
    mock_uow.refresh_credentials.find_valid.return_value = old
    mock_uow.users.get_by_id.return_value = user
    mock_uow.sessions.get_active_by_refresh_credential.return_value = session

    # Act
    result = await RefreshTokenUseCase(mock_uow, token_issuer).execute("refresh-token")

    # Assert
    assert result.is_ok()
    response = result.value
    assert response.refresh_token != "refresh-token"
    assert response.session_id == str(session.id)
    new_credential = mock_uow.refresh_credentials.create.call_args.args[0]
    assert session.refresh_credential_id == new_credential.id
    assert token_issuer.validate(response.access_token).email == user.email
    mock_uow.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_refresh_with_revoked_token_fails(mock_uow, token_issuer):
    result = await RefreshTokenUseCase(mock_uow, token_issuer).execute("stale")

    assert result.error.code == "INVALID_CREDENTIAL"
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_refresh_for_disabled_user_commits_revocation(mock_uow, token_issuer, make_user):
    """The cascading revoke must be persisted even though the call fails"""
    user = make_user(status=UserStatus.disabled)
    mock_uow.refresh_credentials.find_valid.return_value = _credential(user.id)
    mock_uow.users.get_by_id.return_value = user

    result = await RefreshTokenUseCase(mock_uow, token_issuer).execute("refresh-token")

    assert result.error.code == "ACCOUNT_DISABLED"
    mock_uow.refresh_credentials.revoke_all_by_user_id.assert_awaited_once()
    mock_uow.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_logout_revokes_credential_and_session(mock_uow, make_user):
    user = make_user()
    credential = _credential(user.id)
    session = UserSession(user_id=user.id, device_id="phone", refresh_credential_id=credential.id)
    mock_uow.refresh_credentials.get_by_token_hash.return_value = credential
    mock_uow.sessions.get_active_by_refresh_credential.return_value = session

    result = await LogoutUseCase(mock_uow).execute("refresh-token")

    assert result.value.message == "Logged out successfully"
    assert mock_uow.refresh_credentials.revoke_if_active.call_args.args[0] == credential.id
    assert session.is_active is False
    mock_uow.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_logout_unknown_token_still_succeeds(mock_uow):
    result = await LogoutUseCase(mock_uow).execute("unknown")

    assert result.is_ok()
    mock_uow.refresh_credentials.revoke_if_active.assert_not_called()


def test_validate_token(token_issuer, make_user):
    user = make_user()
    token = token_issuer.issue_access_token(user.id, user.email, user.role).token
    use_case = ValidateTokenUseCase(token_issuer)

    valid = use_case.execute(f"Bearer {token}").value
    invalid = use_case.execute("not-a-token").value

    assert valid.valid is True
    assert valid.user_id == str(user.id)
    assert valid.role == "USER"
    assert invalid.valid is False
    assert invalid.user_id is None
