from uuid import uuid4

import bcrypt
import pytest

from src.app.use_cases.users import (
    ChangePasswordUseCase,
    GetProfileUseCase,
    UpdateUserStatusUseCase,
)
from src.domain.entities import UserSession, UserStatus


def _hash(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt(4)).decode()


@pytest.mark.asyncio
async def test_get_profile(mock_uow, make_user):
    user = make_user(phone_number="+15550001111")
    mock_uow.users.get_by_id.return_value = user

    result = await GetProfileUseCase(mock_uow).execute(user.id)

    profile = result.value
    assert profile.id == str(user.id)
    assert profile.role == "USER"
    assert profile.status == "active"
    assert profile.has_password is False


@pytest.mark.asyncio
async def test_get_profile_unknown_user(mock_uow):
    mock_uow.users.get_by_id.return_value = None

    result = await GetProfileUseCase(mock_uow).execute(uuid4())

    assert result.error.code == "NOT_FOUND"


@pytest.mark.asyncio
async def test_disable_user_revokes_credentials_and_sessions(mock_uow, make_user):
    """Disabling is one transaction: status change plus cascading revoke"""
    # Arrange
    user = make_user()
    mock_uow.users.get_by_id.return_value = user
    mock_uow.refresh_credentials.revoke_all_by_user_id.return_value = 3
    mock_uow.sessions.revoke_all_by_user_id.return_value = 2

    # Act
    result = await UpdateUserStatusUseCase(mock_uow).execute(user.id, active=False)

    # Assert
    response = result.value
    assert response.status == "disabled"
    assert response.revoked_credentials == 3
    assert response.revoked_sessions == 2
    assert user.status == UserStatus.disabled
    mock_uow.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_enable_user_revokes_nothing(mock_uow, make_user):
    user = make_user(status=UserStatus.disabled)
    mock_uow.users.get_by_id.return_value = user

    result = await UpdateUserStatusUseCase(mock_uow).execute(user.id, active=True)

    assert result.value.status == "active"
    mock_uow.refresh_credentials.revoke_all_by_user_id.assert_not_called()


@pytest.mark.asyncio
async def test_change_password_keeps_current_device(mock_uow, make_user):
    # Arrange
    user = make_user(password_hash=_hash("OldPass123!"))
    current = UserSession(user_id=user.id, device_id="laptop", refresh_credential_id=uuid4())
    mock_uow.users.get_by_id.return_value = user
    mock_uow.sessions.get_active_by_user_and_device.return_value = current
    mock_uow.refresh_credentials.revoke_all_by_user_id.return_value = 2
    mock_uow.sessions.revoke_all_except_device.return_value = 2

    # Act
    result = await ChangePasswordUseCase(mock_uow).execute(
        user.id, "NewPass456!", current_password="OldPass123!", current_device_id="laptop"
    )

    # Assert
    assert result.value.message == "Password changed successfully"
    assert result.value.revoked_credentials == 2
    assert bcrypt.checkpw(b"NewPass456!", user.password_hash.encode())
    args = mock_uow.refresh_credentials.revoke_all_by_user_id.call_args.args
    assert args[0] == user.id
    assert args[2] == current.refresh_credential_id
    mock_uow.sessions.revoke_all_except_device.assert_awaited_once_with(user.id, "laptop")
    mock_uow.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_change_password_wrong_current(mock_uow, make_user):
    user = make_user(password_hash=_hash("OldPass123!"))
    mock_uow.users.get_by_id.return_value = user

    result = await ChangePasswordUseCase(mock_uow).execute(
        user.id, "NewPass456!", current_password="wrong-pass"
    )

    assert result.error.code == "INVALID_PASSWORD"
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_change_password_same_as_current(mock_uow, make_user):
    user = make_user(password_hash=_hash("OldPass123!"))
    mock_uow.users.get_by_id.return_value = user

    result = await ChangePasswordUseCase(mock_uow).execute(
        user.id, "OldPass123!", current_password="OldPass123!"
    )

    assert result.error.code == "INVALID_PASSWORD"


@pytest.mark.asyncio
async def test_federated_user_sets_first_password(mock_uow, make_user):
    user = make_user(password_hash=None)
    mock_uow.users.get_by_id.return_value = user

    result = await ChangePasswordUseCase(mock_uow).execute(user.id, "FirstPass123!")

    assert result.value.message == "Password set successfully"
    assert user.has_password
