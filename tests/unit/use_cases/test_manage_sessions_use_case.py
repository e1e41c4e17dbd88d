from uuid import uuid4

import pytest

from src.app.use_cases.sessions import ManageSessionsUseCase
from src.domain.entities import UserSession


@pytest.mark.asyncio
async def test_list_sessions_marks_current(mock_uow):
    user_id = uuid4()
    mock_uow.sessions.list_active_by_user_id.return_value = [
        UserSession(user_id=user_id, device_id="phone", platform="ios"),
        UserSession(user_id=user_id, device_id="laptop", platform="web"),
    ]

    result = await ManageSessionsUseCase(mock_uow).list_sessions(user_id, "laptop")

    listing = result.value
    assert listing.total == 2
    current = {s.device_id: s.is_current_session for s in listing.sessions}
    assert current == {"phone": False, "laptop": True}


@pytest.mark.asyncio
async def test_revoke_session_also_revokes_credential(mock_uow):
    user_id = uuid4()
    session = UserSession(user_id=user_id, device_id="phone", refresh_credential_id=uuid4())
    mock_uow.sessions.get_by_id.return_value = session

    result = await ManageSessionsUseCase(mock_uow).revoke_session(user_id, session.id)

    assert result.value.revoked_count == 1
    assert session.is_active is False
    ids = list(mock_uow.refresh_credentials.revoke_by_ids.call_args.args[0])
    assert ids == [session.refresh_credential_id]
    mock_uow.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_revoke_someone_elses_session(mock_uow):
    session = UserSession(user_id=uuid4(), device_id="phone")
    mock_uow.sessions.get_by_id.return_value = session

    result = await ManageSessionsUseCase(mock_uow).revoke_session(uuid4(), session.id)

    assert result.error.code == "NOT_AUTHORIZED"
    assert session.is_active is True
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_revoke_other_sessions(mock_uow):
    # Arrange
    user_id = uuid4()
    keep = UserSession(user_id=user_id, device_id="laptop", refresh_credential_id=uuid4())
    other = UserSession(user_id=user_id, device_id="phone", refresh_credential_id=uuid4())
    mock_uow.sessions.list_active_by_user_id.return_value = [keep, other]
    mock_uow.sessions.revoke_all_except_device.return_value = 1

    # Act
    result = await ManageSessionsUseCase(mock_uow).revoke_other_sessions(user_id, "laptop")

    # Assert
    assert result.value.revoked_count == 1
    mock_uow.sessions.revoke_all_except_device.assert_awaited_once_with(user_id, "laptop")
    ids = list(mock_uow.refresh_credentials.revoke_by_ids.call_args.args[0])
    assert ids == [other.refresh_credential_id]


@pytest.mark.asyncio
async def test_revoke_all_sessions(mock_uow):
    user_id = uuid4()
    mock_uow.sessions.revoke_all_by_user_id.return_value = 3

    result = await ManageSessionsUseCase(mock_uow).revoke_all_sessions(user_id)

    assert result.value.message == "Successfully revoked 3 session(s)"
    mock_uow.refresh_credentials.revoke_all_by_user_id.assert_awaited_once()


@pytest.mark.asyncio
async def test_cleanup_inactive(mock_uow):
    mock_uow.sessions.delete_inactive_older_than.return_value = 4

    result = await ManageSessionsUseCase(mock_uow).cleanup_inactive(30)

    assert result.value == 4
    mock_uow.commit.assert_awaited_once()
