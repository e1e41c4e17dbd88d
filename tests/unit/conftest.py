from unittest.mock import AsyncMock, MagicMock

import pytest

from src.app.services.token_issuer import TokenIssuer
from src.domain.entities import Role, User, UserStatus


def _return_entity(entity, *args, **kwargs):
    return entity


def _repository(*passthrough):
    """AsyncMock repository whose create/update return what they are given."""
    repo = AsyncMock()
    for name in passthrough:
        getattr(repo, name).side_effect = _return_entity
    return repo


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    uow.users = _repository("create", "update")

    uow.refresh_credentials = _repository("create")
    uow.refresh_credentials.find_valid.return_value = None
    uow.refresh_credentials.get_by_token_hash.return_value = None
    uow.refresh_credentials.revoke_if_active.return_value = True
    uow.refresh_credentials.revoke_all_by_user_id.return_value = 0
    uow.refresh_credentials.revoke_by_ids.return_value = 0

    uow.sessions = _repository("create", "update")
    uow.sessions.get_by_id.return_value = None
    uow.sessions.get_active_by_user_and_device.return_value = None
    uow.sessions.get_active_by_refresh_credential.return_value = None
    uow.sessions.list_active_by_user_id.return_value = []
    uow.sessions.revoke_all_by_user_id.return_value = 0
    uow.sessions.revoke_all_except_device.return_value = 0

    uow.trusted_devices = _repository("create", "update")
    uow.trusted_devices.get_by_user_and_device.return_value = None
    uow.trusted_devices.exists_active.return_value = False
    uow.trusted_devices.list_active_by_user_id.return_value = []

    return uow


@pytest.fixture
def token_issuer():
    return TokenIssuer(secret="unit-test-secret", issuer="identity-service", expire_minutes=15)


@pytest.fixture
def make_user():
    def _make_user(**overrides):
        fields = {
            "email": "user@example.com",
            "full_name": "Test User",
            "role": Role.USER,
            "status": UserStatus.active,
        }
        fields.update(overrides)
        return User(**fields)

    return _make_user
