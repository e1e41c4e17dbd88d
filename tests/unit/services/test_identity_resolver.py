import pytest

from src.app.services.identity_resolver import IdentityResolver
from src.domain.entities import Role, UserStatus
from src.domain.errors import DuplicateEntityError


@pytest.mark.asyncio
async def test_unknown_email_creates_verified_user(mock_uow):
    # Arrange
    mock_uow.users.get_by_email.return_value = None

    # Act
    result = await IdentityResolver(mock_uow).resolve(
        "New.Person@Example.com", Role.SERVICE_PROVIDER, "New Person"
    )

    # Assert
    assert result.is_ok()
    resolved = result.value
    assert resolved.is_new_user is True
    assert resolved.user.email == "new.person@example.com"
    assert resolved.user.role == Role.SERVICE_PROVIDER
    assert resolved.user.email_verified is True
    assert resolved.user.password_hash is None
    assert resolved.user.full_name == "New Person"


@pytest.mark.asyncio
async def test_display_name_defaults_to_local_part(mock_uow):
    mock_uow.users.get_by_email.return_value = None

    result = await IdentityResolver(mock_uow).resolve("jane@example.com", Role.USER)

    assert result.value.user.full_name == "jane"


@pytest.mark.asyncio
async def test_existing_user_with_same_role(mock_uow, make_user):
    user = make_user(role=Role.USER)
    mock_uow.users.get_by_email.return_value = user

    result = await IdentityResolver(mock_uow).resolve(user.email, Role.USER)

    assert result.value.user is user
    assert result.value.is_new_user is False
    mock_uow.users.create.assert_not_called()


@pytest.mark.asyncio
async def test_role_conflict_leaves_user_untouched(mock_uow, make_user):
    # Arrange
    user = make_user(role=Role.SERVICE_PROVIDER)
    mock_uow.users.get_by_email.return_value = user

    # Act
    result = await IdentityResolver(mock_uow).resolve(user.email, Role.USER)

    # Assert
    assert result.is_err()
    assert result.error.code == "ROLE_CONFLICT"
    assert "Service Provider" in result.error.message
    assert user.role == Role.SERVICE_PROVIDER
    mock_uow.users.create.assert_not_called()
    mock_uow.users.update.assert_not_called()


@pytest.mark.asyncio
async def test_disabled_user_fails_regardless_of_role(mock_uow, make_user):
    user = make_user(role=Role.SERVICE_PROVIDER, status=UserStatus.disabled)
    mock_uow.users.get_by_email.return_value = user

    for role in (Role.USER, Role.SERVICE_PROVIDER):
        result = await IdentityResolver(mock_uow).resolve(user.email, role)
        assert result.error.code == "ACCOUNT_DISABLED"


@pytest.mark.asyncio
async def test_concurrent_first_sign_in_returns_the_winning_account(mock_uow, make_user):
    # Arrange
    winner = make_user(email="jane@example.com", role=Role.USER)
    mock_uow.users.get_by_email.side_effect = [None, winner]
    mock_uow.users.create.side_effect = DuplicateEntityError("taken")

    # Act
    result = await IdentityResolver(mock_uow).resolve("jane@example.com", Role.USER)

    # Assert
    assert result.is_ok()
    assert result.value.user is winner
    assert result.value.is_new_user is False


@pytest.mark.asyncio
async def test_concurrent_first_sign_in_with_other_role_conflicts(mock_uow, make_user):
    winner = make_user(email="jane@example.com", role=Role.SERVICE_PROVIDER)
    mock_uow.users.get_by_email.side_effect = [None, winner]
    mock_uow.users.create.side_effect = DuplicateEntityError("taken")

    result = await IdentityResolver(mock_uow).resolve("jane@example.com", Role.USER)

    assert result.error.code == "ROLE_CONFLICT"
