import pytest

from tests.utils.auth_headers import bearer


@pytest.mark.asyncio
async def test_refresh_rotates_token(client, register_user):
    # Arrange
    login = await register_user()

    # Act
    response = await client.post("/auth/refresh", json={"refresh_token": login["refresh_token"]})

    # Assert
    assert response.status_code == 200
    data = response.json()
    assert data["refresh_token"] != login["refresh_token"]
    assert data["token_type"] == "Bearer"
    assert data["expires_in"] == 900
    assert data["session_id"] == login["session_id"]


@pytest.mark.asyncio
async def test_refresh_token_is_single_use(client, register_user):
    login = await register_user()
    first = await client.post("/auth/refresh", json={"refresh_token": login["refresh_token"]})
    assert first.status_code == 200

    replay = await client.post("/auth/refresh", json={"refresh_token": login["refresh_token"]})

    assert replay.status_code == 401
    assert replay.json() == {
        "error": {"code": "INVALID_CREDENTIAL", "message": "Invalid or expired refresh token"}
    }

    # The successor still works
    successor = await client.post(
        "/auth/refresh", json={"refresh_token": first.json()["refresh_token"]}
    )
    assert successor.status_code == 200


@pytest.mark.asyncio
async def test_refresh_unknown_token(client):
    response = await client.post("/auth/refresh", json={"refresh_token": "not-a-real-token"})

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_refresh_after_disable(client, register_user, admin_headers):
    login = await register_user()
    await client.patch(
        f"/admin/users/{login['user']['id']}/status",
        json={"active": False},
        headers=admin_headers,
    )

    response = await client.post("/auth/refresh", json={"refresh_token": login["refresh_token"]})

    # Disabling already revoked the token
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_logout_revokes_token_and_session(client, register_user):
    # Arrange
    login = await register_user()

    # Act
    response = await client.post("/auth/logout", json={"refresh_token": login["refresh_token"]})

    # Assert
    assert response.status_code == 200
    assert response.json() == {"message": "Logged out successfully"}

    refresh = await client.post("/auth/refresh", json={"refresh_token": login["refresh_token"]})
    assert refresh.status_code == 401

    sessions = await client.get("/sessions", headers=bearer(login))
    assert sessions.json()["total"] == 0

    again = await client.post("/auth/logout", json={"refresh_token": login["refresh_token"]})
    assert again.status_code == 200


@pytest.mark.asyncio
async def test_validate_token(client, register_user):
    login = await register_user()

    body = await client.post("/auth/validate", json={"token": login["access_token"]})
    header = await client.post("/auth/validate", json={}, headers=bearer(login))
    garbage = await client.post("/auth/validate", json={"token": "garbage"})

    assert body.status_code == 200
    assert body.json()["valid"] is True
    assert body.json()["user_id"] == login["user"]["id"]
    assert body.json()["role"] == "USER"
    assert header.json()["valid"] is True
    assert garbage.status_code == 200
    assert garbage.json()["valid"] is False


@pytest.mark.asyncio
async def test_refresh_token_is_not_an_access_token(client, register_user):
    login = await register_user()

    response = await client.post("/auth/validate", json={"token": login["refresh_token"]})

    assert response.json()["valid"] is False
