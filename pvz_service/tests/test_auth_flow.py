"""
Integration tests for Authentication Flow.

Verifies dummy login, Register -> Login, and token enforcement.
"""

import pytest

from pvz_service.app.core.jwt import decode_access_token, create_access_token


def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.mark.asyncio
@pytest.mark.parametrize("role", ["employee", "moderator"])
async def test_dummy_login_issues_token_for_role(client, role):
    response = await client.post("/dummyLogin", json={"role": role})

    assert response.status_code == 200
    payload = decode_access_token(response.json()["token"])
    assert payload["role"] == role
    assert payload["user_id"]


@pytest.mark.asyncio
async def test_dummy_login_rejects_unknown_role(client):
    response = await client.post("/dummyLogin", json={"role": "admin"})

    assert response.status_code == 400
    assert response.json()["error_code"] == "ERR_VALIDATION"


@pytest.mark.asyncio
async def test_register_then_login(client):
    register = await client.post("/register", json={
        "email": "worker@test.com",
        "password": "password123",
        "role": "employee"
    })
    assert register.status_code == 201
    data = register.json()
    assert data["email"] == "worker@test.com"
    assert data["role"] == "employee"
    assert "password" not in data and "password_hash" not in data

    login = await client.post("/login", json={
        "email": "worker@test.com",
        "password": "password123"
    })
    assert login.status_code == 200
    payload = decode_access_token(login.json()["token"])
    assert payload["user_id"] == data["id"]
    assert payload["role"] == "employee"


@pytest.mark.asyncio
async def test_register_duplicate_email(client):
    body = {"email": "dup@test.com", "password": "password123", "role": "moderator"}
    assert (await client.post("/register", json=body)).status_code == 201

    response = await client.post("/register", json=body)
    assert response.status_code == 400
    assert response.json()["message"] == "Email already registered"


@pytest.mark.asyncio
async def test_register_short_password(client):
    response = await client.post("/register", json={
        "email": "short@test.com",
        "password": "123",
        "role": "employee"
    })
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_login_wrong_password(client):
    await client.post("/register", json={
        "email": "someone@test.com",
        "password": "password123",
        "role": "employee"
    })

    response = await client.post("/login", json={
        "email": "someone@test.com",
        "password": "wrong-password"
    })
    assert response.status_code == 401

    unknown = await client.post("/login", json={
        "email": "nobody@test.com",
        "password": "password123"
    })
    assert unknown.status_code == 401


@pytest.mark.asyncio
async def test_protected_route_requires_token(client):
    response = await client.get("/pvz")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_protected_route_rejects_invalid_token(client):
    response = await client.get("/pvz", headers=auth_headers("not-a-jwt"))
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_token_with_unknown_role_rejected(client):
    token = create_access_token({"sub": "x", "user_id": "x", "role": "ADMIN"})
    response = await client.get("/pvz", headers=auth_headers(token))
    assert response.status_code == 401
