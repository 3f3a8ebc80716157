"""Integration tests for signup, login and the current user's profile."""

import pytest
from fastapi import status

import config

API = f"{config.settings.API_PREFIX}/v1"
PASSWORD = "secret123"


async def _signup(client, email="owner@acme.io", company_name="Acme"):
    return await client.post(
        f"{API}/Auth/signup",
        json={
            "company_name": company_name,
            "name": "Ada Owner",
            "email": email,
            "password": PASSWORD,
        },
    )


@pytest.mark.asyncio
async def test_signup_creates_company_admin(client):
    """
    Test: Signup creates a company whose first user is an admin.
    """
    response = await _signup(client)

    assert response.status_code == status.HTTP_201_CREATED
    body = response.json()
    assert body["status"] == 201
    assert body["data"]["token"]
    user = body["data"]["user"]
    assert user["role"] == "admin"
    assert user["email"] == "owner@acme.io"
    assert "password" not in user
    assert "password_hash" not in user
    assert "id" not in user

    me = await client.get(
        f"{API}/Auth/me", headers={"Authorization": f"Bearer {body['data']['token']}"}
    )
    assert me.status_code == status.HTTP_200_OK
    assert me.json()["data"]["company"]["name"] == "Acme"


@pytest.mark.asyncio
async def test_signup_duplicate_email_conflicts(client):
    await _signup(client)

    response = await _signup(client, email="OWNER@acme.io", company_name="Other")

    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json()["data"]["code"] == "EMAIL_EXISTS"


@pytest.mark.asyncio
async def test_signup_validates_payload(client):
    response = await client.post(
        f"{API}/Auth/signup",
        json={"company_name": "Acme", "name": "Ada", "email": "not-an-email", "password": "123"},
    )

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    body = response.json()
    assert body["data"]["code"] == "VALIDATION_FAILED"
    assert "email" in body["data"]["error"]
    assert "password" in body["data"]["error"]


@pytest.mark.asyncio
async def test_login_success_and_failure(client, company_a):
    response = await client.post(
        f"{API}/Auth/login", json={"email": "admin@company-a.com", "password": PASSWORD}
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["data"]["user"]["uuid"] == str(company_a.admin.uuid)

    wrong = await client.post(
        f"{API}/Auth/login", json={"email": "admin@company-a.com", "password": "wrong-pass"}
    )
    assert wrong.status_code == status.HTTP_401_UNAUTHORIZED
    assert wrong.json()["data"]["code"] == "INVALID_CREDENTIALS"

    unknown = await client.post(
        f"{API}/Auth/login", json={"email": "ghost@company-a.com", "password": PASSWORD}
    )
    assert unknown.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.asyncio
async def test_me_requires_valid_token(client):
    missing = await client.get(f"{API}/Auth/me")
    assert missing.status_code == status.HTTP_401_UNAUTHORIZED
    assert missing.json()["data"]["code"] == "NOT_AUTHENTICATED"

    garbage = await client.get(f"{API}/Auth/me", headers={"Authorization": "Bearer not.a.token"})
    assert garbage.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.asyncio
async def test_change_password(client, company_a):
    """
    Test: Password change requires the current password and takes effect on login.
    """
    headers = company_a.headers("team_member")

    rejected = await client.put(
        f"{API}/Auth/me/password",
        json={"current_password": "nope-nope", "new_password": "brand-new-pass"},
        headers=headers,
    )
    assert rejected.status_code == status.HTTP_401_UNAUTHORIZED

    changed = await client.put(
        f"{API}/Auth/me/password",
        json={"current_password": PASSWORD, "new_password": "brand-new-pass"},
        headers=headers,
    )
    assert changed.status_code == status.HTTP_200_OK

    old_login = await client.post(
        f"{API}/Auth/login", json={"email": "team_member@company-a.com", "password": PASSWORD}
    )
    assert old_login.status_code == status.HTTP_401_UNAUTHORIZED

    new_login = await client.post(
        f"{API}/Auth/login", json={"email": "team_member@company-a.com", "password": "brand-new-pass"}
    )
    assert new_login.status_code == status.HTTP_200_OK


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "ok"
