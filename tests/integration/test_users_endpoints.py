"""Integration tests for admin user management."""

from uuid import uuid4

import pytest
from fastapi import status

import config

API = f"{config.settings.API_PREFIX}/v1"


@pytest.mark.asyncio
async def test_admin_lists_company_users(client, company_a, company_b):
    response = await client.get(f"{API}/Auth/users", headers=company_a.headers())

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["pager"] == {"total": 4, "page": 1, "limit": 20}
    emails = {user["email"] for user in body["data"]}
    assert all(email.endswith("@company-a.com") for email in emails)

    finance_only = await client.get(
        f"{API}/Auth/users", params={"role": "FINANCE"}, headers=company_a.headers()
    )
    assert [u["uuid"] for u in finance_only.json()["data"]] == [str(company_a.finance.uuid)]


@pytest.mark.asyncio
async def test_non_admin_cannot_manage_users(client, company_a):
    for role in ("project_manager", "team_member", "finance"):
        response = await client.get(f"{API}/Auth/users", headers=company_a.headers(role))
        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()["data"]["code"] == "INSUFFICIENT_PERMISSIONS"


@pytest.mark.asyncio
async def test_create_update_delete_user(client, company_a):
    """
    Test: Admin creates a user, edits them, then removes them.
    """
    headers = company_a.headers()
    created = await client.post(
        f"{API}/Auth/users",
        json={
            "name": "New Hire",
            "email": "New.Hire@Company-A.com",
            "password": "welcome1",
            "role": "team_member",
            "hourly_rate": 42.5,
        },
        headers=headers,
    )
    assert created.status_code == status.HTTP_201_CREATED
    user = created.json()["data"]
    assert user["email"] == "new.hire@company-a.com"
    assert user["hourly_rate"] == 42.5

    login = await client.post(
        f"{API}/Auth/login", json={"email": "new.hire@company-a.com", "password": "welcome1"}
    )
    assert login.status_code == status.HTTP_200_OK

    updated = await client.put(
        f"{API}/Auth/users/{user['uuid']}",
        json={"role": "finance", "name": "Senior Hire"},
        headers=headers,
    )
    assert updated.status_code == status.HTTP_200_OK
    assert updated.json()["data"]["role"] == "finance"
    assert updated.json()["data"]["name"] == "Senior Hire"

    deleted = await client.delete(f"{API}/Auth/users/{user['uuid']}", headers=headers)
    assert deleted.status_code == status.HTTP_200_OK

    missing = await client.get(f"{API}/Auth/users/{user['uuid']}", headers=headers)
    assert missing.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.asyncio
async def test_create_user_with_taken_email(client, company_a, company_b):
    response = await client.post(
        f"{API}/Auth/users",
        json={"name": "Dup", "email": "admin@company-b.com", "password": "welcome1"},
        headers=company_a.headers(),
    )

    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json()["data"]["code"] == "EMAIL_EXISTS"


@pytest.mark.asyncio
async def test_admin_cannot_delete_self(client, company_a):
    response = await client.delete(
        f"{API}/Auth/users/{company_a.admin.uuid}", headers=company_a.headers()
    )

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["data"]["code"] == "CANNOT_DELETE_SELF"


@pytest.mark.asyncio
async def test_unknown_user_is_not_found(client, company_a):
    response = await client.delete(f"{API}/Auth/users/{uuid4()}", headers=company_a.headers())

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["data"]["code"] == "NOT_FOUND"
