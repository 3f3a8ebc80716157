"""Integration tests for contacts and projects."""

from uuid import uuid4

import pytest
from fastapi import status

import config

API = f"{config.settings.API_PREFIX}/v1"


async def _create_contact(client, headers, name, type_):
    response = await client.post(
        f"{API}/Contacts", json={"name": name, "type": type_}, headers=headers
    )
    assert response.status_code == status.HTTP_201_CREATED
    return response.json()["data"]


@pytest.mark.asyncio
async def test_contact_crud_and_filters(client, company_a):
    headers = company_a.headers("finance")
    client_contact = await _create_contact(client, headers, "Globex", "CLIENT")
    await _create_contact(client, headers, "Initech Supplies", "vendor")

    assert client_contact["type"] == "client"

    vendors = await client.get(f"{API}/Contacts", params={"type": "vendor"}, headers=headers)
    assert [c["name"] for c in vendors.json()["data"]] == ["Initech Supplies"]

    searched = await client.get(f"{API}/Contacts", params={"search": "glob"}, headers=headers)
    assert searched.json()["pager"]["total"] == 1

    updated = await client.put(
        f"{API}/Contacts/{client_contact['uuid']}",
        json={"phone": "555-0100", "type": "both"},
        headers=headers,
    )
    assert updated.status_code == status.HTTP_200_OK
    assert updated.json()["data"]["phone"] == "555-0100"
    assert updated.json()["data"]["name"] == "Globex"

    deleted = await client.delete(f"{API}/Contacts/{client_contact['uuid']}", headers=headers)
    assert deleted.status_code == status.HTTP_200_OK
    again = await client.delete(f"{API}/Contacts/{client_contact['uuid']}", headers=headers)
    assert again.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.asyncio
async def test_contact_invalid_type_filter(client, company_a):
    response = await client.get(
        f"{API}/Contacts", params={"type": "partner"}, headers=company_a.headers()
    )

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert "type" in response.json()["data"]["error"]


@pytest.mark.asyncio
async def test_create_project_with_client_and_manager(client, company_a):
    headers = company_a.headers()
    globex = await _create_contact(client, headers, "Globex", "client")

    response = await client.post(
        f"{API}/Projects",
        json={
            "name": "Website Redesign",
            "client_uuid": globex["uuid"],
            "manager_uuid": str(company_a.manager.uuid),
            "status": "Active",
            "start_date": "2024-01-01",
            "end_date": "2024-03-31",
            "budget": 15000,
        },
        headers=headers,
    )

    assert response.status_code == status.HTTP_201_CREATED
    project = response.json()["data"]
    assert project["status"] == "active"
    assert project["client"]["uuid"] == globex["uuid"]
    assert project["manager"]["uuid"] == str(company_a.manager.uuid)
    assert project["budget"] == 15000


@pytest.mark.asyncio
async def test_project_manager_defaults_to_creating_pm(client, company_a):
    """
    Test: A project manager who omits manager_uuid manages the new project.
    """
    response = await client.post(
        f"{API}/Projects", json={"name": "PM owned"}, headers=company_a.headers("project_manager")
    )
    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["data"]["manager"]["uuid"] == str(company_a.manager.uuid)

    by_admin = await client.post(
        f"{API}/Projects", json={"name": "Admin owned"}, headers=company_a.headers()
    )
    assert by_admin.json()["data"]["manager"] is None


@pytest.mark.asyncio
async def test_project_rejects_vendor_as_client(client, company_a):
    headers = company_a.headers()
    vendor = await _create_contact(client, headers, "Parts Co", "vendor")

    response = await client.post(
        f"{API}/Projects", json={"name": "Bad client", "client_uuid": vendor["uuid"]}, headers=headers
    )

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    data = response.json()["data"]
    assert data["code"] == "INVALID_CLIENT_TYPE"
    assert "client_uuid" in data["error"]


@pytest.mark.asyncio
async def test_project_rejects_team_member_manager(client, company_a):
    response = await client.post(
        f"{API}/Projects",
        json={"name": "Bad manager", "manager_uuid": str(company_a.member.uuid)},
        headers=company_a.headers(),
    )

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert response.json()["data"]["code"] == "INVALID_MANAGER_ROLE"


@pytest.mark.asyncio
async def test_project_date_range(client, company_a):
    headers = company_a.headers()
    bad = await client.post(
        f"{API}/Projects",
        json={"name": "Backwards", "start_date": "2024-05-01", "end_date": "2024-04-01"},
        headers=headers,
    )
    assert bad.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert bad.json()["data"]["code"] == "INVALID_DATE_RANGE"
    assert "end_date" in bad.json()["data"]["error"]

    created = await client.post(
        f"{API}/Projects",
        json={"name": "Forwards", "start_date": "2024-05-01", "end_date": "2024-06-01"},
        headers=headers,
    )
    project_uuid = created.json()["data"]["uuid"]

    # Only the start moves; checked against the stored end date
    moved = await client.put(
        f"{API}/Projects/{project_uuid}", json={"start_date": "2024-07-01"}, headers=headers
    )
    assert moved.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    cleared = await client.put(
        f"{API}/Projects/{project_uuid}",
        json={"start_date": "2024-07-01", "end_date": None},
        headers=headers,
    )
    assert cleared.status_code == status.HTTP_200_OK
    assert cleared.json()["data"]["end_date"] is None


@pytest.mark.asyncio
async def test_project_list_filters(client, company_a):
    headers = company_a.headers()
    for name, project_status in (("Alpha", "active"), ("Beta", "completed"), ("Gamma", "planned")):
        await client.post(
            f"{API}/Projects", json={"name": name, "status": project_status}, headers=headers
        )

    response = await client.get(
        f"{API}/Projects", params={"status": "active,completed", "limit": 1}, headers=headers
    )
    body = response.json()
    assert body["pager"] == {"total": 2, "page": 1, "limit": 1}
    assert len(body["data"]) == 1

    bad_status = await client.get(f"{API}/Projects", params={"status": "archived"}, headers=headers)
    assert bad_status.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    unknown_client = await client.get(
        f"{API}/Projects", params={"client_uuid": str(uuid4())}, headers=headers
    )
    assert unknown_client.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert unknown_client.json()["data"]["code"] == "INVALID_CLIENT"


@pytest.mark.asyncio
async def test_team_member_reads_but_cannot_write_projects(client, company_a):
    headers = company_a.headers("team_member")

    listed = await client.get(f"{API}/Projects", headers=headers)
    assert listed.status_code == status.HTTP_200_OK

    created = await client.post(f"{API}/Projects", json={"name": "Nope"}, headers=headers)
    assert created.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.asyncio
async def test_delete_project_cascades_tasks(client, company_a):
    headers = company_a.headers()
    project = (await client.post(f"{API}/Projects", json={"name": "Doomed"}, headers=headers)).json()["data"]
    task = (
        await client.post(
            f"{API}/Tasks", json={"project_uuid": project["uuid"], "title": "Orphan?"}, headers=headers
        )
    ).json()["data"]

    deleted = await client.delete(f"{API}/Projects/{project['uuid']}", headers=headers)
    assert deleted.status_code == status.HTTP_200_OK

    gone = await client.get(f"{API}/Tasks/{task['uuid']}", headers=headers)
    assert gone.status_code == status.HTTP_404_NOT_FOUND
    missing = await client.delete(f"{API}/Projects/{uuid4()}", headers=headers)
    assert missing.status_code == status.HTTP_404_NOT_FOUND
