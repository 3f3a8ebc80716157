"""Integration tests for tasks, task assignments and timesheets."""

from uuid import uuid4

import pytest
from fastapi import status

import config

API = f"{config.settings.API_PREFIX}/v1"


async def _project(client, headers, name="Platform"):
    response = await client.post(f"{API}/Projects", json={"name": name}, headers=headers)
    assert response.status_code == status.HTTP_201_CREATED
    return response.json()["data"]


async def _task(client, headers, project_uuid, **fields):
    response = await client.post(
        f"{API}/Tasks", json={"project_uuid": project_uuid, "title": "Task", **fields}, headers=headers
    )
    assert response.status_code == status.HTTP_201_CREATED, response.text
    return response.json()["data"]


@pytest.mark.asyncio
async def test_create_task_with_collaborators(client, company_a):
    headers = company_a.headers("project_manager")
    project = await _project(client, headers)

    task = await _task(
        client,
        headers,
        project["uuid"],
        title="Build API",
        priority="HIGH",
        assignee_uuid=str(company_a.member.uuid),
        due_date="2024-09-30",
        assigned_user_uuids=[str(company_a.member.uuid), str(company_a.finance.uuid)],
    )

    assert task["priority"] == "high"
    assert task["status"] == "todo"
    assert task["project"]["uuid"] == project["uuid"]
    assert task["assignee"]["uuid"] == str(company_a.member.uuid)
    assert [a["user"]["uuid"] for a in task["assignments"]] == [
        str(company_a.member.uuid),
        str(company_a.finance.uuid),
    ]


@pytest.mark.asyncio
async def test_update_task_replaces_collaborators(client, company_a):
    """
    Test: assigned_user_uuids replaces the set; a bad UUID changes nothing.
    """
    headers = company_a.headers()
    project = await _project(client, headers)
    task = await _task(
        client, headers, project["uuid"], assigned_user_uuids=[str(company_a.member.uuid)]
    )
    url = f"{API}/Tasks/{task['uuid']}"

    failed = await client.put(
        url,
        json={"status": "done", "assigned_user_uuids": [str(company_a.finance.uuid), str(uuid4())]},
        headers=headers,
    )
    assert failed.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert failed.json()["data"]["code"] == "INVALID_ASSIGNMENT_USERS"

    unchanged = (await client.get(url, headers=headers)).json()["data"]
    assert unchanged["status"] == "todo"
    assert [a["user"]["uuid"] for a in unchanged["assignments"]] == [str(company_a.member.uuid)]

    replaced = await client.put(
        url,
        json={"status": "in_progress", "assigned_user_uuids": [str(company_a.finance.uuid)]},
        headers=headers,
    )
    assert replaced.status_code == status.HTTP_200_OK
    data = replaced.json()["data"]
    assert data["status"] == "in_progress"
    assert [a["user"]["uuid"] for a in data["assignments"]] == [str(company_a.finance.uuid)]


@pytest.mark.asyncio
async def test_task_filters(client, company_a):
    headers = company_a.headers()
    project = await _project(client, headers)
    await _task(client, headers, project["uuid"], title="Write docs", status="review")
    await _task(
        client, headers, project["uuid"], title="Fix bug", priority="high",
        assignee_uuid=str(company_a.member.uuid),
    )

    by_status = await client.get(f"{API}/Tasks", params={"status": "review"}, headers=headers)
    assert [t["title"] for t in by_status.json()["data"]] == ["Write docs"]

    by_assignee = await client.get(
        f"{API}/Tasks", params={"assignee_uuid": str(company_a.member.uuid)}, headers=headers
    )
    assert [t["title"] for t in by_assignee.json()["data"]] == ["Fix bug"]

    by_search = await client.get(f"{API}/Tasks", params={"search": "DOCS"}, headers=headers)
    assert by_search.json()["pager"]["total"] == 1

    bad_priority = await client.get(f"{API}/Tasks", params={"priority": "urgent"}, headers=headers)
    assert bad_priority.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


@pytest.mark.asyncio
async def test_task_requires_known_project(client, company_a):
    response = await client.post(
        f"{API}/Tasks", json={"project_uuid": str(uuid4()), "title": "Lost"}, headers=company_a.headers()
    )

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert response.json()["data"]["error"] == {"project_uuid": "Project not found"}


@pytest.mark.asyncio
async def test_team_member_cannot_create_tasks(client, company_a):
    project = await _project(client, company_a.headers())

    response = await client.post(
        f"{API}/Tasks",
        json={"project_uuid": project["uuid"], "title": "Sneaky"},
        headers=company_a.headers("team_member"),
    )

    assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.asyncio
async def test_log_time_defaults_cost_rate(client, company_a):
    """
    Test: Any role may log time; cost_rate falls back to the user's hourly rate.
    """
    project = await _project(client, company_a.headers())
    task = await _task(client, company_a.headers(), project["uuid"])

    response = await client.post(
        f"{API}/Timesheets",
        json={
            "project_uuid": project["uuid"],
            "task_uuid": task["uuid"],
            "user_uuid": str(company_a.member.uuid),
            "date": "2024-04-02",
            "hours": 3.5,
        },
        headers=company_a.headers("team_member"),
    )

    assert response.status_code == status.HTTP_201_CREATED
    entry = response.json()["data"]
    assert entry["cost_rate"] == 50
    assert entry["cost_total"] == 175
    assert entry["billable"] is True
    assert entry["task"]["uuid"] == task["uuid"]


@pytest.mark.asyncio
async def test_timesheet_task_must_match_project(client, company_a):
    headers = company_a.headers()
    first = await _project(client, headers, "First")
    second = await _project(client, headers, "Second")
    task = await _task(client, headers, first["uuid"])

    response = await client.post(
        f"{API}/Timesheets",
        json={
            "project_uuid": second["uuid"],
            "task_uuid": task["uuid"],
            "user_uuid": str(company_a.member.uuid),
            "date": "2024-04-02",
            "hours": 1,
        },
        headers=headers,
    )

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert response.json()["data"]["code"] == "TASK_NOT_IN_PROJECT"


@pytest.mark.asyncio
async def test_timesheet_hours_bounds(client, company_a):
    project = await _project(client, company_a.headers())

    response = await client.post(
        f"{API}/Timesheets",
        json={
            "project_uuid": project["uuid"],
            "user_uuid": str(company_a.member.uuid),
            "date": "2024-04-02",
            "hours": 25,
        },
        headers=company_a.headers(),
    )

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert "hours" in response.json()["data"]["error"]


@pytest.mark.asyncio
async def test_timesheet_edit_requires_role(client, company_a):
    headers = company_a.headers()
    project = await _project(client, headers)
    entry = (
        await client.post(
            f"{API}/Timesheets",
            json={
                "project_uuid": project["uuid"],
                "user_uuid": str(company_a.member.uuid),
                "date": "2024-04-02",
                "hours": 2,
                "cost_rate": 80,
            },
            headers=headers,
        )
    ).json()["data"]
    url = f"{API}/Timesheets/{entry['uuid']}"

    forbidden = await client.put(url, json={"hours": 4}, headers=company_a.headers("team_member"))
    assert forbidden.status_code == status.HTTP_403_FORBIDDEN

    updated = await client.put(
        url, json={"hours": 4, "billable": False}, headers=company_a.headers("finance")
    )
    assert updated.status_code == status.HTTP_200_OK
    assert updated.json()["data"]["cost_total"] == 320
    assert updated.json()["data"]["billable"] is False

    listed = await client.get(
        f"{API}/Timesheets",
        params={"billable": "false", "date_from": "2024-04-01", "date_to": "2024-04-30"},
        headers=headers,
    )
    assert listed.json()["pager"]["total"] == 1


@pytest.mark.asyncio
async def test_task_update_keeps_project(client, company_a):
    """
    Test: A task cannot be moved, so logged time stays on the task's project.
    """
    headers = company_a.headers()
    first = await _project(client, headers, "First")
    second = await _project(client, headers, "Second")
    task = await _task(client, headers, first["uuid"])
    entry = (
        await client.post(
            f"{API}/Timesheets",
            json={
                "project_uuid": first["uuid"],
                "task_uuid": task["uuid"],
                "user_uuid": str(company_a.member.uuid),
                "date": "2024-04-02",
                "hours": 1,
            },
            headers=headers,
        )
    ).json()["data"]

    updated = await client.put(
        f"{API}/Tasks/{task['uuid']}",
        json={"project_uuid": second["uuid"], "title": "Renamed"},
        headers=headers,
    )
    assert updated.status_code == status.HTTP_200_OK
    assert updated.json()["data"]["title"] == "Renamed"
    assert updated.json()["data"]["project"]["uuid"] == first["uuid"]

    logged = (await client.get(f"{API}/Timesheets/{entry['uuid']}", headers=headers)).json()["data"]
    assert logged["project"]["uuid"] == first["uuid"]
    assert logged["task"]["uuid"] == task["uuid"]


@pytest.mark.asyncio
async def test_null_collaborators_clears_set(client, company_a):
    headers = company_a.headers()
    project = await _project(client, headers)
    task = await _task(
        client, headers, project["uuid"], assigned_user_uuids=[str(company_a.member.uuid)]
    )

    response = await client.put(
        f"{API}/Tasks/{task['uuid']}", json={"assigned_user_uuids": None}, headers=headers
    )

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["data"]["assignments"] == []


@pytest.mark.asyncio
async def test_timesheet_hours_below_storage_precision(client, company_a):
    project = await _project(client, company_a.headers())

    response = await client.post(
        f"{API}/Timesheets",
        json={
            "project_uuid": project["uuid"],
            "user_uuid": str(company_a.member.uuid),
            "date": "2024-04-02",
            "hours": 0.001,
        },
        headers=company_a.headers(),
    )

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert "hours" in response.json()["data"]["error"]
