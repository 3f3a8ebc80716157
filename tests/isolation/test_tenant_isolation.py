"""
Tenant isolation tests.

Company B must never see, change or reference rows of company A. A foreign
UUID in a path is a 404; a foreign UUID in a payload or filter is a 422,
exactly like a UUID that does not exist at all.
"""

import pytest
from fastapi import status

import config

API = f"{config.settings.API_PREFIX}/v1"


async def _seed_company_a(client, company_a) -> dict:
    """Create one row of every entity in company A and return their UUIDs."""
    headers = company_a.headers()

    async def post(path, payload):
        response = await client.post(f"{API}/{path}", json=payload, headers=headers)
        assert response.status_code == status.HTTP_201_CREATED, response.text
        return response.json()["data"]["uuid"]

    contact = await post("Contacts", {"name": "A Partner", "type": "both"})
    project = await post("Projects", {"name": "A Project", "client_uuid": contact})
    task = await post("Tasks", {"project_uuid": project, "title": "A Task"})
    sales_order = await post("SalesOrders", {"project_uuid": project, "date": "2024-01-10"})
    purchase_order = await post("PurchaseOrders", {"vendor_uuid": contact, "date": "2024-01-10"})
    return {
        "Contacts": contact,
        "Projects": project,
        "Tasks": task,
        "Timesheets": await post(
            "Timesheets",
            {"project_uuid": project, "user_uuid": str(company_a.member.uuid), "date": "2024-01-10", "hours": 1},
        ),
        "SalesOrders": sales_order,
        "Invoices": await post("Invoices", {"sales_order_uuid": sales_order, "date": "2024-01-11"}),
        "PurchaseOrders": purchase_order,
        "VendorBills": await post("VendorBills", {"purchase_order_uuid": purchase_order, "date": "2024-01-11"}),
        "Expenses": await post("Expenses", {"project_uuid": project, "description": "Lunch", "amount": 12, "date": "2024-01-12"}),
    }


@pytest.mark.asyncio
async def test_lists_are_scoped_to_company(client, company_a, company_b):
    """
    Test: Company B lists nothing after company A creates one of everything.
    """
    rows = await _seed_company_a(client, company_a)

    for path in rows:
        own = await client.get(f"{API}/{path}", headers=company_a.headers())
        assert own.json()["pager"]["total"] == 1, path

        other = await client.get(f"{API}/{path}", headers=company_b.headers())
        assert other.status_code == status.HTTP_200_OK
        assert other.json()["data"] == [], path
        assert other.json()["pager"]["total"] == 0, path


@pytest.mark.asyncio
async def test_foreign_uuid_in_path_is_not_found(client, company_a, company_b):
    rows = await _seed_company_a(client, company_a)
    headers = company_b.headers()

    for path, row_uuid in rows.items():
        url = f"{API}/{path}/{row_uuid}"
        assert (await client.get(url, headers=headers)).status_code == status.HTTP_404_NOT_FOUND, path
        assert (await client.put(url, json={}, headers=headers)).status_code == status.HTTP_404_NOT_FOUND, path
        assert (await client.delete(url, headers=headers)).status_code == status.HTTP_404_NOT_FOUND, path

    # Nothing was removed from company A
    for path, row_uuid in rows.items():
        response = await client.get(f"{API}/{path}/{row_uuid}", headers=company_a.headers())
        assert response.status_code == status.HTTP_200_OK, path


@pytest.mark.asyncio
async def test_foreign_uuid_in_payload_is_invalid(client, company_a, company_b):
    rows = await _seed_company_a(client, company_a)
    headers = company_b.headers()

    task = await client.post(
        f"{API}/Tasks", json={"project_uuid": rows["Projects"], "title": "Steal"}, headers=headers
    )
    assert task.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert task.json()["data"]["code"] == "INVALID_PROJECT"

    project = await client.post(
        f"{API}/Projects",
        json={"name": "Borrowed", "manager_uuid": str(company_a.manager.uuid)},
        headers=headers,
    )
    assert project.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert project.json()["data"]["code"] == "INVALID_MANAGER"

    invoice = await client.post(
        f"{API}/Invoices",
        json={"date": "2024-02-01", "sales_order_uuid": rows["SalesOrders"]},
        headers=headers,
    )
    assert invoice.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert invoice.json()["data"]["code"] == "INVALID_SALES_ORDER"

    bill = await client.post(
        f"{API}/VendorBills",
        json={"date": "2024-02-01", "vendor_uuid": rows["Contacts"]},
        headers=headers,
    )
    assert bill.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert bill.json()["data"]["code"] == "INVALID_VENDOR"


@pytest.mark.asyncio
async def test_foreign_uuid_in_filter_is_invalid(client, company_a, company_b):
    rows = await _seed_company_a(client, company_a)

    response = await client.get(
        f"{API}/Tasks", params={"project_uuid": rows["Projects"]}, headers=company_b.headers()
    )

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert response.json()["data"]["code"] == "INVALID_PROJECT"


@pytest.mark.asyncio
async def test_admin_cannot_reach_other_company_users(client, company_a, company_b):
    url = f"{API}/Auth/users/{company_a.member.uuid}"
    headers = company_b.headers()

    assert (await client.get(url, headers=headers)).status_code == status.HTTP_404_NOT_FOUND
    assert (await client.put(url, json={"name": "Hijacked"}, headers=headers)).status_code == status.HTTP_404_NOT_FOUND
    assert (await client.delete(url, headers=headers)).status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.asyncio
async def test_dashboard_ignores_other_companies(client, company_a, company_b):
    await _seed_company_a(client, company_a)

    response = await client.get(f"{API}/Analytics/dashboard", headers=company_b.headers())

    data = response.json()["data"]
    assert all(point["active"] == 0 for point in data["project_trends"])
    assert data["resource_utilization"][0]["value"] == 4
