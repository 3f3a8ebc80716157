"""Unit tests for tenant-scoped UUID resolution."""

from uuid import uuid4

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from api.tenancy import TenancyContext
from models.contact import Contact
from models.project import Project
from models.task import Task
from repos import contacts_repo, projects_repo, tasks_repo
from services import references
from services.errors import ErrorCode, InvalidReferenceError


async def _contact(db_session: AsyncSession, company_id: int, name: str, type_: str) -> Contact:
    contact = await contacts_repo.create(db_session, Contact(company_id=company_id, name=name, type=type_))
    await db_session.commit()
    return contact


@pytest.mark.asyncio
async def test_absent_reference_resolves_to_none(db_session: AsyncSession, company_a):
    ctx = TenancyContext.from_user(company_a.admin)

    assert await references.resolve_project(db_session, ctx, None) is None
    assert await references.resolve_client(db_session, ctx, None) is None
    assert await references.resolve_user(db_session, ctx, None) is None
    assert references.id_of(None) is None


@pytest.mark.asyncio
async def test_other_company_project_is_unknown(db_session: AsyncSession, company_a, company_b):
    """Test: A UUID from another tenant fails exactly like a random one."""
    project_b = await projects_repo.create(
        db_session, Project(company_id=company_b.company.id, name="B only")
    )
    await db_session.commit()
    ctx = TenancyContext.from_user(company_a.admin)

    for project_uuid in (project_b.uuid, uuid4()):
        with pytest.raises(InvalidReferenceError) as exc_info:
            await references.resolve_project(db_session, ctx, project_uuid)
        assert exc_info.value.code == ErrorCode.INVALID_PROJECT
        assert exc_info.value.status_code == 422
        assert exc_info.value.payload() == {
            "code": "INVALID_PROJECT",
            "error": {"project_uuid": "Project not found"},
        }


@pytest.mark.asyncio
async def test_vendor_cannot_be_client(db_session: AsyncSession, company_a):
    ctx = TenancyContext.from_user(company_a.admin)
    vendor = await _contact(db_session, company_a.company.id, "Supplies Ltd", "vendor")

    with pytest.raises(InvalidReferenceError) as exc_info:
        await references.resolve_client(db_session, ctx, vendor.uuid)

    assert exc_info.value.code == ErrorCode.INVALID_CLIENT_TYPE
    assert exc_info.value.field == "client_uuid"

    # Filters accept any contact type
    resolved = await references.resolve_client(db_session, ctx, vendor.uuid, check_type=False)
    assert resolved.id == vendor.id


@pytest.mark.asyncio
async def test_both_contact_fits_either_side(db_session: AsyncSession, company_a):
    ctx = TenancyContext.from_user(company_a.admin)
    partner = await _contact(db_session, company_a.company.id, "Partner Co", "both")

    assert (await references.resolve_client(db_session, ctx, partner.uuid)).id == partner.id
    assert (await references.resolve_vendor(db_session, ctx, partner.uuid)).id == partner.id


@pytest.mark.asyncio
async def test_client_cannot_be_vendor(db_session: AsyncSession, company_a):
    ctx = TenancyContext.from_user(company_a.admin)
    client = await _contact(db_session, company_a.company.id, "Buyer Inc", "client")

    with pytest.raises(InvalidReferenceError) as exc_info:
        await references.resolve_vendor(db_session, ctx, client.uuid)

    assert exc_info.value.code == ErrorCode.INVALID_VENDOR_TYPE
    assert exc_info.value.field == "vendor_uuid"


@pytest.mark.asyncio
async def test_manager_role_is_checked(db_session: AsyncSession, company_a):
    ctx = TenancyContext.from_user(company_a.admin)

    manager = await references.resolve_manager(db_session, ctx, company_a.manager.uuid)
    assert manager.id == company_a.manager.id
    admin = await references.resolve_manager(db_session, ctx, company_a.admin.uuid)
    assert admin.id == company_a.admin.id

    with pytest.raises(InvalidReferenceError) as exc_info:
        await references.resolve_manager(db_session, ctx, company_a.member.uuid)
    assert exc_info.value.code == ErrorCode.INVALID_MANAGER_ROLE

    with pytest.raises(InvalidReferenceError) as exc_info:
        await references.resolve_manager(db_session, ctx, uuid4())
    assert exc_info.value.code == ErrorCode.INVALID_MANAGER


@pytest.mark.asyncio
async def test_assignee_error_names_assignee_field(db_session: AsyncSession, company_a):
    ctx = TenancyContext.from_user(company_a.admin)

    with pytest.raises(InvalidReferenceError) as exc_info:
        await references.resolve_user(db_session, ctx, uuid4(), code=ErrorCode.INVALID_ASSIGNEE)

    assert exc_info.value.field == "assignee_uuid"


@pytest.mark.asyncio
async def test_task_must_belong_to_project(db_session: AsyncSession, company_a):
    company_id = company_a.company.id
    ctx = TenancyContext.from_user(company_a.admin)
    first = await projects_repo.create(db_session, Project(company_id=company_id, name="First"))
    second = await projects_repo.create(db_session, Project(company_id=company_id, name="Second"))
    task = await tasks_repo.create(db_session, Task(company_id=company_id, project_id=first.id, title="Design"))
    await db_session.commit()

    resolved = await references.resolve_task(db_session, ctx, task.uuid, project_id=first.id)
    assert resolved.id == task.id

    with pytest.raises(InvalidReferenceError) as exc_info:
        await references.resolve_task(db_session, ctx, task.uuid, project_id=second.id)
    assert exc_info.value.code == ErrorCode.TASK_NOT_IN_PROJECT
    assert exc_info.value.field == "task_uuid"


@pytest.mark.asyncio
async def test_assignment_users_resolve_in_request_order(db_session: AsyncSession, company_a):
    ctx = TenancyContext.from_user(company_a.admin)

    user_ids = await references.resolve_assignment_users(
        db_session,
        ctx,
        [company_a.finance.uuid, company_a.member.uuid, company_a.finance.uuid],
    )

    assert user_ids == [company_a.finance.id, company_a.member.id]
