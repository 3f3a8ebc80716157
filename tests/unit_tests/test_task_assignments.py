"""Unit tests for transactional task assignment replacement."""

from uuid import uuid4

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from api.tenancy import TenancyContext
from models.project import Project
from models.task import TaskAssignment, TaskCreate, TaskUpdate
from repos import projects_repo, tasks_repo
from services import tasks_service
from services.errors import ErrorCode, InvalidReferenceError


async def _assignment_count(db_session: AsyncSession, task_id: int) -> int:
    result = await db_session.execute(
        select(func.count()).select_from(TaskAssignment).where(TaskAssignment.task_id == task_id)
    )
    return result.scalar_one()


async def _project(db_session: AsyncSession, company_a) -> Project:
    project = await projects_repo.create(
        db_session, Project(company_id=company_a.company.id, name="Launch")
    )
    await db_session.commit()
    return project


@pytest.mark.asyncio
async def test_create_task_with_assignments(db_session: AsyncSession, company_a):
    """Test: Task create writes the collaborator set in the same transaction."""
    project = await _project(db_session, company_a)
    ctx = TenancyContext.from_user(company_a.manager)

    task = await tasks_service.create_task(
        db_session,
        membership_ctx=ctx,
        payload=TaskCreate(
            project_uuid=project.uuid,
            title="Write brief",
            assigned_user_uuids=[company_a.member.uuid, company_a.finance.uuid],
        ),
    )

    assert [a.user.uuid for a in task.assignments] == [company_a.member.uuid, company_a.finance.uuid]
    assert task.status == "todo"
    assert task.priority == "medium"


@pytest.mark.asyncio
async def test_replace_is_idempotent(db_session: AsyncSession, company_a):
    """Test: Replacing with the same set twice leaves exactly one row per user."""
    project = await _project(db_session, company_a)
    ctx = TenancyContext.from_user(company_a.admin)
    task = await tasks_service.create_task(
        db_session,
        membership_ctx=ctx,
        payload=TaskCreate(project_uuid=project.uuid, title="Review"),
    )
    users = [company_a.member.uuid, company_a.manager.uuid]

    for _ in range(2):
        await tasks_service.update_task(
            db_session,
            membership_ctx=ctx,
            task_uuid=task.uuid,
            payload=TaskUpdate(assigned_user_uuids=users),
        )

    assert await _assignment_count(db_session, task.id) == 2


@pytest.mark.asyncio
async def test_duplicate_uuids_collapse(db_session: AsyncSession, company_a):
    project = await _project(db_session, company_a)
    ctx = TenancyContext.from_user(company_a.admin)

    task = await tasks_service.create_task(
        db_session,
        membership_ctx=ctx,
        payload=TaskCreate(
            project_uuid=project.uuid,
            title="Dedupe",
            assigned_user_uuids=[company_a.member.uuid, company_a.member.uuid],
        ),
    )

    assert await _assignment_count(db_session, task.id) == 1


@pytest.mark.asyncio
async def test_unknown_user_leaves_assignments_unchanged(db_session: AsyncSession, company_a):
    """Test: One unresolvable UUID fails the whole update and nothing changes."""
    project = await _project(db_session, company_a)
    ctx = TenancyContext.from_user(company_a.admin)
    task = await tasks_service.create_task(
        db_session,
        membership_ctx=ctx,
        payload=TaskCreate(
            project_uuid=project.uuid,
            title="Keep me",
            assigned_user_uuids=[company_a.member.uuid],
        ),
    )

    with pytest.raises(InvalidReferenceError) as exc_info:
        await tasks_service.update_task(
            db_session,
            membership_ctx=ctx,
            task_uuid=task.uuid,
            payload=TaskUpdate(
                title="Renamed",
                assigned_user_uuids=[company_a.finance.uuid, uuid4()],
            ),
        )

    assert exc_info.value.code == ErrorCode.INVALID_ASSIGNMENT_USERS
    assert exc_info.value.field == "assigned_user_uuids"

    reloaded = await tasks_repo.get_by_id(db_session, company_id=company_a.company.id, task_id=task.id)
    assert reloaded.title == "Keep me"
    assert [a.user_id for a in reloaded.assignments] == [company_a.member.id]


@pytest.mark.asyncio
async def test_user_from_other_company_is_rejected(db_session: AsyncSession, company_a, company_b):
    project = await _project(db_session, company_a)
    ctx = TenancyContext.from_user(company_a.admin)

    with pytest.raises(InvalidReferenceError) as exc_info:
        await tasks_service.create_task(
            db_session,
            membership_ctx=ctx,
            payload=TaskCreate(
                project_uuid=project.uuid,
                title="Cross tenant",
                assigned_user_uuids=[company_b.member.uuid],
            ),
        )

    assert exc_info.value.code == ErrorCode.INVALID_ASSIGNMENT_USERS
    assert await db_session.scalar(select(func.count()).select_from(TaskAssignment)) == 0


@pytest.mark.asyncio
async def test_empty_list_clears_and_omitted_keeps(db_session: AsyncSession, company_a):
    project = await _project(db_session, company_a)
    ctx = TenancyContext.from_user(company_a.admin)
    task = await tasks_service.create_task(
        db_session,
        membership_ctx=ctx,
        payload=TaskCreate(
            project_uuid=project.uuid,
            title="Clear me",
            assigned_user_uuids=[company_a.member.uuid],
        ),
    )

    kept = await tasks_service.update_task(
        db_session, membership_ctx=ctx, task_uuid=task.uuid, payload=TaskUpdate(priority="high")
    )
    assert len(kept.assignments) == 1
    assert kept.priority == "high"

    cleared = await tasks_service.update_task(
        db_session, membership_ctx=ctx, task_uuid=task.uuid, payload=TaskUpdate(assigned_user_uuids=[])
    )
    assert cleared.assignments == []

    await tasks_service.update_task(
        db_session,
        membership_ctx=ctx,
        task_uuid=task.uuid,
        payload=TaskUpdate(assigned_user_uuids=[company_a.member.uuid]),
    )
    nulled = await tasks_service.update_task(
        db_session, membership_ctx=ctx, task_uuid=task.uuid, payload=TaskUpdate(assigned_user_uuids=None)
    )
    assert nulled.assignments == []
