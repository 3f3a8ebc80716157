"""
Resolution of public UUIDs to internal ids.

Every lookup is scoped to the caller's company, so a UUID that belongs to
another tenant behaves exactly like an unknown one. Each resolver returns
None for an absent reference and raises InvalidReferenceError (422, naming
the request field) for a present but unresolvable one. Services call these
before mutating anything.
"""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from api.tenancy import TenancyContext
from models.contact import Contact
from models.enums import MANAGER_ROLES, ContactType
from models.project import Project
from models.purchase_order import PurchaseOrder
from models.sales_order import SalesOrder
from models.task import Task
from models.user import User
from repos import (
    contacts_repo,
    projects_repo,
    purchase_orders_repo,
    sales_orders_repo,
    tasks_repo,
    users_repo,
)
from services.errors import ErrorCode, InvalidReferenceError


async def resolve_project(
    session: AsyncSession,
    ctx: TenancyContext,
    project_uuid: UUID | None,
) -> Project | None:
    if project_uuid is None:
        return None
    project = await projects_repo.get_by_uuid(
        session, company_id=ctx.company_id, project_uuid=project_uuid
    )
    if not project:
        raise InvalidReferenceError(ErrorCode.INVALID_PROJECT)
    return project


async def resolve_client(
    session: AsyncSession,
    ctx: TenancyContext,
    client_uuid: UUID | None,
    *,
    check_type: bool = True,
) -> Contact | None:
    """Resolve a contact used as a client. Pure vendors are rejected."""
    if client_uuid is None:
        return None
    contact = await contacts_repo.get_by_uuid(
        session, company_id=ctx.company_id, contact_uuid=client_uuid
    )
    if not contact:
        raise InvalidReferenceError(ErrorCode.INVALID_CLIENT)
    if check_type and contact.type == ContactType.VENDOR.value:
        raise InvalidReferenceError(ErrorCode.INVALID_CLIENT_TYPE)
    return contact


async def resolve_vendor(
    session: AsyncSession,
    ctx: TenancyContext,
    vendor_uuid: UUID | None,
    *,
    check_type: bool = True,
) -> Contact | None:
    """Resolve a contact used as a vendor. Pure clients are rejected."""
    if vendor_uuid is None:
        return None
    contact = await contacts_repo.get_by_uuid(
        session, company_id=ctx.company_id, contact_uuid=vendor_uuid
    )
    if not contact:
        raise InvalidReferenceError(ErrorCode.INVALID_VENDOR)
    if check_type and contact.type == ContactType.CLIENT.value:
        raise InvalidReferenceError(ErrorCode.INVALID_VENDOR_TYPE)
    return contact


async def resolve_manager(
    session: AsyncSession,
    ctx: TenancyContext,
    manager_uuid: UUID | None,
    *,
    check_role: bool = True,
) -> User | None:
    """Resolve a project manager. Only admins and project managers qualify."""
    if manager_uuid is None:
        return None
    user = await users_repo.get_by_uuid(session, company_id=ctx.company_id, user_uuid=manager_uuid)
    if not user:
        raise InvalidReferenceError(ErrorCode.INVALID_MANAGER)
    if check_role and user.role not in MANAGER_ROLES:
        raise InvalidReferenceError(ErrorCode.INVALID_MANAGER_ROLE)
    return user


async def resolve_user(
    session: AsyncSession,
    ctx: TenancyContext,
    user_uuid: UUID | None,
    *,
    code: ErrorCode = ErrorCode.INVALID_USER,
    field: str | None = None,
) -> User | None:
    """Resolve any user of the company; code and field name the offending input."""
    if user_uuid is None:
        return None
    user = await users_repo.get_by_uuid(session, company_id=ctx.company_id, user_uuid=user_uuid)
    if not user:
        raise InvalidReferenceError(code, field=field)
    return user


async def resolve_task(
    session: AsyncSession,
    ctx: TenancyContext,
    task_uuid: UUID | None,
    *,
    project_id: int | None = None,
) -> Task | None:
    """Resolve a task; when project_id is given the task must belong to that project."""
    if task_uuid is None:
        return None
    task = await tasks_repo.get_by_uuid(session, company_id=ctx.company_id, task_uuid=task_uuid)
    if not task:
        raise InvalidReferenceError(ErrorCode.INVALID_TASK)
    if project_id is not None and task.project_id != project_id:
        raise InvalidReferenceError(ErrorCode.TASK_NOT_IN_PROJECT)
    return task


async def resolve_assignment_users(
    session: AsyncSession,
    ctx: TenancyContext,
    user_uuids: list[UUID],
) -> list[int]:
    """
    Resolve a collaborator set to distinct user ids, in request order.

    Fails as a whole if any UUID is unknown within the company.
    """
    distinct_uuids = list(dict.fromkeys(user_uuids))
    users = await users_repo.get_by_uuids(
        session, company_id=ctx.company_id, user_uuids=distinct_uuids
    )
    ids_by_uuid = {user.uuid: user.id for user in users}
    if len(ids_by_uuid) != len(distinct_uuids):
        raise InvalidReferenceError(ErrorCode.INVALID_ASSIGNMENT_USERS)
    return [ids_by_uuid[user_uuid] for user_uuid in distinct_uuids]


async def resolve_sales_order(
    session: AsyncSession,
    ctx: TenancyContext,
    sales_order_uuid: UUID | None,
) -> SalesOrder | None:
    if sales_order_uuid is None:
        return None
    sales_order = await sales_orders_repo.get_by_uuid(
        session, company_id=ctx.company_id, sales_order_uuid=sales_order_uuid
    )
    if not sales_order:
        raise InvalidReferenceError(ErrorCode.INVALID_SALES_ORDER)
    return sales_order


async def resolve_purchase_order(
    session: AsyncSession,
    ctx: TenancyContext,
    purchase_order_uuid: UUID | None,
) -> PurchaseOrder | None:
    if purchase_order_uuid is None:
        return None
    purchase_order = await purchase_orders_repo.get_by_uuid(
        session, company_id=ctx.company_id, purchase_order_uuid=purchase_order_uuid
    )
    if not purchase_order:
        raise InvalidReferenceError(ErrorCode.INVALID_PURCHASE_ORDER)
    return purchase_order


def id_of(entity) -> int | None:
    """Internal id of a resolved entity, or None."""
    return entity.id if entity is not None else None
