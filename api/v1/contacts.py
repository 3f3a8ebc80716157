"""Contact endpoints (clients and vendors) with tenant isolation."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import (
    Pagination,
    get_db,
    get_tenancy_context,
    pagination_params,
    parse_enum_list,
    require_roles,
)
from api.responses import ApiResponse, envelope, paged
from api.tenancy import TenancyContext
from models.contact import ContactCreate, ContactResponse, ContactUpdate
from models.enums import ContactType, Role
from services import contacts_service
from services.errors import DomainError

logger = logging.getLogger(__name__)

router = APIRouter()

can_write = require_roles(Role.ADMIN, Role.PROJECT_MANAGER, Role.FINANCE)


@router.get("/Contacts", response_model=ApiResponse[list[ContactResponse]])
async def list_contacts(
    type: str | None = Query(None),
    search: str | None = Query(None),
    pagination: Pagination = Depends(pagination_params),
    tenancy: TenancyContext = Depends(get_tenancy_context),
    db: AsyncSession = Depends(get_db),
):
    try:
        rows, total = await contacts_service.list_contacts(
            db,
            membership_ctx=tenancy,
            types=parse_enum_list(type, ContactType, "type"),
            search=search,
            offset=pagination.offset,
            limit=pagination.limit,
        )
        return paged(
            [ContactResponse.model_validate(contact) for contact in rows],
            total=total,
            page=pagination.page,
            limit=pagination.limit,
            message="Contacts retrieved",
        )
    except (HTTPException, DomainError):
        raise
    except Exception:
        logger.exception("Failed to list contacts for company %s", tenancy.company_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch contacts",
        )


@router.get("/Contacts/{contact_uuid}", response_model=ApiResponse[ContactResponse])
async def get_contact(
    contact_uuid: UUID,
    tenancy: TenancyContext = Depends(get_tenancy_context),
    db: AsyncSession = Depends(get_db),
):
    try:
        contact = await contacts_service.get_contact(
            db, membership_ctx=tenancy, contact_uuid=contact_uuid
        )
        return envelope(ContactResponse.model_validate(contact), message="Contact retrieved")
    except (HTTPException, DomainError):
        raise
    except Exception:
        logger.exception("Failed to fetch contact %s", contact_uuid)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch contact",
        )


@router.post(
    "/Contacts",
    response_model=ApiResponse[ContactResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_contact(
    payload: ContactCreate,
    tenancy: TenancyContext = Depends(can_write),
    db: AsyncSession = Depends(get_db),
):
    try:
        contact = await contacts_service.create_contact(db, membership_ctx=tenancy, payload=payload)
        return envelope(
            ContactResponse.model_validate(contact),
            message="Contact created",
            status_code=status.HTTP_201_CREATED,
        )
    except (HTTPException, DomainError):
        raise
    except Exception:
        logger.exception("Failed to create contact in company %s", tenancy.company_id)
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create contact",
        )


@router.put("/Contacts/{contact_uuid}", response_model=ApiResponse[ContactResponse])
async def update_contact(
    contact_uuid: UUID,
    payload: ContactUpdate,
    tenancy: TenancyContext = Depends(can_write),
    db: AsyncSession = Depends(get_db),
):
    """Partially update a contact. Only provided fields change."""
    try:
        contact = await contacts_service.update_contact(
            db, membership_ctx=tenancy, contact_uuid=contact_uuid, payload=payload
        )
        return envelope(ContactResponse.model_validate(contact), message="Contact updated")
    except (HTTPException, DomainError):
        raise
    except Exception:
        logger.exception("Failed to update contact %s", contact_uuid)
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update contact",
        )


@router.delete("/Contacts/{contact_uuid}", response_model=ApiResponse[None])
async def delete_contact(
    contact_uuid: UUID,
    tenancy: TenancyContext = Depends(can_write),
    db: AsyncSession = Depends(get_db),
):
    """
    Delete a contact.

    Projects and documents referencing it keep existing with the reference cleared.
    """
    try:
        await contacts_service.delete_contact(db, membership_ctx=tenancy, contact_uuid=contact_uuid)
        return envelope(message="Contact deleted")
    except (HTTPException, DomainError):
        raise
    except Exception:
        logger.exception("Failed to delete contact %s", contact_uuid)
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete contact",
        )
