"""Custom Field Routes — manage the organization's asset form extensions.

Invariants:
    - Definitions are organization-scoped; names unique per organization
    - Names equal to a built-in asset field (or the image field) are rejected with 409,
      so a definition that would break the merged schema is never stored
    - Name and type are immutable after creation (stored values depend on them)
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from inventory.api.dependencies import get_organization
from inventory.api.presenters import custom_field_to_response
from inventory.core.domain_types import CustomFieldType, OrganizationId
from inventory.core.errors import ConflictError, ErrorContext, ResourceNotFoundError
from inventory.infrastructure.database import get_db
from inventory.models.custom_field import CustomField
from inventory.models.organization import Organization
from inventory.schemas.custom_field import (
    RESERVED_FIELD_NAMES, CustomFieldCreate, CustomFieldResponse, CustomFieldUpdate,
)
from inventory.services.custom_field_repository import CustomFieldRepository

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/custom-fields", tags=["custom-fields"])


@router.post(
    "", response_model=CustomFieldResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_custom_field(
    body: CustomFieldCreate,
    organization: Organization = Depends(get_organization),
    db: AsyncSession = Depends(get_db),
):
    """Create a custom field definition."""
    context = ErrorContext(
        organization_id=str(organization.id), entity="custom_field",
        field_name=body.name,
    )
    if body.name in RESERVED_FIELD_NAMES:
        raise ConflictError(f"'{body.name}' is a built-in asset field", context)
    repository = CustomFieldRepository(db)
    organization_id = OrganizationId(organization.id)
    if await repository.get_by_name(organization_id, body.name):
        raise ConflictError(f"Custom field '{body.name}' already exists", context)
    custom_field = await repository.add(CustomField(
        organization_id=organization.id,
        name=body.name,
        type=body.type.value,
        help_text=body.help_text,
        required=body.required,
        active=body.active,
        options=body.options,
    ))
    return custom_field_to_response(custom_field)


@router.get("", response_model=list[CustomFieldResponse])
async def list_custom_fields(
    active: bool | None = Query(None),
    organization: Organization = Depends(get_organization),
    db: AsyncSession = Depends(get_db),
):
    """List definitions in form order; ?active=true for the enforced set only."""
    rows = await CustomFieldRepository(db).list_all(
        OrganizationId(organization.id), active_only=bool(active),
    )
    if active is False:
        rows = [row for row in rows if not row.active]
    return [custom_field_to_response(row) for row in rows]


@router.patch("/{custom_field_id}", response_model=CustomFieldResponse)
async def update_custom_field(
    custom_field_id: UUID,
    body: CustomFieldUpdate,
    organization: Organization = Depends(get_organization),
    db: AsyncSession = Depends(get_db),
):
    """Edit help text, required flag, active flag or options."""
    custom_field = await CustomFieldRepository(db).get(
        OrganizationId(organization.id), custom_field_id,
    )
    if custom_field is None:
        raise ResourceNotFoundError("Custom field", str(custom_field_id))
    if body.options and custom_field.type.lower() != CustomFieldType.TEXT.value:
        raise HTTPException(
            status.HTTP_400_BAD_REQUEST,
            detail="Options are only supported on text fields",
        )

    # help_text may be cleared; the other columns are non-nullable
    changes = {
        attribute: value
        for attribute, value in body.model_dump(exclude_unset=True).items()
        if value is not None or attribute == "help_text"
    }
    for attribute, value in changes.items():
        setattr(custom_field, attribute, value)
    await db.commit()
    logger.info(
        f"Custom field '{custom_field.name}' updated: {', '.join(sorted(changes)) or 'no changes'}",
        extra={"organization_id": str(organization.id), "entity": "custom_field"},
    )
    return custom_field_to_response(custom_field)
