"""Organizations — create and read tenants.

Invariants:
    - Not tenant-scoped themselves: no X-Organization-Id needed
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from inventory.core.errors import ResourceNotFoundError
from inventory.infrastructure.database import get_db
from inventory.models.organization import Organization
from inventory.schemas.catalog import OrganizationCreate

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/organizations", tags=["organizations"])


def _organization_to_dict(organization: Organization) -> dict:
    return {
        "id": str(organization.id),
        "name": organization.name,
        "created_at": organization.created_at.isoformat(),
    }


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_organization(
    body: OrganizationCreate, db: AsyncSession = Depends(get_db),
):
    organization = Organization(name=body.name)
    db.add(organization)
    await db.commit()
    logger.info(
        f"Organization '{organization.name}' created",
        extra={"organization_id": str(organization.id)},
    )
    return _organization_to_dict(organization)


@router.get("/{organization_id}")
async def get_organization_detail(
    organization_id: UUID, db: AsyncSession = Depends(get_db),
):
    organization = await db.get(Organization, organization_id)
    if organization is None:
        raise ResourceNotFoundError("Organization", str(organization_id))
    return _organization_to_dict(organization)
