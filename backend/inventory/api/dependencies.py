"""Request Dependencies — resolve the calling organization from the request.

Invariants:
    - Every tenant-scoped route depends on get_organization
    - Missing or malformed X-Organization-Id -> 400; unknown organization -> 404

Design Decisions:
    - Header over auth/session: identity and sessions are out of scope for this
      service; an upstream gateway sets the header
"""

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from inventory.core.errors import MissingOrganizationError, ResourceNotFoundError
from inventory.infrastructure.database import get_db
from inventory.models.organization import Organization
from inventory.services.references import parse_uuid


async def get_organization(
    x_organization_id: str | None = Header(None),
    db: AsyncSession = Depends(get_db),
) -> Organization:
    if not x_organization_id:
        raise MissingOrganizationError("X-Organization-Id header is required")
    key = parse_uuid(x_organization_id)
    if key is None:
        raise MissingOrganizationError("X-Organization-Id must be a UUID")
    organization = await db.get(Organization, key)
    if organization is None:
        raise ResourceNotFoundError("Organization", x_organization_id)
    return organization
