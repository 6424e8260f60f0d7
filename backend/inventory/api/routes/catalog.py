"""Catalog Routes — categories, locations, tags and team members of an organization.

Invariants:
    - Every row created and listed here is scoped by the caller's organization
    - Names are unique per organization; duplicates -> 409

Design Decisions:
    - One module for the four lookup tables: identical create/list shape, and the
      asset and booking forms only ever reference them by id
"""

import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from inventory.api.dependencies import get_organization
from inventory.core.errors import ConflictError, ErrorContext
from inventory.infrastructure.database import get_db
from inventory.models.category import Category
from inventory.models.location import Location
from inventory.models.organization import Organization
from inventory.models.tag import Tag
from inventory.models.team_member import TeamMember
from inventory.schemas.catalog import (
    CategoryCreate, LocationCreate, NamedCreate, TeamMemberCreate,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1", tags=["catalog"])


async def _ensure_unique_name(db: AsyncSession, model, organization: Organization, name: str):
    result = await db.execute(
        select(func.count())
        .select_from(model)
        .where(model.organization_id == organization.id)
        .where(func.lower(model.name) == name.lower()),
    )
    if result.scalar_one():
        raise ConflictError(
            f"{model.__name__} '{name}' already exists",
            ErrorContext(organization_id=str(organization.id), entity=model.__tablename__),
        )


async def _list(db: AsyncSession, model, organization: Organization, limit: int, offset: int):
    query = select(model).where(model.organization_id == organization.id)
    if hasattr(model, "deleted_at"):
        query = query.where(model.deleted_at.is_(None))
    result = await db.execute(
        query.order_by(model.name).limit(limit).offset(offset),
    )
    return result.scalars().all()


async def _add(db: AsyncSession, row):
    db.add(row)
    await db.commit()
    return {"id": str(row.id), "name": row.name}


@router.post("/categories", status_code=status.HTTP_201_CREATED)
async def create_category(
    body: CategoryCreate,
    organization: Organization = Depends(get_organization),
    db: AsyncSession = Depends(get_db),
):
    await _ensure_unique_name(db, Category, organization, body.name)
    return await _add(db, Category(
        organization_id=organization.id, name=body.name,
        description=body.description, color=body.color,
    ))


@router.get("/categories")
async def list_categories(
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    organization: Organization = Depends(get_organization),
    db: AsyncSession = Depends(get_db),
):
    rows = await _list(db, Category, organization, limit, offset)
    return {
        "categories": [
            {"id": str(c.id), "name": c.name, "color": c.color} for c in rows
        ],
        "pagination": {"limit": limit, "offset": offset},
    }


@router.post("/locations", status_code=status.HTTP_201_CREATED)
async def create_location(
    body: LocationCreate,
    organization: Organization = Depends(get_organization),
    db: AsyncSession = Depends(get_db),
):
    await _ensure_unique_name(db, Location, organization, body.name)
    return await _add(db, Location(
        organization_id=organization.id, name=body.name,
        description=body.description, address=body.address,
    ))


@router.get("/locations")
async def list_locations(
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    organization: Organization = Depends(get_organization),
    db: AsyncSession = Depends(get_db),
):
    rows = await _list(db, Location, organization, limit, offset)
    return {
        "locations": [
            {"id": str(loc.id), "name": loc.name, "address": loc.address}
            for loc in rows
        ],
        "pagination": {"limit": limit, "offset": offset},
    }


@router.post("/tags", status_code=status.HTTP_201_CREATED)
async def create_tag(
    body: NamedCreate,
    organization: Organization = Depends(get_organization),
    db: AsyncSession = Depends(get_db),
):
    await _ensure_unique_name(db, Tag, organization, body.name)
    return await _add(db, Tag(
        organization_id=organization.id, name=body.name,
        description=body.description,
    ))


@router.get("/tags")
async def list_tags(
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    organization: Organization = Depends(get_organization),
    db: AsyncSession = Depends(get_db),
):
    rows = await _list(db, Tag, organization, limit, offset)
    return {
        "tags": [{"id": str(t.id), "name": t.name} for t in rows],
        "pagination": {"limit": limit, "offset": offset},
    }


@router.post("/team-members", status_code=status.HTTP_201_CREATED)
async def create_team_member(
    body: TeamMemberCreate,
    organization: Organization = Depends(get_organization),
    db: AsyncSession = Depends(get_db),
):
    return await _add(db, TeamMember(
        organization_id=organization.id, name=body.name.strip(), email=body.email,
    ))


@router.get("/team-members")
async def list_team_members(
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    organization: Organization = Depends(get_organization),
    db: AsyncSession = Depends(get_db),
):
    rows = await _list(db, TeamMember, organization, limit, offset)
    return {
        "team_members": [
            {"id": str(m.id), "name": m.name, "email": m.email} for m in rows
        ],
        "pagination": {"limit": limit, "offset": offset},
    }
