"""Asset Routes — multipart asset forms validated against the organization's merged schema.

Invariants:
    - Merged schema built fresh per request from the ACTIVE custom fields (no caching)
    - Form fields and the main image are validated in one pass; every error returned together
    - Invalid form -> 400 {"success": false, "errors", "values"}; nothing is written
    - A broken custom field definition -> SchemaConfigurationError (500, logged for operators)
    - /form-schema declared before /{asset_id} so the literal path wins

Design Decisions:
    - request.form() over typed Form(...) parameters: the field set varies per
      organization, so it cannot be declared statically on the endpoint
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, Response, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from inventory.api.dependencies import get_organization
from inventory.api.presenters import asset_to_dict, form_error_response
from inventory.config import get_settings
from inventory.core.base_fields import ASSET_BASE_FIELDS, main_image_rule
from inventory.core.domain_types import EntityKind, OrganizationId
from inventory.core.errors import ResourceNotFoundError
from inventory.core.field_rules import MergedSchema, UploadRule, schema_description
from inventory.core.field_validator import Invalid, validate_submission
from inventory.infrastructure.database import get_db
from inventory.models.asset import Asset
from inventory.models.organization import Organization
from inventory.services.asset_writer import AssetWriter
from inventory.services.custom_field_repository import (
    CustomFieldRepository, load_merged_schema,
)
from inventory.services.form_decoding import decode_form

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/assets", tags=["assets"])


def _upload_rules() -> tuple[UploadRule, ...]:
    settings = get_settings()
    return (
        main_image_rule(
            max_bytes=settings.main_image_max_bytes,
            allowed_types=frozenset(settings.main_image_allowed_types),
        ),
    )


async def _asset_schema(db: AsyncSession, organization: Organization) -> MergedSchema:
    return await load_merged_schema(
        CustomFieldRepository(db), ASSET_BASE_FIELDS, OrganizationId(organization.id),
    )


async def _field_names(db: AsyncSession, organization: Organization) -> dict[UUID, str]:
    rows = await CustomFieldRepository(db).list_all(OrganizationId(organization.id))
    return {row.id: row.name for row in rows}


async def _get_asset_or_404(writer: AssetWriter, asset_id: UUID) -> Asset:
    asset = await writer.get(asset_id)
    if asset is None:
        raise ResourceNotFoundError("Asset", str(asset_id))
    return asset


@router.get("/form-schema")
async def get_asset_form_schema(
    organization: Organization = Depends(get_organization),
    db: AsyncSession = Depends(get_db),
):
    """Merged asset schema, for rendering inputs and required indicators."""
    schema = await _asset_schema(db, organization)
    return schema_description(schema, _upload_rules())


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_asset(
    request: Request,
    organization: Organization = Depends(get_organization),
    db: AsyncSession = Depends(get_db),
):
    """Create an asset from a multipart form."""
    raw_values = await decode_form(await request.form())
    schema = await _asset_schema(db, organization)
    result = validate_submission(schema, raw_values, _upload_rules())
    if isinstance(result, Invalid):
        return form_error_response(
            result.errors, raw_values, EntityKind.ASSET.value, organization.id,
        )

    writer = AssetWriter(db, OrganizationId(organization.id))
    asset, errors = await writer.create(result.data, schema)
    if errors:
        return form_error_response(
            errors, raw_values, EntityKind.ASSET.value, organization.id,
        )
    return asset_to_dict(asset, await _field_names(db, organization))


@router.get("")
async def list_assets(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    search: str | None = Query(None, max_length=200),
    organization: Organization = Depends(get_organization),
    db: AsyncSession = Depends(get_db),
):
    """List assets with pagination, newest first."""
    query = (
        select(Asset)
        .where(Asset.organization_id == organization.id)
        .order_by(Asset.created_at.desc())
    )
    if search:
        query = query.where(Asset.title.ilike(f"%{search.strip()}%"))
    result = await db.execute(query.limit(limit).offset(offset))
    field_names = await _field_names(db, organization)
    return {
        "assets": [
            asset_to_dict(asset, field_names) for asset in result.scalars().all()
        ],
        "pagination": {"limit": limit, "offset": offset},
    }


@router.get("/{asset_id}")
async def get_asset(
    asset_id: UUID,
    organization: Organization = Depends(get_organization),
    db: AsyncSession = Depends(get_db),
):
    writer = AssetWriter(db, OrganizationId(organization.id))
    asset = await _get_asset_or_404(writer, asset_id)
    return asset_to_dict(asset, await _field_names(db, organization))


@router.put("/{asset_id}")
async def update_asset(
    asset_id: UUID,
    request: Request,
    organization: Organization = Depends(get_organization),
    db: AsyncSession = Depends(get_db),
):
    """Update an asset from a multipart form. An omitted image keeps the stored one."""
    writer = AssetWriter(db, OrganizationId(organization.id))
    asset = await _get_asset_or_404(writer, asset_id)

    raw_values = await decode_form(await request.form())
    schema = await _asset_schema(db, organization)
    result = validate_submission(schema, raw_values, _upload_rules())
    if isinstance(result, Invalid):
        return form_error_response(
            result.errors, raw_values, EntityKind.ASSET.value, organization.id,
        )

    updated, errors = await writer.update(asset, result.data, schema)
    if errors:
        return form_error_response(
            errors, raw_values, EntityKind.ASSET.value, organization.id,
        )
    return asset_to_dict(updated, await _field_names(db, organization))


@router.get("/{asset_id}/main-image")
async def get_asset_main_image(
    asset_id: UUID,
    organization: Organization = Depends(get_organization),
    db: AsyncSession = Depends(get_db),
):
    writer = AssetWriter(db, OrganizationId(organization.id))
    asset = await _get_asset_or_404(writer, asset_id)
    if asset.main_image is None:
        raise ResourceNotFoundError("Main image of asset", str(asset_id))
    return Response(
        content=asset.main_image,
        media_type=asset.main_image_content_type or "application/octet-stream",
    )
