"""Asset Writer — persists a validated asset form.

Invariants:
    - Input is Valid.data from the merged-schema pipeline (already coerced)
    - All references are resolved BEFORE anything is written: unknown ids return
      field errors and nothing is saved
    - One AssetCustomFieldValue per active custom field with a value; a cleared
      optional field deletes its stored value; inactive fields are left untouched
    - Location only touched when plan_location_change says so

Design Decisions:
    - Returns (asset, errors) rather than raising: reference errors are ordinary
      form errors and share the validator's error channel
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from inventory.core.asset_location import LocationAction, plan_location_change
from inventory.core.base_fields import MAIN_IMAGE_FIELD
from inventory.core.domain_types import OrganizationId
from inventory.core.field_rules import MergedSchema, UploadedFile
from inventory.models.asset import Asset, AssetCustomFieldValue
from inventory.models.category import Category
from inventory.models.location import Location
from inventory.models.tag import Tag
from inventory.services.references import ReferenceResolver

logger = logging.getLogger(__name__)


def to_json_value(value: Any) -> Any:
    """Coerced values -> JSON column values (dates as ISO strings)."""
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value


@dataclass
class _ResolvedReferences:
    category: Category | None = None
    location_action: LocationAction = LocationAction.KEEP
    location: Location | None = None
    tags: list[Tag] = field(default_factory=list)


class AssetWriter:
    """Creates and updates assets from validated form data."""

    def __init__(self, db: AsyncSession, organization_id: OrganizationId):
        self.db = db
        self.organization_id = organization_id
        self.references = ReferenceResolver(db, organization_id)

    async def get(self, asset_id: UUID) -> Asset | None:
        result = await self.db.execute(
            select(Asset)
            .where(Asset.id == asset_id)
            .where(Asset.organization_id == self.organization_id),
        )
        return result.scalar_one_or_none()

    async def _resolve(
        self, data: dict[str, Any], current_location_id: str | None,
    ) -> tuple[_ResolvedReferences, dict[str, str]]:
        refs = _ResolvedReferences()
        errors: dict[str, str] = {}

        if data.get("category"):
            refs.category, error = await self.references.category(data["category"])
            if error:
                errors["category"] = error

        change = plan_location_change(data.get("new_location_id"), current_location_id)
        refs.location_action = change.action
        if change.action == LocationAction.CONNECT:
            refs.location, error = await self.references.location(change.location_id)
            if error:
                errors["new_location_id"] = error

        refs.tags, error = await self.references.tags(data.get("tags") or [])
        if error:
            errors["tags"] = error
        return refs, errors

    def _apply(
        self, asset: Asset, data: dict[str, Any],
        refs: _ResolvedReferences, schema: MergedSchema,
    ) -> None:
        asset.title = data["title"]
        asset.description = data.get("description")
        asset.qr_id = data.get("qr_id")
        asset.category = refs.category
        if refs.location_action == LocationAction.CONNECT:
            asset.location = refs.location
        elif refs.location_action == LocationAction.DISCONNECT:
            asset.location = None
        asset.tags = refs.tags

        image = data.get(MAIN_IMAGE_FIELD)
        if isinstance(image, UploadedFile):
            asset.main_image = image.content
            asset.main_image_content_type = image.content_type

        self._apply_custom_values(asset, data, schema)

    def _apply_custom_values(
        self, asset: Asset, data: dict[str, Any], schema: MergedSchema,
    ) -> None:
        existing = {v.custom_field_id: v for v in asset.custom_field_values}
        for rule in schema.custom_rules:
            field_id = UUID(rule.custom_field_id)
            value = data.get(rule.name)
            stored = existing.get(field_id)
            if value is None:
                if stored is not None:
                    asset.custom_field_values.remove(stored)
                continue
            if stored is not None:
                stored.value = to_json_value(value)
            else:
                asset.custom_field_values.append(AssetCustomFieldValue(
                    custom_field_id=field_id, value=to_json_value(value),
                ))

    async def create(
        self, data: dict[str, Any], schema: MergedSchema,
    ) -> tuple[Asset | None, dict[str, str]]:
        refs, errors = await self._resolve(data, current_location_id=None)
        if errors:
            return None, errors
        asset = Asset(organization_id=self.organization_id, custom_field_values=[])
        self._apply(asset, data, refs, schema)
        self.db.add(asset)
        await self.db.commit()
        logger.info(
            f"Asset '{asset.title}' created",
            extra={
                "organization_id": str(self.organization_id),
                "entity": "asset", "entity_id": str(asset.id),
            },
        )
        return asset, {}

    async def update(
        self, asset: Asset, data: dict[str, Any], schema: MergedSchema,
    ) -> tuple[Asset | None, dict[str, str]]:
        current = str(asset.location_id) if asset.location_id else None
        refs, errors = await self._resolve(data, current_location_id=current)
        if errors:
            return None, errors
        self._apply(asset, data, refs, schema)
        await self.db.commit()
        logger.info(
            f"Asset '{asset.title}' updated",
            extra={
                "organization_id": str(self.organization_id),
                "entity": "asset", "entity_id": str(asset.id),
            },
        )
        return asset, {}
