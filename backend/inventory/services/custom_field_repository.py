"""Custom Field Repository — SQLAlchemy implementation of CustomFieldSource.

Invariants:
    - Every query is scoped by organization_id
    - list_active_custom_fields returns definitions in creation order (stable form layout)
    - Returns core CustomFieldDefinition values, never ORM rows, to the pipeline
    - No caching: definitions are read fresh on every request
"""

import logging
from collections.abc import Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from inventory.core.domain_types import OrganizationId
from inventory.core.errors import SchemaConfigurationError
from inventory.core.field_rules import BaseFieldSet, MergedSchema
from inventory.core.repository_protocols import CustomFieldSource
from inventory.core.schema_merger import CustomFieldDefinition, merge_schema
from inventory.models.custom_field import CustomField

logger = logging.getLogger(__name__)


class CustomFieldRepository:
    """Reads and writes an organization's custom field definitions."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_active_custom_fields(
        self, organization_id: OrganizationId,
    ) -> Sequence[CustomFieldDefinition]:
        rows = await self.list_all(organization_id, active_only=True)
        return [row.to_definition() for row in rows]

    async def list_all(
        self, organization_id: OrganizationId, active_only: bool = False,
    ) -> list[CustomField]:
        query = (
            select(CustomField)
            .where(CustomField.organization_id == organization_id)
            .order_by(CustomField.created_at, CustomField.name)
        )
        if active_only:
            query = query.where(CustomField.active.is_(True))
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get(
        self, organization_id: OrganizationId, custom_field_id: UUID,
    ) -> CustomField | None:
        result = await self.db.execute(
            select(CustomField)
            .where(CustomField.id == custom_field_id)
            .where(CustomField.organization_id == organization_id),
        )
        return result.scalar_one_or_none()

    async def get_by_name(
        self, organization_id: OrganizationId, name: str,
    ) -> CustomField | None:
        result = await self.db.execute(
            select(CustomField)
            .where(CustomField.organization_id == organization_id)
            .where(CustomField.name == name),
        )
        return result.scalar_one_or_none()

    async def add(self, custom_field: CustomField) -> CustomField:
        self.db.add(custom_field)
        await self.db.commit()
        await self.db.refresh(custom_field)
        logger.info(
            f"Custom field '{custom_field.name}' created",
            extra={
                "organization_id": str(custom_field.organization_id),
                "entity": "custom_field",
            },
        )
        return custom_field


async def load_merged_schema(
    source: CustomFieldSource, base: BaseFieldSet, organization_id: OrganizationId,
) -> MergedSchema:
    """Fetch the active definitions through `source` and merge them into `base`.

    A SchemaConfigurationError is tagged with the organization and entity
    before it propagates, so the operator log names the broken tenant.
    """
    definitions = await source.list_active_custom_fields(organization_id)
    try:
        return merge_schema(base, definitions)
    except SchemaConfigurationError as exc:
        exc.context.organization_id = str(organization_id)
        exc.context.entity = base.entity.value
        raise
