"""Reference Resolution — looks up form-submitted ids inside the caller's organization.

Invariants:
    - Every lookup is scoped by organization_id (ids from another tenant resolve to None)
    - Malformed ids resolve to None — the caller turns that into a field error
    - Never writes

Design Decisions:
    - Unknown references are reported through the same field -> message mapping as
      the validator, so the form has one error channel
"""

from typing import TypeVar
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from inventory.core.domain_types import OrganizationId
from inventory.db.base import Base
from inventory.models.category import Category
from inventory.models.location import Location
from inventory.models.tag import Tag
from inventory.models.team_member import TeamMember

ModelT = TypeVar("ModelT", bound=Base)


def parse_uuid(raw: object) -> UUID | None:
    if raw is None:
        return None
    try:
        return UUID(str(raw))
    except ValueError:
        return None


class ReferenceResolver:
    """Organization-scoped lookups for category, location, tags and custodian ids."""

    def __init__(self, db: AsyncSession, organization_id: OrganizationId):
        self.db = db
        self.organization_id = organization_id

    async def _lookup(self, model: type[ModelT], raw_id: object) -> ModelT | None:
        key = parse_uuid(raw_id)
        if key is None:
            return None
        result = await self.db.execute(
            select(model)
            .where(model.id == key)
            .where(model.organization_id == self.organization_id),
        )
        return result.scalar_one_or_none()

    async def category(self, raw_id: str) -> tuple[Category | None, str | None]:
        category = await self._lookup(Category, raw_id)
        return category, None if category else "Category not found"

    async def location(self, raw_id: str) -> tuple[Location | None, str | None]:
        location = await self._lookup(Location, raw_id)
        return location, None if location else "Location not found"

    async def tags(self, raw_ids: list[str]) -> tuple[list[Tag], str | None]:
        keys = [parse_uuid(raw) for raw in raw_ids]
        if any(key is None for key in keys):
            return [], "Tags contain an unknown tag"
        if not keys:
            return [], None
        # Different spellings of one UUID collapse to one key
        keys = list(dict.fromkeys(keys))
        result = await self.db.execute(
            select(Tag)
            .where(Tag.id.in_(keys))
            .where(Tag.organization_id == self.organization_id),
        )
        found = {tag.id: tag for tag in result.scalars().all()}
        if len(found) != len(keys):
            return [], "Tags contain an unknown tag"
        return [found[key] for key in keys], None

    async def custodian(self, raw_id: str) -> tuple[TeamMember | None, str | None]:
        member = await self._lookup(TeamMember, raw_id)
        if member is None or member.deleted_at is not None:
            return None, "Custodian not found"
        return member, None
