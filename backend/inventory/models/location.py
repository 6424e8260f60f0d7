"""Location ORM — Place where an asset is supposed to be kept.

Invariants:
    - name is unique within an organization
"""

import uuid

from sqlalchemy import String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from inventory.db.base import Base, OrganizationScoped, Timestamped


class Location(OrganizationScoped, Timestamped, Base):
    __tablename__ = "locations"
    __table_args__ = (
        UniqueConstraint("organization_id", "name", name="uq_locations_org_name"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
