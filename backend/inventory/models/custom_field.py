"""CustomField ORM — an organization-defined, typed form field for assets.

Invariants:
    - name is unique within an organization
    - type is one of text/number/date/boolean (validated at the API boundary)
    - options is an ordered list of strings; only text fields use it
    - Only active fields are merged into the asset form schema

Design Decisions:
    - JSON column for options: portable across PostgreSQL and SQLite (tests)
    - to_definition() hands the pure core a plain dataclass, never the ORM row
"""

import uuid

from sqlalchemy import Boolean, JSON, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from inventory.core.schema_merger import CustomFieldDefinition
from inventory.db.base import Base, OrganizationScoped, Timestamped


class CustomField(OrganizationScoped, Timestamped, Base):
    """Custom field definition owned by an organization."""
    __tablename__ = "custom_fields"
    __table_args__ = (
        UniqueConstraint("organization_id", "name", name="uq_custom_fields_org_name"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    help_text: Mapped[str | None] = mapped_column(Text, nullable=True)
    required: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    type: Mapped[str] = mapped_column(String(20), nullable=False, default="text")
    options: Mapped[list] = mapped_column(JSON, nullable=False, default=list)

    organization: Mapped["Organization"] = relationship(
        "Organization", back_populates="custom_fields",
    )

    def to_definition(self) -> CustomFieldDefinition:
        return CustomFieldDefinition(
            id=str(self.id),
            name=self.name,
            type=self.type,
            required=self.required,
            help_text=self.help_text or "",
            options=tuple(self.options or ()),
            active=self.active,
        )
