"""Organization ORM — the tenant that owns every asset, booking and custom field.

Invariants:
    - id is UUID primary key
    - Deleting an organization cascades to all tenant-owned rows
"""

import uuid

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from inventory.db.base import Base, Timestamped


class Organization(Timestamped, Base):
    """Tenant aggregate root."""
    __tablename__ = "organizations"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)

    custom_fields: Mapped[list["CustomField"]] = relationship(
        "CustomField", back_populates="organization",
        cascade="all, delete-orphan",
    )
