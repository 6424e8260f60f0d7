"""Asset ORM — an inventory item with tags, custom field values and a primary image.

Invariants:
    - Always belongs to an Organization (organization_id FK)
    - title is non-nullable; description capped at 1000 chars by the form schema
    - At most one category and one location; any number of tags (asset_tags)
    - One AssetCustomFieldValue per (asset, custom field); value is the coerced, JSON-safe value

Design Decisions:
    - Primary image stored inline (LargeBinary + content type): no object store collaborator
    - Custom values in a side table rather than a JSON blob on the asset: a renamed
      custom field keeps its values (joined by custom_field_id, not name)
"""

import uuid
from typing import Any, Optional

from sqlalchemy import (
    Column, ForeignKey, JSON, LargeBinary, String, Table, Text, UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from inventory.db.base import Base, OrganizationScoped, Timestamped

asset_tags = Table(
    "asset_tags",
    Base.metadata,
    Column(
        "asset_id", UUID(as_uuid=True),
        ForeignKey("assets.id", ondelete="CASCADE"), primary_key=True,
    ),
    Column(
        "tag_id", UUID(as_uuid=True),
        ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True,
    ),
)


class Asset(OrganizationScoped, Timestamped, Base):
    """Inventory item."""
    __tablename__ = "assets"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    category_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("categories.id", ondelete="SET NULL"),
        nullable=True,
    )
    location_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("locations.id", ondelete="SET NULL"),
        nullable=True,
    )
    qr_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    main_image: Mapped[bytes | None] = mapped_column(LargeBinary, nullable=True)
    main_image_content_type: Mapped[str | None] = mapped_column(
        String(100), nullable=True,
    )

    # Relationships
    category: Mapped[Optional["Category"]] = relationship("Category", lazy="selectin")
    location: Mapped[Optional["Location"]] = relationship("Location", lazy="selectin")
    tags: Mapped[list["Tag"]] = relationship(
        "Tag", secondary=asset_tags, lazy="selectin",
    )
    custom_field_values: Mapped[list["AssetCustomFieldValue"]] = relationship(
        "AssetCustomFieldValue", back_populates="asset",
        cascade="all, delete-orphan", lazy="selectin",
    )


class AssetCustomFieldValue(Base):
    """Coerced value of one custom field on one asset."""
    __tablename__ = "asset_custom_field_values"
    __table_args__ = (
        UniqueConstraint(
            "asset_id", "custom_field_id", name="uq_asset_custom_field_values",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    asset_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("assets.id", ondelete="CASCADE"),
        nullable=False,
    )
    custom_field_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("custom_fields.id", ondelete="CASCADE"),
        nullable=False,
    )
    value: Mapped[Any] = mapped_column(JSON, nullable=True)

    asset: Mapped["Asset"] = relationship(
        "Asset", back_populates="custom_field_values",
    )