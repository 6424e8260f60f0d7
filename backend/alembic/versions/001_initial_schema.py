"""Initial schema — organizations, catalogs, custom fields, assets, bookings.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def _organization_fk() -> sa.Column:
    return sa.Column(
        "organization_id", UUID(as_uuid=True),
        sa.ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )


def upgrade() -> None:
    op.create_table(
        "organizations",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "custom_fields",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        _organization_fk(),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("help_text", sa.Text, nullable=True),
        sa.Column("required", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("active", sa.Boolean, nullable=False, server_default="true"),
        sa.Column("type", sa.String(20), nullable=False, server_default="text"),
        sa.Column("options", sa.JSON, nullable=False, server_default="[]"),
        *_timestamps(),
        sa.UniqueConstraint("organization_id", "name", name="uq_custom_fields_org_name"),
    )

    for table in ("categories", "locations", "tags"):
        extra = []
        if table == "categories":
            extra.append(sa.Column("color", sa.String(7), nullable=False, server_default="#808080"))
        if table == "locations":
            extra.append(sa.Column("address", sa.Text, nullable=True))
        op.create_table(
            table,
            sa.Column("id", UUID(as_uuid=True), primary_key=True),
            _organization_fk(),
            sa.Column("name", sa.String(200), nullable=False),
            sa.Column("description", sa.Text, nullable=True),
            *extra,
            *_timestamps(),
            sa.UniqueConstraint("organization_id", "name", name=f"uq_{table}_org_name"),
        )

    op.create_table(
        "team_members",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        _organization_fk(),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("email", sa.String(320), nullable=True),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "assets",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        _organization_fk(),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("category_id", UUID(as_uuid=True), sa.ForeignKey("categories.id", ondelete="SET NULL"), nullable=True),
        sa.Column("location_id", UUID(as_uuid=True), sa.ForeignKey("locations.id", ondelete="SET NULL"), nullable=True),
        sa.Column("qr_id", sa.String(100), nullable=True),
        sa.Column("main_image", sa.LargeBinary, nullable=True),
        sa.Column("main_image_content_type", sa.String(100), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "asset_tags",
        sa.Column("asset_id", UUID(as_uuid=True), sa.ForeignKey("assets.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("tag_id", UUID(as_uuid=True), sa.ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
    )

    op.create_table(
        "asset_custom_field_values",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("asset_id", UUID(as_uuid=True), sa.ForeignKey("assets.id", ondelete="CASCADE"), nullable=False),
        sa.Column("custom_field_id", UUID(as_uuid=True), sa.ForeignKey("custom_fields.id", ondelete="CASCADE"), nullable=False),
        sa.Column("value", sa.JSON, nullable=True),
        sa.UniqueConstraint("asset_id", "custom_field_id", name="uq_asset_custom_field_values"),
    )

    op.create_table(
        "bookings",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        _organization_fk(),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="draft"),
        sa.Column("from", sa.DateTime(timezone=True), nullable=True),
        sa.Column("to", sa.DateTime(timezone=True), nullable=True),
        sa.Column("custodian_team_member_id", UUID(as_uuid=True), sa.ForeignKey("team_members.id", ondelete="SET NULL"), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "booking_assets",
        sa.Column("booking_id", UUID(as_uuid=True), sa.ForeignKey("bookings.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("asset_id", UUID(as_uuid=True), sa.ForeignKey("assets.id", ondelete="CASCADE"), primary_key=True),
    )


def downgrade() -> None:
    for table in (
        "booking_assets", "bookings", "asset_custom_field_values", "asset_tags",
        "assets", "team_members", "tags", "locations", "categories",
        "custom_fields", "organizations",
    ):
        op.drop_table(table)
