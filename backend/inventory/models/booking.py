"""Booking ORM — a reservation of assets for a date range, held by a custodian.

Invariants:
    - Always belongs to an Organization (organization_id FK)
    - from_/to are timezone-aware; to > from is enforced by core.enforce_booking
    - status transitions: draft -> reserved -> ongoing -> complete | overdue | cancelled | archived

Design Decisions:
    - Python attribute from_ maps to column "from" (reserved word in Python only)
    - Custodian is a TeamMember reference, not a user: bookings can be held by
      members without an account
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import Column, DateTime, ForeignKey, String, Table
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from inventory.core.domain_types import BookingStatus
from inventory.db.base import Base, OrganizationScoped, Timestamped

booking_assets = Table(
    "booking_assets",
    Base.metadata,
    Column(
        "booking_id", UUID(as_uuid=True),
        ForeignKey("bookings.id", ondelete="CASCADE"), primary_key=True,
    ),
    Column(
        "asset_id", UUID(as_uuid=True),
        ForeignKey("assets.id", ondelete="CASCADE"), primary_key=True,
    ),
)


class Booking(OrganizationScoped, Timestamped, Base):
    """Booking of one or more assets."""
    __tablename__ = "bookings"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=BookingStatus.DRAFT.value,
    )
    from_: Mapped[datetime | None] = mapped_column(
        "from", DateTime(timezone=True), nullable=True,
    )
    to: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    custodian_team_member_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("team_members.id", ondelete="SET NULL"),
        nullable=True,
    )

    custodian: Mapped[Optional["TeamMember"]] = relationship(
        "TeamMember", lazy="selectin",
    )
    assets: Mapped[list["Asset"]] = relationship(
        "Asset", secondary=booking_assets, lazy="selectin",
    )
