"""Booking Writer — persists validated booking forms and booking status changes.

Invariants:
    - Input is Valid.data from the booking schema (dates already parsed and range-checked)
    - Custodian resolved inside the organization before anything is written
    - Naive datetimes from datetime-local inputs are stored as UTC
    - Status changes only after core.enforce_booking allowed them (checked by the route)
"""

import logging
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from inventory.core.domain_types import BookingStatus, OrganizationId
from inventory.models.asset import Asset
from inventory.models.booking import Booking
from inventory.services.references import ReferenceResolver

logger = logging.getLogger(__name__)


def as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class BookingWriter:
    """Creates, updates and reserves bookings."""

    def __init__(self, db: AsyncSession, organization_id: OrganizationId):
        self.db = db
        self.organization_id = organization_id
        self.references = ReferenceResolver(db, organization_id)

    async def get(self, booking_id: UUID) -> Booking | None:
        result = await self.db.execute(
            select(Booking)
            .where(Booking.id == booking_id)
            .where(Booking.organization_id == self.organization_id),
        )
        return result.scalar_one_or_none()

    async def save(
        self, booking: Booking | None, data: dict[str, Any],
        status: BookingStatus | None = None,
    ) -> tuple[Booking | None, dict[str, str]]:
        """Create (booking=None) or update a booking from form data."""
        custodian, error = await self.references.custodian(data["custodian"])
        if error:
            return None, {"custodian": error}

        if booking is None:
            booking = Booking(
                organization_id=self.organization_id,
                status=BookingStatus.DRAFT.value, assets=[],
            )
            self.db.add(booking)
        booking.name = data["name"]
        booking.from_ = as_utc(data["start_date"])
        booking.to = as_utc(data["end_date"])
        booking.custodian = custodian
        if status is not None:
            booking.status = status.value
        await self.db.commit()
        logger.info(
            f"Booking '{booking.name}' saved ({booking.status})",
            extra={
                "organization_id": str(self.organization_id),
                "entity": "booking", "entity_id": str(booking.id),
            },
        )
        return booking, {}

    async def add_assets(
        self, booking: Booking, asset_ids: list[UUID],
    ) -> list[UUID]:
        """Attach assets; returns the ids that do not exist in this organization."""
        wanted = list(dict.fromkeys(asset_ids))
        result = await self.db.execute(
            select(Asset)
            .where(Asset.id.in_(wanted))
            .where(Asset.organization_id == self.organization_id),
        )
        found = {asset.id: asset for asset in result.scalars().all()}
        missing = [asset_id for asset_id in wanted if asset_id not in found]
        if missing:
            return missing
        attached = {asset.id for asset in booking.assets}
        for asset_id in wanted:
            if asset_id not in attached:
                booking.assets.append(found[asset_id])
        await self.db.commit()
        return []
