"""Booking Routes — multipart booking forms with save/reserve intents.

Invariants:
    - Booking form = booking base schema (no tenant custom fields) + date range check
    - All field errors (including the date range) returned together as 400
    - Finished bookings cannot be edited (409); only drafts can be reserved (409)
    - Status gate checked before the form is validated: a locked booking never
      reports field errors
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from inventory.api.dependencies import get_organization
from inventory.api.presenters import booking_to_dict, form_error_response
from inventory.core.base_fields import BOOKING_BASE_FIELDS
from inventory.core.domain_types import (
    BookingIntent, BookingStatus, EntityKind, OrganizationId,
)
from inventory.core.enforce_booking import (
    check_date_range, check_editable, check_reservable,
)
from inventory.core.errors import (
    BookingStatusError, ErrorContext, ResourceNotFoundError,
)
from inventory.core.field_rules import RawValue
from inventory.core.field_validator import (
    Invalid, ValidationResult, apply_rule, validate,
)
from inventory.core.schema_merger import merge_schema
from inventory.infrastructure.database import get_db
from inventory.models.booking import Booking
from inventory.models.organization import Organization
from inventory.schemas.booking import BookingAssetsAdd
from inventory.services.booking_writer import BookingWriter
from inventory.services.form_decoding import decode_form

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/bookings", tags=["bookings"])

BOOKING_SCHEMA = merge_schema(BOOKING_BASE_FIELDS, ())


def validate_booking_form(raw_values: dict[str, RawValue]) -> ValidationResult:
    """Field rules plus the date range, reported together.

    The range is checked whenever both dates parsed, even if other fields failed.
    """
    result = validate(BOOKING_SCHEMA, raw_values)
    start, _ = apply_rule(BOOKING_SCHEMA.rule("start_date"), raw_values.get("start_date"))
    end, _ = apply_rule(BOOKING_SCHEMA.rule("end_date"), raw_values.get("end_date"))
    range_errors = (
        check_date_range(start, end)
        if start is not None and end is not None else {}
    )
    if isinstance(result, Invalid):
        return Invalid({**result.errors, **range_errors})
    if range_errors:
        return Invalid(range_errors)
    return result


def _parse_intent(raw: RawValue) -> BookingIntent | None:
    if raw is None or raw == "":
        return BookingIntent.SAVE
    if not isinstance(raw, str):
        return None
    try:
        return BookingIntent(raw.strip().lower())
    except ValueError:
        return None


def _raise_on_violation(violation: dict | None, booking: Booking) -> None:
    if violation:
        raise BookingStatusError(
            violation["message"], violation["error_code"],
            ErrorContext(
                organization_id=str(booking.organization_id),
                entity=EntityKind.BOOKING.value,
            ),
        )


async def _get_booking_or_404(writer: BookingWriter, booking_id: UUID) -> Booking:
    booking = await writer.get(booking_id)
    if booking is None:
        raise ResourceNotFoundError("Booking", str(booking_id))
    return booking


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_booking(
    request: Request,
    organization: Organization = Depends(get_organization),
    db: AsyncSession = Depends(get_db),
):
    """Create a draft booking."""
    raw_values = await decode_form(await request.form())
    result = validate_booking_form(raw_values)
    if isinstance(result, Invalid):
        return form_error_response(
            result.errors, raw_values, EntityKind.BOOKING.value, organization.id,
        )
    writer = BookingWriter(db, OrganizationId(organization.id))
    booking, errors = await writer.save(None, result.data)
    if errors:
        return form_error_response(
            errors, raw_values, EntityKind.BOOKING.value, organization.id,
        )
    return booking_to_dict(booking)


@router.get("")
async def list_bookings(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    status_filter: BookingStatus | None = Query(None, alias="status"),
    organization: Organization = Depends(get_organization),
    db: AsyncSession = Depends(get_db),
):
    """List bookings with pagination, soonest start first."""
    query = (
        select(Booking)
        .where(Booking.organization_id == organization.id)
        .order_by(Booking.from_.asc(), Booking.created_at.desc())
    )
    if status_filter:
        query = query.where(Booking.status == status_filter.value)
    result = await db.execute(query.limit(limit).offset(offset))
    return {
        "bookings": [booking_to_dict(b) for b in result.scalars().all()],
        "pagination": {"limit": limit, "offset": offset},
    }


@router.get("/{booking_id}")
async def get_booking(
    booking_id: UUID,
    organization: Organization = Depends(get_organization),
    db: AsyncSession = Depends(get_db),
):
    writer = BookingWriter(db, OrganizationId(organization.id))
    return booking_to_dict(await _get_booking_or_404(writer, booking_id))


@router.put("/{booking_id}")
async def update_booking(
    booking_id: UUID,
    request: Request,
    organization: Organization = Depends(get_organization),
    db: AsyncSession = Depends(get_db),
):
    """Save the booking form; intent=reserve also moves a draft to reserved."""
    writer = BookingWriter(db, OrganizationId(organization.id))
    booking = await _get_booking_or_404(writer, booking_id)
    current_status = BookingStatus(booking.status)
    _raise_on_violation(check_editable(current_status), booking)

    raw_values = await decode_form(await request.form())
    intent = _parse_intent(raw_values.get("intent"))
    if intent is None:
        return form_error_response(
            {"intent": "Intent must be save or reserve"},
            raw_values, EntityKind.BOOKING.value, organization.id,
        )
    if intent == BookingIntent.RESERVE:
        _raise_on_violation(check_reservable(current_status), booking)

    result = validate_booking_form(raw_values)
    if isinstance(result, Invalid):
        return form_error_response(
            result.errors, raw_values, EntityKind.BOOKING.value, organization.id,
        )
    new_status = BookingStatus.RESERVED if intent == BookingIntent.RESERVE else None
    saved, errors = await writer.save(booking, result.data, status=new_status)
    if errors:
        return form_error_response(
            errors, raw_values, EntityKind.BOOKING.value, organization.id,
        )
    return booking_to_dict(saved)


@router.post("/{booking_id}/assets")
async def add_booking_assets(
    booking_id: UUID,
    body: BookingAssetsAdd,
    organization: Organization = Depends(get_organization),
    db: AsyncSession = Depends(get_db),
):
    """Attach assets of this organization to the booking."""
    writer = BookingWriter(db, OrganizationId(organization.id))
    booking = await _get_booking_or_404(writer, booking_id)
    _raise_on_violation(check_editable(BookingStatus(booking.status)), booking)
    missing = await writer.add_assets(booking, body.asset_ids)
    if missing:
        raise ResourceNotFoundError("Asset", ", ".join(str(m) for m in missing))
    return booking_to_dict(booking)
