"""Booking Rule Enforcement — date range and status gates for booking forms.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - check_date_range returns a field-keyed error mapping (same channel as the validator)
    - Status checks return an error dict on violation, None on success

Design Decisions:
    - Status gates return dicts (not exceptions): the route decides the HTTP mapping,
      keeping the rule testable without FastAPI
"""

from datetime import datetime

from inventory.core.domain_types import BookingStatus

# Bookings in these states are history; the form is read-only
_LOCKED_STATUSES = frozenset({
    BookingStatus.COMPLETE, BookingStatus.ARCHIVED, BookingStatus.CANCELLED,
})


def check_date_range(start: datetime, end: datetime) -> dict[str, str]:
    """End must be strictly after start."""
    if start.tzinfo is not None and end.tzinfo is None:
        end = end.replace(tzinfo=start.tzinfo)
    elif end.tzinfo is not None and start.tzinfo is None:
        start = start.replace(tzinfo=end.tzinfo)
    if end <= start:
        return {"end_date": "End date must be after start date"}
    return {}


def check_editable(status: BookingStatus) -> dict | None:
    """Finished bookings cannot be edited."""
    if status in _LOCKED_STATUSES:
        return {
            "status": "error",
            "error_code": "BOOKING_NOT_EDITABLE",
            "message": f"A {status.value} booking cannot be edited.",
        }
    return None


def check_reservable(status: BookingStatus) -> dict | None:
    """Only draft bookings can be reserved."""
    if status != BookingStatus.DRAFT:
        return {
            "status": "error",
            "error_code": "BOOKING_NOT_RESERVABLE",
            "message": (
                f"Only draft bookings can be reserved. "
                f"This booking is {status.value}."
            ),
        }
    return None
