"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - OrganizationId, AssetId, BookingId, CustomFieldId wrap UUIDs
    - All valid states encoded as Enums — no raw string matching
    - CustomFieldType covers exactly the four tenant-selectable types

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

OrganizationId = NewType("OrganizationId", UUID)
AssetId = NewType("AssetId", UUID)
BookingId = NewType("BookingId", UUID)
CustomFieldId = NewType("CustomFieldId", UUID)


# ─── Enums ───────────────────────────────────────────────────────

class EntityKind(str, Enum):
    """Entity kinds that own a base field set."""
    ASSET = "asset"
    BOOKING = "booking"


class CustomFieldType(str, Enum):
    """Types an organization can pick for a custom field."""
    TEXT = "text"
    NUMBER = "number"
    DATE = "date"
    BOOLEAN = "boolean"


class FieldKind(str, Enum):
    """Rule variants understood by the field validator.

    Superset of CustomFieldType: base fields also use DATETIME and TAG_LIST.
    """
    TEXT = "text"
    NUMBER = "number"
    DATE = "date"
    DATETIME = "datetime"
    BOOLEAN = "boolean"
    TAG_LIST = "tag_list"


class FieldSource(str, Enum):
    """Where a rule in a merged schema came from."""
    BASE = "base"
    CUSTOM = "custom"


class BookingStatus(str, Enum):
    """Booking lifecycle states — maps to DB `status` column."""
    DRAFT = "draft"
    RESERVED = "reserved"
    ONGOING = "ongoing"
    OVERDUE = "overdue"
    COMPLETE = "complete"
    ARCHIVED = "archived"
    CANCELLED = "cancelled"


class BookingIntent(str, Enum):
    """Submit-button intent on the booking form."""
    SAVE = "save"
    RESERVE = "reserve"
