"""Base Field Sets — the static, always-present fields of assets and bookings.

Invariants:
    - Defined once per entity kind; never altered by tenant configuration
    - Form keys are the rule names (snake_case), shared with the multipart decoder
    - The primary image is NOT a base field: it has its own UploadRule
"""

from inventory.core.domain_types import EntityKind, FieldKind
from inventory.core.field_rules import BaseFieldSet, FieldRule, UploadRule

DESCRIPTION_MAX_LENGTH = 1000
MAIN_IMAGE_FIELD = "main_image"

ASSET_BASE_FIELDS = BaseFieldSet(
    entity=EntityKind.ASSET,
    rules=(
        FieldRule(
            "title", "Title", FieldKind.TEXT, required=True,
            min_length=2, message="Title is required",
        ),
        FieldRule(
            "description", "Description", FieldKind.TEXT,
            max_length=DESCRIPTION_MAX_LENGTH,
        ),
        FieldRule("category", "Category", FieldKind.TEXT),
        FieldRule("new_location_id", "Location", FieldKind.TEXT),
        FieldRule("qr_id", "QR code", FieldKind.TEXT),
        FieldRule("tags", "Tags", FieldKind.TAG_LIST),
    ),
    reserved=frozenset({MAIN_IMAGE_FIELD}),
)

BOOKING_BASE_FIELDS = BaseFieldSet(
    entity=EntityKind.BOOKING,
    rules=(
        FieldRule(
            "name", "Name", FieldKind.TEXT, required=True,
            min_length=2, message="Name is required",
        ),
        FieldRule("start_date", "Start date", FieldKind.DATETIME, required=True),
        FieldRule("end_date", "End date", FieldKind.DATETIME, required=True),
        FieldRule("custodian", "Custodian", FieldKind.TEXT, required=True),
    ),
)


# ─── Primary image ──────────────────────────────────────────────

MAIN_IMAGE_MAX_BYTES = 4 * 1024 * 1024
MAIN_IMAGE_TYPES = frozenset({"image/png", "image/jpeg"})

# Insertion order is display order
_TYPE_LABELS: dict[str, tuple[str, ...]] = {
    "image/png": ("PNG",),
    "image/jpeg": ("JPG", "JPEG"),
    "image/webp": ("WEBP",),
    "image/gif": ("GIF",),
}


def main_image_rule(
    max_bytes: int = MAIN_IMAGE_MAX_BYTES,
    allowed_types: frozenset[str] = MAIN_IMAGE_TYPES,
) -> UploadRule:
    """Build the primary-image rule from deployment settings.

    The human type label reads like "PNG, JPG or JPEG".
    """
    known = [t for t in _TYPE_LABELS if t in allowed_types]
    unknown = sorted(t for t in allowed_types if t not in _TYPE_LABELS)
    labels = [label for t in known for label in _TYPE_LABELS[t]] + unknown
    if len(labels) > 1:
        type_label = ", ".join(labels[:-1]) + " or " + labels[-1]
    else:
        type_label = labels[0] if labels else ""
    return UploadRule(
        name=MAIN_IMAGE_FIELD,
        label="Main image",
        allowed_types=frozenset(allowed_types),
        type_label=type_label,
        max_bytes=max_bytes,
    )
