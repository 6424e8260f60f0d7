"""Domain Types — tests for enums, base field sets, rule serialization and errors."""

import json

from inventory.core.base_fields import (
    ASSET_BASE_FIELDS, MAIN_IMAGE_FIELD, main_image_rule,
)
from inventory.core.domain_types import (
    BookingIntent, BookingStatus, CustomFieldType, FieldKind,
)
from inventory.core.errors import (
    BookingStatusError, ConflictError, ErrorCategory, ErrorSeverity,
    ResourceNotFoundError, SchemaConfigurationError,
)
from inventory.core.field_rules import UploadedFile, schema_description
from inventory.core.schema_merger import CustomFieldDefinition, merge_schema


# ─── Enums ───────────────────────────────────────────────────────

def test_custom_field_types_are_a_subset_of_field_kinds():
    kinds = {kind.value for kind in FieldKind}
    assert {t.value for t in CustomFieldType} <= kinds
    assert len(CustomFieldType) == 4


def test_booking_enums_values():
    assert BookingStatus("draft") == BookingStatus.DRAFT
    assert BookingIntent("reserve") == BookingIntent.RESERVE


# ─── Base fields ────────────────────────────────────────────────

def test_asset_base_field_names():
    assert ASSET_BASE_FIELDS.names == frozenset({
        "title", "description", "category", "new_location_id", "qr_id", "tags",
    })
    assert MAIN_IMAGE_FIELD not in ASSET_BASE_FIELDS.names


def test_main_image_rule_label_follows_allowed_types():
    assert main_image_rule().type_label == "PNG, JPG or JPEG"
    only_png = main_image_rule(allowed_types=frozenset({"image/png"}))
    assert only_png.type_label == "PNG"
    with_webp = main_image_rule(
        allowed_types=frozenset({"image/png", "image/webp"}),
    )
    assert with_webp.type_label == "PNG or WEBP"


def test_uploaded_file_emptiness():
    assert UploadedFile("", "application/octet-stream", b"").is_empty
    assert not UploadedFile("a.png", "image/png", b"").is_empty
    assert UploadedFile("a.png", "image/png", b"123").size == 3


# ─── Serialization ──────────────────────────────────────────────

def test_schema_description_is_json_serializable():
    schema = merge_schema(ASSET_BASE_FIELDS, [
        CustomFieldDefinition(
            id="cf-1", name="condition", type="text",
            required=True, options=("new", "used"), help_text="State on arrival",
        ),
    ])
    described = schema_description(schema, (main_image_rule(),))
    encoded = json.loads(json.dumps(described))
    assert encoded["entity"] == "asset"
    custom = encoded["fields"][-1]
    assert custom == {
        "name": "condition",
        "label": "Condition",
        "kind": "text",
        "required": True,
        "help_text": "State on arrival",
        "options": ["new", "used"],
        "min_length": None,
        "max_length": None,
        "source": "custom",
        "custom_field_id": "cf-1",
    }
    assert encoded["uploads"][0]["name"] == "main_image"
    assert encoded["uploads"][0]["allowed_types"] == ["image/jpeg", "image/png"]


# ─── Errors ─────────────────────────────────────────────────────

def test_schema_configuration_error_response():
    error = SchemaConfigurationError("bad field", field_name="colour")
    response = error.to_response()["error"]
    assert response["code"] == "SCHEMA_CONFIGURATION_ERROR"
    assert response["category"] == ErrorCategory.CONFIGURATION.value
    assert response["severity"] == ErrorSeverity.CRITICAL.value
    assert response["context"]["field_name"] == "colour"


def test_http_statuses():
    assert ResourceNotFoundError("Asset", "x").http_status == 404
    assert ConflictError("dup").http_status == 409
    assert BookingStatusError("no", "BOOKING_NOT_EDITABLE").http_status == 409
