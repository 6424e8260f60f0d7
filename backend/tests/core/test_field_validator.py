"""Field Validator — tests for pure form validation against a merged schema.

Tests cover:
    - valid base input coerced (text stripped, tags split)
    - required/optional custom fields, absent and empty
    - number, date, datetime and boolean coercion and messages (finite numbers only)
    - all errors collected in one pass
    - raw values never mutated; unknown keys ignored
    - primary image upload rule (type, size, presence) and validate_submission
"""

from datetime import date, datetime

from inventory.core.base_fields import (
    ASSET_BASE_FIELDS, BOOKING_BASE_FIELDS, main_image_rule,
)
from inventory.core.domain_types import FieldKind
from inventory.core.field_rules import FieldRule, UploadedFile
from inventory.core.field_validator import (
    Invalid,
    Valid,
    apply_rule,
    validate,
    validate_submission,
    validate_upload,
)
from inventory.core.schema_merger import CustomFieldDefinition, merge_schema

PNG = UploadedFile("photo.png", "image/png", b"\x89PNG" + b"0" * 100)


def _schema(*definitions):
    return merge_schema(ASSET_BASE_FIELDS, list(definitions))


def _definition(name, type_, **kwargs):
    return CustomFieldDefinition(id=f"cf-{name}", name=name, type=type_, **kwargs)


# ─── Base fields ─────────────────────────────────────────────────

def test_valid_base_input_without_custom_fields():
    result = validate(_schema(), {
        "title": "  Cordless drill ",
        "description": "18V",
        "category": "cat-1",
        "tags": "tag-1, tag-2",
    })
    assert isinstance(result, Valid)
    assert result.is_valid
    assert result.data["title"] == "Cordless drill"
    assert result.data["description"] == "18V"
    assert result.data["category"] == "cat-1"
    assert result.data["tags"] == ["tag-1", "tag-2"]
    assert result.data["qr_id"] is None


def test_empty_title_reports_title_is_required():
    result = validate(_schema(), {"title": "", "description": "ok"})
    assert isinstance(result, Invalid)
    assert not result.is_valid
    assert result.errors == {"title": "Title is required"}


def test_short_title_uses_field_message():
    result = validate(_schema(), {"title": "A"})
    assert result.errors["title"] == "Title is required"


def test_description_max_length():
    result = validate(_schema(), {"title": "Drill", "description": "x" * 1001})
    assert result.errors["description"] == "Description must be at most 1000 characters"


def test_tags_from_repeated_and_comma_values_deduplicated():
    result = validate(_schema(), {"title": "Drill", "tags": ["a,b", "b", " c "]})
    assert result.data["tags"] == ["a", "b", "c"]


def test_absent_tags_are_empty_list():
    result = validate(_schema(), {"title": "Drill"})
    assert result.data["tags"] == []


# ─── Custom fields ──────────────────────────────────────────────

def test_required_custom_field_absent_or_empty_is_invalid():
    schema = _schema(_definition("serial_number", "text", required=True))
    for raw in ({"title": "Drill"}, {"title": "Drill", "serial_number": "   "}):
        result = validate(schema, raw)
        assert isinstance(result, Invalid)
        assert result.errors == {"serial_number": "Serial number is required"}


def test_optional_custom_fields_absent_are_valid():
    schema = _schema(
        _definition("serial_number", "text"),
        _definition("warranty_months", "number"),
        _definition("purchased_on", "date"),
    )
    result = validate(schema, {"title": "Drill"})
    assert isinstance(result, Valid)
    assert result.data["serial_number"] is None
    assert result.data["warranty_months"] is None
    assert result.data["purchased_on"] is None


def test_required_number_rejects_non_numeric():
    schema = _schema(_definition("warranty_months", "number", required=True))
    result = validate(schema, {"title": "Drill", "warranty_months": "abc"})
    assert isinstance(result, Invalid)
    assert result.errors["warranty_months"] == "Warranty months must be a number"


def test_number_coercion():
    schema = _schema(_definition("qty", "number"))
    assert validate(schema, {"title": "Drill", "qty": "123"}).data["qty"] == 123
    assert validate(schema, {"title": "Drill", "qty": "-2.5"}).data["qty"] == -2.5
    assert validate(schema, {"title": "Drill", "qty": "1e3"}).data["qty"] == 1000.0


def test_integer_past_digit_limit_is_not_a_number():
    schema = _schema(_definition("warranty_months", "number", required=True))
    result = validate(schema, {"title": "Drill", "warranty_months": "9" * 5000})
    assert isinstance(result, Invalid)
    assert result.errors == {"warranty_months": "Warranty months must be a number"}


def test_overflowing_numbers_are_rejected():
    schema = _schema(_definition("warranty_months", "number", required=True))
    for raw in ("1e400", "-1e400", "9" * 400 + ".0"):
        result = validate(schema, {"title": "Drill", "warranty_months": raw})
        assert isinstance(result, Invalid), raw
        assert result.errors["warranty_months"] == "Warranty months must be a number"


def test_date_coercion_and_error():
    schema = _schema(_definition("purchased_on", "date"))
    valid = validate(schema, {"title": "Drill", "purchased_on": "2024-02-29"})
    assert valid.data["purchased_on"] == date(2024, 2, 29)
    invalid = validate(schema, {"title": "Drill", "purchased_on": "2023-02-30"})
    assert invalid.errors["purchased_on"] == (
        "Purchased on must be a valid date (YYYY-MM-DD)"
    )


def test_optional_boolean_absent_is_false():
    schema = _schema(_definition("is_loaned", "boolean"))
    result = validate(schema, {"title": "Drill"})
    assert isinstance(result, Valid)
    assert result.data["is_loaned"] is False


def test_boolean_tokens():
    schema = _schema(_definition("is_loaned", "boolean"))
    for token in ("on", "TRUE", "1", "yes"):
        assert validate(schema, {"title": "Drill", "is_loaned": token}).data["is_loaned"] is True
    for token in ("off", "false", "0", "No"):
        assert validate(schema, {"title": "Drill", "is_loaned": token}).data["is_loaned"] is False
    result = validate(schema, {"title": "Drill", "is_loaned": "maybe"})
    assert result.errors["is_loaned"] == "Is loaned must be yes or no"


def test_required_boolean_absent_is_invalid():
    schema = _schema(_definition("inspected", "boolean", required=True))
    result = validate(schema, {"title": "Drill"})
    assert result.errors == {"inspected": "Inspected is required"}


def test_text_options_constrain_value():
    schema = _schema(_definition("condition", "text", options=("new", "used")))
    assert validate(schema, {"title": "Drill", "condition": "used"}).data["condition"] == "used"
    result = validate(schema, {"title": "Drill", "condition": "broken"})
    assert result.errors["condition"] == "Condition must be one of: new, used"


def test_file_in_text_field_is_rejected():
    result = validate(_schema(), {"title": PNG})
    assert result.errors["title"] == "Title must be text, not a file"


# ─── Whole-form properties ──────────────────────────────────────

def test_three_independent_violations_give_three_errors():
    schema = _schema(
        _definition("warranty_months", "number", required=True),
        _definition("purchased_on", "date"),
    )
    result = validate(schema, {
        "title": "", "warranty_months": "abc", "purchased_on": "yesterday",
    })
    assert isinstance(result, Invalid)
    assert set(result.errors) == {"title", "warranty_months", "purchased_on"}


def test_raw_values_not_mutated_and_unknown_keys_ignored():
    raw = {"title": " Drill ", "tags": ["a", "b"], "not_a_field": "x"}
    snapshot = {"title": " Drill ", "tags": ["a", "b"], "not_a_field": "x"}
    result = validate(_schema(), raw)
    assert raw == snapshot
    assert "not_a_field" not in result.data


def test_booking_datetimes_are_parsed():
    result = validate(merge_schema(BOOKING_BASE_FIELDS, ()), {
        "name": "Conference",
        "start_date": "2026-03-01T09:00",
        "end_date": "not a date",
        "custodian": "tm-1",
    })
    assert result.errors == {"end_date": "End date must be a valid date and time"}


def test_apply_rule_repeated_value_uses_first():
    rule = FieldRule("qty", "Qty", FieldKind.NUMBER)
    assert apply_rule(rule, ["4", "5"]) == (4, None)


def test_valid_booking_form_coerces_datetimes():
    result = validate(merge_schema(BOOKING_BASE_FIELDS, ()), {
        "name": "Conference",
        "start_date": "2026-03-01T09:00",
        "end_date": "2026-03-02T17:30",
        "custodian": "tm-1",
    })
    assert result.data["start_date"] == datetime(2026, 3, 1, 9, 0)
    assert result.data["end_date"] == datetime(2026, 3, 2, 17, 30)


# ─── Primary image ──────────────────────────────────────────────

def test_upload_allowed_type_passes():
    assert validate_upload(main_image_rule(), PNG) is None


def test_upload_disallowed_type():
    gif = UploadedFile("anim.gif", "image/gif", b"GIF89a")
    assert validate_upload(main_image_rule(), gif) == (
        "Main image must be a PNG, JPG or JPEG file"
    )


def test_upload_content_type_parameters_ignored():
    jpeg = UploadedFile("a.jpg", "image/jpeg; charset=binary", b"\xff\xd8")
    assert validate_upload(main_image_rule(), jpeg) is None


def test_upload_too_large():
    big = UploadedFile("big.png", "image/png", b"0" * (4 * 1024 * 1024 + 1))
    assert validate_upload(main_image_rule(), big) == "Main image must be at most 4 MB"


def test_upload_absent_or_empty_is_fine_when_optional():
    empty = UploadedFile("", "application/octet-stream", b"")
    assert validate_upload(main_image_rule(), None) is None
    assert validate_upload(main_image_rule(), empty) is None


def test_submission_reports_upload_error_with_field_errors():
    gif = UploadedFile("anim.gif", "image/gif", b"GIF89a")
    result = validate_submission(
        _schema(), {"title": "", "main_image": gif}, (main_image_rule(),),
    )
    assert isinstance(result, Invalid)
    assert result.errors["title"] == "Title is required"
    assert result.errors["main_image"] == "Main image must be a PNG, JPG or JPEG file"


def test_submission_upload_error_independent_of_valid_fields():
    gif = UploadedFile("anim.gif", "image/gif", b"GIF89a")
    result = validate_submission(
        _schema(), {"title": "Drill", "main_image": gif}, (main_image_rule(),),
    )
    assert result.errors == {"main_image": "Main image must be a PNG, JPG or JPEG file"}


def test_submission_valid_carries_upload():
    result = validate_submission(
        _schema(), {"title": "Drill", "main_image": PNG}, (main_image_rule(),),
    )
    assert isinstance(result, Valid)
    assert result.data["main_image"] is PNG


def test_submission_without_upload_sets_none():
    result = validate_submission(_schema(), {"title": "Drill"}, (main_image_rule(),))
    assert result.data["main_image"] is None
