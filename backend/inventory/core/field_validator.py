"""Field Validator — applies a merged schema to decoded form values.

Invariants:
    - PURE: no IO, no async, no DB; raw_values is never mutated
    - Every rule is applied; ALL field errors are collected in one pass
    - Result is Valid(data) or Invalid(errors), never both
    - Invalid input is an ordinary result, never an exception
    - Absent keys are treated as empty; keys outside the schema are ignored
    - Upload rules are evaluated independently and report through the same errors mapping

Design Decisions:
    - Coercion dispatched on FieldRule.kind through a table of small pure functions
    - Each coercer returns (value, None) or (None, message) — mirrors the
      "return error, don't raise" shape of the other core enforcers
"""

import math
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Union

from inventory.core.domain_types import FieldKind
from inventory.core.field_rules import (
    FieldRule, MergedSchema, RawValue, UploadedFile, UploadRule,
)

TRUTHY_TOKENS = frozenset({"on", "true", "1", "yes", "y", "checked"})
FALSY_TOKENS = frozenset({"off", "false", "0", "no", "n"})

_NUMBER_PATTERN = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")


@dataclass(frozen=True)
class Valid:
    data: dict[str, Any] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return True


@dataclass(frozen=True)
class Invalid:
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return False


ValidationResult = Union[Valid, Invalid]

_Outcome = tuple[Any, Union[str, None]]


# ─── Raw value helpers ──────────────────────────────────────────

def _first(raw: RawValue) -> str | UploadedFile | None:
    """Collapse repeated form values to the first one."""
    if isinstance(raw, list):
        return raw[0] if raw else None
    return raw


def _is_blank(value: str | UploadedFile | None) -> bool:
    if value is None:
        return True
    if isinstance(value, UploadedFile):
        return value.is_empty
    return value.strip() == ""


# ─── Coercers ───────────────────────────────────────────────────

def _coerce_text(rule: FieldRule, value: str) -> _Outcome:
    text = value.strip()
    if rule.min_length is not None and len(text) < rule.min_length:
        return None, rule.message or (
            f"{rule.label} must be at least {rule.min_length} characters"
        )
    if rule.max_length is not None and len(text) > rule.max_length:
        return None, f"{rule.label} must be at most {rule.max_length} characters"
    if rule.options and text not in rule.options:
        return None, f"{rule.label} must be one of: {', '.join(rule.options)}"
    return text, None


def _coerce_number(rule: FieldRule, value: str) -> _Outcome:
    text = value.strip()
    message = f"{rule.label} must be a number"
    if not _NUMBER_PATTERN.match(text):
        return None, message
    try:
        if "." in text or "e" in text.lower():
            number = float(text)
        else:
            number = int(text)
    except ValueError:
        # int() refuses strings past sys.get_int_max_str_digits()
        return None, message
    # Overflowing exponents parse to inf, which JSON cannot carry
    if isinstance(number, float) and not math.isfinite(number):
        return None, message
    return number, None


def _coerce_date(rule: FieldRule, value: str) -> _Outcome:
    try:
        return date.fromisoformat(value.strip()), None
    except ValueError:
        return None, f"{rule.label} must be a valid date (YYYY-MM-DD)"


def _coerce_datetime(rule: FieldRule, value: str) -> _Outcome:
    try:
        return datetime.fromisoformat(value.strip()), None
    except ValueError:
        return None, f"{rule.label} must be a valid date and time"


def _coerce_boolean(rule: FieldRule, value: str) -> _Outcome:
    token = value.strip().lower()
    if token in TRUTHY_TOKENS:
        return True, None
    if token in FALSY_TOKENS:
        return False, None
    return None, f"{rule.label} must be yes or no"


_COERCERS: dict[FieldKind, Callable[[FieldRule, str], _Outcome]] = {
    FieldKind.TEXT: _coerce_text,
    FieldKind.NUMBER: _coerce_number,
    FieldKind.DATE: _coerce_date,
    FieldKind.DATETIME: _coerce_datetime,
    FieldKind.BOOLEAN: _coerce_boolean,
}


def _split_tags(raw: RawValue) -> _Outcome:
    """Tag lists arrive comma separated, repeated, or both."""
    values = raw if isinstance(raw, list) else [raw]
    tags: list[str] = []
    for value in values:
        if value is None:
            continue
        if isinstance(value, UploadedFile):
            return None, "Tags must be text"
        for token in value.split(","):
            token = token.strip()
            if token and token not in tags:
                tags.append(token)
    return tags, None


def apply_rule(rule: FieldRule, raw: RawValue) -> _Outcome:
    """Validate and coerce one raw value. Returns (value, None) or (None, message)."""
    if rule.kind == FieldKind.TAG_LIST:
        tags, error = _split_tags(raw)
        if error is None and rule.required and not tags:
            return None, rule.required_message
        return tags, error

    value = _first(raw)
    if _is_blank(value):
        if rule.required:
            return None, rule.required_message
        if rule.kind == FieldKind.BOOLEAN:
            return False, None
        return None, None
    if isinstance(value, UploadedFile):
        return None, f"{rule.label} must be text, not a file"
    return _COERCERS[rule.kind](rule, value)


def validate(
    schema: MergedSchema, raw_values: Mapping[str, RawValue],
) -> ValidationResult:
    """Apply every rule in the schema; collect all errors."""
    data: dict[str, Any] = {}
    errors: dict[str, str] = {}
    for rule in schema.rules:
        value, error = apply_rule(rule, raw_values.get(rule.name))
        if error is not None:
            errors[rule.name] = error
        else:
            data[rule.name] = value
    if errors:
        return Invalid(errors)
    return Valid(data)


# ─── Uploads ────────────────────────────────────────────────────

def _format_megabytes(num_bytes: int) -> str:
    megabytes = num_bytes / (1024 * 1024)
    return f"{megabytes:g} MB"


def validate_upload(rule: UploadRule, raw: RawValue) -> str | None:
    """Check presence, MIME type and size of one file field. Returns message or None."""
    value = _first(raw)
    if value is None or (isinstance(value, UploadedFile) and value.is_empty):
        return f"{rule.label} is required" if rule.required else None
    if not isinstance(value, UploadedFile):
        if value.strip() == "":
            return f"{rule.label} is required" if rule.required else None
        return f"{rule.label} must be a file upload"
    content_type = (value.content_type or "").split(";")[0].strip().lower()
    if content_type not in rule.allowed_types:
        return f"{rule.label} must be a {rule.type_label} file"
    if value.size > rule.max_bytes:
        return f"{rule.label} must be at most {_format_megabytes(rule.max_bytes)}"
    return None


def validate_submission(
    schema: MergedSchema,
    raw_values: Mapping[str, RawValue],
    upload_rules: tuple[UploadRule, ...] = (),
) -> ValidationResult:
    """Validate form fields and file fields into one result.

    On success, each upload appears in data under its rule name
    (UploadedFile, or None when nothing was sent).
    """
    result = validate(schema, raw_values)
    errors = dict(result.errors) if isinstance(result, Invalid) else {}
    uploads: dict[str, UploadedFile | None] = {}
    for rule in upload_rules:
        raw = raw_values.get(rule.name)
        error = validate_upload(rule, raw)
        if error is not None:
            errors[rule.name] = error
            continue
        value = _first(raw)
        uploads[rule.name] = (
            value if isinstance(value, UploadedFile) and not value.is_empty
            else None
        )
    if errors:
        return Invalid(errors)
    return Valid({**result.data, **uploads})
