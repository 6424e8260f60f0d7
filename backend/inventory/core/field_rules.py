"""Field Rules — introspectable validation rules and the schemas built from them.

Invariants:
    - FieldRule is a tagged variant: `kind` selects the coercion, the rest is data
    - Rules, BaseFieldSet and MergedSchema are frozen — built per request, never mutated
    - MergedSchema field names are unique; rule order is base rules then custom rules
    - to_dict() output is JSON-serializable (used by the form-schema endpoint)

Design Decisions:
    - Plain dataclasses over a runtime-composed validator object: the rule set can be
      inspected, compared and serialized without any validation library
    - UploadRule kept separate from FieldRule: file parts are validated independently
      of the merged schema and never appear in it
"""

from dataclasses import dataclass, field
from typing import Any, Union

from inventory.core.domain_types import EntityKind, FieldKind, FieldSource


@dataclass(frozen=True)
class FieldRule:
    """One validation rule for one form field."""
    name: str
    label: str
    kind: FieldKind
    required: bool = False
    help_text: str = ""
    options: tuple[str, ...] = ()
    min_length: int | None = None
    max_length: int | None = None
    message: str | None = None  # overrides "<label> is required" and the min_length message
    source: FieldSource = FieldSource.BASE
    custom_field_id: str | None = None

    @property
    def required_message(self) -> str:
        return self.message or f"{self.label} is required"

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "label": self.label,
            "kind": self.kind.value,
            "required": self.required,
            "help_text": self.help_text,
            "options": list(self.options),
            "min_length": self.min_length,
            "max_length": self.max_length,
            "source": self.source.value,
            "custom_field_id": self.custom_field_id,
        }


@dataclass(frozen=True)
class BaseFieldSet:
    """Fixed, always-present fields of one entity kind.

    `reserved` holds names owned by upload rules: no custom field may take them.
    """
    entity: EntityKind
    rules: tuple[FieldRule, ...]
    reserved: frozenset[str] = frozenset()

    @property
    def names(self) -> frozenset[str]:
        return frozenset(rule.name for rule in self.rules)


@dataclass(frozen=True)
class MergedSchema:
    """Base rules plus one rule per active custom field, for a single request."""
    entity: EntityKind
    rules: tuple[FieldRule, ...]

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(rule.name for rule in self.rules)

    def rule(self, name: str) -> FieldRule | None:
        for rule in self.rules:
            if rule.name == name:
                return rule
        return None

    def is_required(self, name: str) -> bool:
        rule = self.rule(name)
        return bool(rule and rule.required)

    @property
    def custom_rules(self) -> tuple[FieldRule, ...]:
        return tuple(r for r in self.rules if r.source == FieldSource.CUSTOM)

    def to_dict(self) -> dict:
        return {
            "entity": self.entity.value,
            "fields": [rule.to_dict() for rule in self.rules],
        }


@dataclass(frozen=True)
class UploadedFile:
    """A decoded multipart file part. Content is held in memory."""
    filename: str
    content_type: str
    content: bytes = field(repr=False, default=b"")

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def is_empty(self) -> bool:
        """Browsers send an unnamed, zero-byte part for an untouched file input."""
        return not self.filename and self.size == 0


@dataclass(frozen=True)
class UploadRule:
    """Presence, MIME allow-list and size ceiling for one file field."""
    name: str
    label: str
    allowed_types: frozenset[str]
    type_label: str
    max_bytes: int
    required: bool = False

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "label": self.label,
            "allowed_types": sorted(self.allowed_types),
            "max_bytes": self.max_bytes,
            "required": self.required,
        }


# Raw form value as produced by the multipart decoder
RawValue = Union[str, UploadedFile, list[Union[str, UploadedFile]], None]


def schema_description(schema: MergedSchema, uploads: tuple[UploadRule, ...] = ()) -> dict[str, Any]:
    """Serialize a schema plus its upload rules for client-side rendering."""
    described = schema.to_dict()
    described["uploads"] = [rule.to_dict() for rule in uploads]
    return described
