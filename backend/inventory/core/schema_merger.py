"""Schema Merger — combines a base field set with an organization's custom fields.

Invariants:
    - PURE: no IO, no async, no DB, no caching: same inputs, same schema
    - Inactive definitions are skipped; every active one yields exactly one rule
    - rule.required mirrors definition.required (renderers read it directly)
    - Unknown custom field types and name collisions (with base fields, upload
      fields or each other) raise SchemaConfigurationError naming the field

Design Decisions:
    - Collisions rejected at merge time rather than letting the base field win:
      a shadowed custom field would silently drop tenant data
    - Type tokens normalised to lower case: stored definitions may use TEXT/NUMBER/...
"""

from collections.abc import Sequence
from dataclasses import dataclass

from inventory.core.domain_types import CustomFieldType, FieldKind, FieldSource
from inventory.core.errors import SchemaConfigurationError
from inventory.core.field_rules import BaseFieldSet, FieldRule, MergedSchema


@dataclass(frozen=True)
class CustomFieldDefinition:
    """Organization-defined form field, as read from persistence."""
    id: str
    name: str
    type: str
    required: bool = False
    help_text: str = ""
    options: tuple[str, ...] = ()
    active: bool = True


_KIND_BY_TYPE: dict[CustomFieldType, FieldKind] = {
    CustomFieldType.TEXT: FieldKind.TEXT,
    CustomFieldType.NUMBER: FieldKind.NUMBER,
    CustomFieldType.DATE: FieldKind.DATE,
    CustomFieldType.BOOLEAN: FieldKind.BOOLEAN,
}


def parse_custom_field_type(definition: CustomFieldDefinition) -> CustomFieldType:
    """Resolve a definition's type token, or raise SchemaConfigurationError."""
    token = (definition.type or "").strip().lower()
    try:
        return CustomFieldType(token)
    except ValueError:
        raise SchemaConfigurationError(
            f"Custom field '{definition.name}' has unsupported type "
            f"'{definition.type}'",
            field_name=definition.name,
        ) from None


def custom_field_label(name: str) -> str:
    """Human label for error messages: 'warranty_months' -> 'Warranty months'."""
    label = name.replace("_", " ").strip()
    return label[:1].upper() + label[1:] if label else name


def custom_field_rule(definition: CustomFieldDefinition) -> FieldRule:
    """Derive the validation rule for one custom field definition."""
    if not definition.name or not definition.name.strip():
        raise SchemaConfigurationError(
            f"Custom field '{definition.id}' has no name",
            field_name=str(definition.id),
        )
    field_type = parse_custom_field_type(definition)
    # Options only constrain text fields; other types ignore leftovers
    options = (
        tuple(definition.options or ())
        if field_type == CustomFieldType.TEXT else ()
    )
    return FieldRule(
        name=definition.name,
        label=custom_field_label(definition.name),
        kind=_KIND_BY_TYPE[field_type],
        required=definition.required,
        help_text=definition.help_text or "",
        options=options,
        source=FieldSource.CUSTOM,
        custom_field_id=str(definition.id),
    )


def merge_schema(
    base: BaseFieldSet, custom_fields: Sequence[CustomFieldDefinition],
) -> MergedSchema:
    """Merge base rules with one rule per active custom field."""
    taken = set(base.names) | set(base.reserved)
    custom_rules: list[FieldRule] = []
    for definition in custom_fields:
        if not definition.active:
            continue
        rule = custom_field_rule(definition)
        if rule.name in base.names or rule.name in base.reserved:
            raise SchemaConfigurationError(
                f"Custom field '{rule.name}' collides with a built-in "
                f"{base.entity.value} field",
                field_name=rule.name,
            )
        if rule.name in taken:
            raise SchemaConfigurationError(
                f"Custom field '{rule.name}' is defined more than once",
                field_name=rule.name,
            )
        taken.add(rule.name)
        custom_rules.append(rule)
    return MergedSchema(entity=base.entity, rules=base.rules + tuple(custom_rules))
