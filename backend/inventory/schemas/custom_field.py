"""Custom Field Schemas — create/update/response contracts for field definitions.

Invariants:
    - name: 1-100 chars, stripped (built-in name collisions are a 409 in the route)
    - type: text | number | date | boolean, accepted in any case, stored lower case
    - options: stripped, non-empty, unique strings; only allowed on text fields
"""

from uuid import UUID

from pydantic import BaseModel, Field, field_validator, model_validator

from inventory.core.base_fields import ASSET_BASE_FIELDS
from inventory.core.domain_types import CustomFieldType

RESERVED_FIELD_NAMES = ASSET_BASE_FIELDS.names | ASSET_BASE_FIELDS.reserved


def _clean_options(options: list[str] | None) -> list[str] | None:
    if options is None:
        return None
    cleaned: list[str] = []
    for option in options:
        option = option.strip()
        if not option:
            raise ValueError("options cannot contain empty values")
        if option in cleaned:
            raise ValueError(f"duplicate option '{option}'")
        cleaned.append(option)
    return cleaned


class CustomFieldCreate(BaseModel):
    """Custom field creation."""
    name: str = Field(min_length=1, max_length=100)
    type: CustomFieldType = CustomFieldType.TEXT
    help_text: str | None = Field(None, max_length=1000)
    required: bool = False
    active: bool = True
    options: list[str] = Field(default_factory=list, max_length=100)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty or whitespace")
        return v

    @field_validator("type", mode="before")
    @classmethod
    def lower_type(cls, v):
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator("options")
    @classmethod
    def clean_options(cls, v: list[str]) -> list[str]:
        return _clean_options(v) or []

    @model_validator(mode="after")
    def options_only_for_text(self):
        if self.options and self.type != CustomFieldType.TEXT:
            raise ValueError("options are only supported on text fields")
        return self


class CustomFieldUpdate(BaseModel):
    """Partial update — name and type are fixed once values exist."""
    help_text: str | None = Field(None, max_length=1000)
    required: bool | None = None
    active: bool | None = None
    options: list[str] | None = Field(None, max_length=100)

    @field_validator("options")
    @classmethod
    def clean_options(cls, v: list[str] | None) -> list[str] | None:
        return _clean_options(v)


class CustomFieldResponse(BaseModel):
    id: UUID
    name: str
    type: str
    help_text: str | None
    required: bool
    active: bool
    options: list[str]
