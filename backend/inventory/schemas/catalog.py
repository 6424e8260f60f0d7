"""Catalog Schemas — organizations and the named lookups assets and bookings reference."""

from pydantic import BaseModel, Field, field_validator


class NamedCreate(BaseModel):
    """Create payload shared by categories, locations and tags."""
    name: str = Field(min_length=1, max_length=200)
    description: str | None = Field(None, max_length=1000)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty or whitespace")
        return v


class OrganizationCreate(NamedCreate):
    pass


class CategoryCreate(NamedCreate):
    color: str = Field("#808080", pattern=r"^#[0-9a-fA-F]{6}$")


class LocationCreate(NamedCreate):
    address: str | None = Field(None, max_length=1000)


class TeamMemberCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    email: str | None = Field(None, max_length=320, pattern=r"^[^@\s]+@[^@\s]+$")
