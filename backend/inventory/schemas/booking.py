"""Booking Schemas — JSON contracts around the multipart booking form."""

from uuid import UUID

from pydantic import BaseModel, Field


class BookingAssetsAdd(BaseModel):
    """Attach assets to a booking."""
    asset_ids: list[UUID] = Field(min_length=1, max_length=500)
