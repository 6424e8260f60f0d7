"""Presenters — ORM rows and pipeline failures to JSON response bodies.

Invariants:
    - Form failures always use one shape: {"success": false, "errors": {...}, "values": {...}}
    - Responses never include file content (images have their own endpoint)
    - Custom field values keyed by the field's current name
"""

import logging
from uuid import UUID

from fastapi import status
from fastapi.responses import JSONResponse

from inventory.core.field_rules import RawValue
from inventory.models.asset import Asset
from inventory.models.booking import Booking
from inventory.models.custom_field import CustomField
from inventory.schemas.custom_field import CustomFieldResponse
from inventory.services.form_decoding import echo_values

logger = logging.getLogger(__name__)


def form_error_response(
    errors: dict[str, str],
    raw_values: dict[str, RawValue],
    entity: str,
    organization_id: UUID,
) -> JSONResponse:
    """400 with every field error and the submitted text values for redisplay."""
    logger.info(
        f"{entity} form rejected: {', '.join(sorted(errors))}",
        extra={
            "organization_id": str(organization_id),
            "entity": entity,
            "error_count": len(errors),
        },
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "success": False,
            "errors": errors,
            "values": echo_values(raw_values),
        },
    )


def _named(row) -> dict | None:
    if row is None:
        return None
    return {"id": str(row.id), "name": row.name}


def asset_to_dict(asset: Asset, field_names: dict[UUID, str]) -> dict:
    return {
        "id": str(asset.id),
        "title": asset.title,
        "description": asset.description,
        "category": _named(asset.category),
        "location": _named(asset.location),
        "tags": [_named(tag) for tag in asset.tags],
        "qr_id": asset.qr_id,
        "has_main_image": asset.main_image is not None,
        "custom_fields": {
            field_names[value.custom_field_id]: value.value
            for value in asset.custom_field_values
            if value.custom_field_id in field_names
        },
        "created_at": asset.created_at.isoformat(),
        "updated_at": asset.updated_at.isoformat(),
    }


def booking_to_dict(booking: Booking) -> dict:
    return {
        "id": str(booking.id),
        "name": booking.name,
        "status": booking.status,
        "start_date": booking.from_.isoformat() if booking.from_ else None,
        "end_date": booking.to.isoformat() if booking.to else None,
        "custodian": _named(booking.custodian),
        "assets": [
            {"id": str(asset.id), "title": asset.title}
            for asset in booking.assets
        ],
        "created_at": booking.created_at.isoformat(),
    }


def custom_field_to_response(custom_field: CustomField) -> CustomFieldResponse:
    return CustomFieldResponse(
        id=custom_field.id,
        name=custom_field.name,
        type=custom_field.type,
        help_text=custom_field.help_text,
        required=custom_field.required,
        active=custom_field.active,
        options=list(custom_field.options or []),
    )
