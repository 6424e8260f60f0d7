"""Asset Routes — multipart asset forms validated against the merged schema.

Invariants:
    - Valid form -> 201 with coerced custom values keyed by field name
    - Invalid form -> 400 with every error and the submitted text echoed; nothing saved
    - Primary image validated independently of the other fields
    - A broken custom field definition -> 500 SCHEMA_CONFIGURATION_ERROR
"""

from uuid import uuid4

from sqlalchemy import func, select

from inventory.models.asset import Asset
from inventory.models.custom_field import CustomField

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


async def _asset_count(test_db) -> int:
    result = await test_db.execute(select(func.count()).select_from(Asset))
    return result.scalar_one()


# ─── Form schema ────────────────────────────────────────────────

async def test_form_schema_lists_base_and_active_custom_fields(
    client, headers, add_row, warranty_field,
):
    await add_row(CustomField, name="retired", type="text", active=False)

    res = await client.get("/api/v1/assets/form-schema", headers=headers)
    assert res.status_code == 200
    body = res.json()
    names = [f["name"] for f in body["fields"]]
    assert names[0] == "title"
    assert names[-1] == "warranty_months"
    assert "retired" not in names
    warranty = body["fields"][-1]
    assert warranty["required"] is True
    assert warranty["kind"] == "number"
    assert body["uploads"][0]["name"] == "main_image"


# ─── Create ─────────────────────────────────────────────────────

async def test_create_asset_with_references_and_custom_values(
    client, headers, catalog, warranty_field, add_row,
):
    await add_row(CustomField, name="is_loaned", type="boolean")
    res = await client.post(
        "/api/v1/assets",
        data={
            "title": "  Cordless drill ",
            "description": "18V with two batteries",
            "category": str(catalog["category"].id),
            "new_location_id": str(catalog["warehouse"].id),
            "tags": [str(catalog["power"].id), str(catalog["outdoor"].id)],
            "warranty_months": "24",
        },
        headers=headers,
    )
    assert res.status_code == 201
    body = res.json()
    assert body["title"] == "Cordless drill"
    assert body["category"]["name"] == "Tools"
    assert body["location"]["name"] == "Warehouse"
    assert {t["name"] for t in body["tags"]} == {"Power", "Outdoor"}
    assert body["custom_fields"] == {"warranty_months": 24, "is_loaned": False}
    assert body["has_main_image"] is False


async def test_empty_title_returns_errors_and_values(client, headers, test_db):
    res = await client.post(
        "/api/v1/assets", data={"title": "", "description": "ok"}, headers=headers,
    )
    assert res.status_code == 400
    assert res.json() == {
        "success": False,
        "errors": {"title": "Title is required"},
        "values": {"title": "", "description": "ok"},
    }
    assert await _asset_count(test_db) == 0


async def test_all_field_errors_reported_together(client, headers, warranty_field):
    res = await client.post(
        "/api/v1/assets",
        data={"title": "", "description": "x" * 1001, "warranty_months": "abc"},
        headers=headers,
    )
    assert res.status_code == 400
    errors = res.json()["errors"]
    assert errors == {
        "title": "Title is required",
        "description": "Description must be at most 1000 characters",
        "warranty_months": "Warranty months must be a number",
    }


async def test_overflowing_number_is_field_error(
    client, headers, warranty_field, test_db,
):
    res = await client.post(
        "/api/v1/assets",
        data={"title": "Drill", "warranty_months": "1e400"},
        headers=headers,
    )
    assert res.status_code == 400
    assert res.json()["errors"] == {
        "warranty_months": "Warranty months must be a number",
    }
    assert await _asset_count(test_db) == 0


async def test_tag_spellings_of_one_id_stored_once(client, headers, catalog):
    tag_id = catalog["power"].id
    res = await client.post(
        "/api/v1/assets",
        data={
            "title": "Drill",
            "tags": f"{tag_id},{str(tag_id).upper()},{tag_id.hex}",
        },
        headers=headers,
    )
    assert res.status_code == 201
    assert [t["name"] for t in res.json()["tags"]] == ["Power"]


async def test_required_custom_field_missing(client, headers, warranty_field):
    res = await client.post(
        "/api/v1/assets", data={"title": "Drill"}, headers=headers,
    )
    assert res.status_code == 400
    assert res.json()["errors"] == {"warranty_months": "Warranty months is required"}


async def test_inactive_required_field_not_enforced(client, headers, add_row):
    await add_row(
        CustomField, name="serial", type="text", required=True, active=False,
    )
    res = await client.post(
        "/api/v1/assets", data={"title": "Drill"}, headers=headers,
    )
    assert res.status_code == 201
    assert res.json()["custom_fields"] == {}


async def test_unknown_references_reported_as_field_errors(client, headers, test_db):
    res = await client.post(
        "/api/v1/assets",
        data={
            "title": "Drill",
            "category": str(uuid4()),
            "new_location_id": "not-an-id",
            "tags": str(uuid4()),
        },
        headers=headers,
    )
    assert res.status_code == 400
    assert res.json()["errors"] == {
        "category": "Category not found",
        "new_location_id": "Location not found",
        "tags": "Tags contain an unknown tag",
    }
    assert await _asset_count(test_db) == 0


# ─── Primary image ──────────────────────────────────────────────

async def test_disallowed_image_type_rejected_with_other_fields_valid(
    client, headers, test_db,
):
    res = await client.post(
        "/api/v1/assets",
        data={"title": "Drill"},
        files={"main_image": ("anim.gif", b"GIF89a", "image/gif")},
        headers=headers,
    )
    assert res.status_code == 400
    body = res.json()
    assert body["errors"] == {
        "main_image": "Main image must be a PNG, JPG or JPEG file",
    }
    assert body["values"] == {"title": "Drill"}
    assert await _asset_count(test_db) == 0


async def test_image_errors_alongside_field_errors(client, headers):
    res = await client.post(
        "/api/v1/assets",
        data={"title": ""},
        files={"main_image": ("anim.gif", b"GIF89a", "image/gif")},
        headers=headers,
    )
    assert set(res.json()["errors"]) == {"title", "main_image"}


async def test_oversized_image_rejected(client, headers):
    res = await client.post(
        "/api/v1/assets",
        data={"title": "Drill"},
        files={"main_image": ("big.png", b"0" * (4 * 1024 * 1024 + 1), "image/png")},
        headers=headers,
    )
    assert res.status_code == 400
    assert res.json()["errors"]["main_image"] == "Main image must be at most 4 MB"


async def test_image_stored_and_served(client, headers):
    res = await client.post(
        "/api/v1/assets",
        data={"title": "Drill"},
        files={"main_image": ("drill.png", PNG_BYTES, "image/png")},
        headers=headers,
    )
    assert res.status_code == 201
    asset = res.json()
    assert asset["has_main_image"] is True

    image = await client.get(
        f"/api/v1/assets/{asset['id']}/main-image", headers=headers,
    )
    assert image.status_code == 200
    assert image.headers["content-type"] == "image/png"
    assert image.content == PNG_BYTES


async def test_missing_image_is_404(client, headers):
    asset = (await client.post(
        "/api/v1/assets", data={"title": "Drill"}, headers=headers,
    )).json()
    res = await client.get(f"/api/v1/assets/{asset['id']}/main-image", headers=headers)
    assert res.status_code == 404


# ─── Configuration errors ───────────────────────────────────────

async def test_broken_custom_field_is_configuration_error(client, headers, add_row):
    await add_row(CustomField, name="colour", type="multiselect")
    res = await client.post(
        "/api/v1/assets", data={"title": "Drill"}, headers=headers,
    )
    assert res.status_code == 500
    error = res.json()["error"]
    assert error["code"] == "SCHEMA_CONFIGURATION_ERROR"
    assert error["context"]["field_name"] == "colour"
    assert error["context"]["entity"] == "asset"


# ─── Read / update ──────────────────────────────────────────────

async def test_get_and_list_assets(client, headers):
    created = (await client.post(
        "/api/v1/assets", data={"title": "Drill"}, headers=headers,
    )).json()
    await client.post("/api/v1/assets", data={"title": "Ladder"}, headers=headers)

    res = await client.get(f"/api/v1/assets/{created['id']}", headers=headers)
    assert res.status_code == 200
    assert res.json()["title"] == "Drill"

    listed = (await client.get(
        "/api/v1/assets", params={"search": "lad"}, headers=headers,
    )).json()
    assert [a["title"] for a in listed["assets"]] == ["Ladder"]


async def test_unknown_asset_404(client, headers):
    res = await client.get(f"/api/v1/assets/{uuid4()}", headers=headers)
    assert res.status_code == 404


async def test_asset_of_other_organization_404(client, headers):
    created = (await client.post(
        "/api/v1/assets", data={"title": "Drill"}, headers=headers,
    )).json()
    other = (await client.post("/api/v1/organizations", json={"name": "Other"})).json()
    res = await client.get(
        f"/api/v1/assets/{created['id']}",
        headers={"X-Organization-Id": other["id"]},
    )
    assert res.status_code == 404


async def test_update_changes_location_and_custom_values(
    client, headers, catalog, add_row,
):
    await add_row(CustomField, name="serial", type="text")
    created = (await client.post(
        "/api/v1/assets",
        data={
            "title": "Drill",
            "new_location_id": str(catalog["warehouse"].id),
            "serial": "SN-1",
        },
        headers=headers,
    )).json()
    assert created["custom_fields"] == {"serial": "SN-1"}

    res = await client.put(
        f"/api/v1/assets/{created['id']}",
        data={"title": "Drill v2", "new_location_id": str(catalog["office"].id)},
        headers=headers,
    )
    assert res.status_code == 200
    updated = res.json()
    assert updated["title"] == "Drill v2"
    assert updated["location"]["name"] == "Office"
    # Cleared optional value is removed
    assert updated["custom_fields"] == {}


async def test_update_without_location_disconnects(client, headers, catalog):
    created = (await client.post(
        "/api/v1/assets",
        data={"title": "Drill", "new_location_id": str(catalog["warehouse"].id)},
        headers=headers,
    )).json()
    res = await client.put(
        f"/api/v1/assets/{created['id']}", data={"title": "Drill"}, headers=headers,
    )
    assert res.json()["location"] is None


async def test_update_keeps_image_when_none_sent(client, headers):
    created = (await client.post(
        "/api/v1/assets",
        data={"title": "Drill"},
        files={"main_image": ("drill.png", PNG_BYTES, "image/png")},
        headers=headers,
    )).json()
    res = await client.put(
        f"/api/v1/assets/{created['id']}", data={"title": "Drill"}, headers=headers,
    )
    assert res.json()["has_main_image"] is True


async def test_invalid_update_saves_nothing(client, headers):
    created = (await client.post(
        "/api/v1/assets", data={"title": "Drill"}, headers=headers,
    )).json()
    res = await client.put(
        f"/api/v1/assets/{created['id']}", data={"title": ""}, headers=headers,
    )
    assert res.status_code == 400
    current = (await client.get(
        f"/api/v1/assets/{created['id']}", headers=headers,
    )).json()
    assert current["title"] == "Drill"
