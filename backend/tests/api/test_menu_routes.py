"""Menu Routes — verifies query coercion, search short-circuit and error shaping.

Tests:
    - activeOnly absent ≡ "false" ≡ any non-"true" value
    - Empty search term answers [] without calling the menu service
    - Malformed item id → 400, unknown item → 404, unexpected fault → 500
    - Database faults: integrity → 409, anything else → 503 generic
    - Success payloads use the {"success": true, "data": ...} envelope in camelCase
"""

from datetime import datetime, timezone
from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from app.core.errors import ResourceNotFoundError
from app.schemas.menu import CategoryOut, MenuItemOut, MenuItemPage

NOW = datetime(2024, 6, 15, tzinfo=timezone.utc)


def _category(**overrides) -> CategoryOut:
    values = dict(
        id=uuid4(), name="Starters", slug="starters", is_active=True,
        sort_order=1, created_at=NOW, updated_at=NOW,
    )
    values.update(overrides)
    return CategoryOut(**values)


def _item(**overrides) -> MenuItemOut:
    values = dict(
        id=uuid4(), name="Paneer Tikka", price=249.0, category_id=uuid4(),
        is_available=True, created_at=NOW, updated_at=NOW,
    )
    values.update(overrides)
    return MenuItemOut(**values)


@pytest.mark.parametrize("query", ["", "?activeOnly=false", "?activeOnly=yes", "?activeOnly=TRUE"])
async def test_active_only_defaults_to_false(client, menu_service, query):
    menu_service.results["get_categories"] = []
    res = await client.get(f"/api/menu/categories{query}")
    assert res.status_code == 200
    assert menu_service.calls == [("get_categories", (False,), {})]


async def test_active_only_true(client, menu_service):
    category = _category()
    menu_service.results["get_categories"] = [category]
    res = await client.get("/api/menu/categories?activeOnly=true")
    assert res.status_code == 200
    body = res.json()
    assert body["success"] is True
    assert body["data"][0]["id"] == str(category.id)
    assert body["data"][0]["sortOrder"] == 1
    assert menu_service.calls == [("get_categories", (True,), {})]


@pytest.mark.parametrize("query", ["", "?q=", "?q=%20%20"])
async def test_empty_search_skips_service(client, menu_service, query):
    res = await client.get(f"/api/menu/search{query}")
    assert res.status_code == 200
    assert res.json() == {"success": True, "data": []}
    assert menu_service.calls == []


async def test_search_delegates_trimmed_term(client, menu_service):
    menu_service.results["search_menu_items"] = [_item()]
    res = await client.get("/api/menu/search?q=%20paneer%20")
    assert res.status_code == 200
    assert res.json()["data"][0]["name"] == "Paneer Tikka"
    assert menu_service.calls == [("search_menu_items", ("paneer",), {})]


async def test_get_item(client, menu_service):
    item = _item()
    menu_service.results["get_menu_item"] = item
    res = await client.get(f"/api/menu/items/{item.id}")
    assert res.status_code == 200
    data = res.json()["data"]
    assert data["price"] == 249.0
    assert data["categoryId"] == str(item.category_id)
    assert menu_service.calls == [("get_menu_item", (item.id,), {})]


async def test_get_item_malformed_id(client, menu_service):
    res = await client.get("/api/menu/items/not-a-uuid")
    assert res.status_code == 400
    assert res.json()["error"] == "Invalid menu item id format"
    assert menu_service.calls == []


async def test_get_item_not_found(client, menu_service):
    item_id = uuid4()
    menu_service.errors["get_menu_item"] = ResourceNotFoundError("Menu item", str(item_id))
    res = await client.get(f"/api/menu/items/{item_id}")
    assert res.status_code == 404
    assert res.json() == {"error": "Menu item not found"}


async def test_list_items_passes_filters(client, menu_service):
    category_id = uuid4()
    menu_service.results["list_menu_items"] = MenuItemPage(
        items=[], total=0, page=2, limit=10, total_pages=0,
    )
    res = await client.get(
        f"/api/menu/items?page=2&limit=10&categoryId={category_id}&isPopular=true",
    )
    assert res.status_code == 200
    assert res.json()["data"]["totalPages"] == 0
    assert menu_service.calls == [(
        "list_menu_items", (),
        {
            "page": 2, "limit": 10, "category_id": category_id,
            "is_available": None, "is_popular": True, "search": None,
        },
    )]


async def test_list_items_rejects_bad_page(client, menu_service):
    res = await client.get("/api/menu/items?page=abc")
    assert res.status_code == 400
    assert res.json()["details"][0]["field"] == "page"
    assert menu_service.calls == []


async def test_unexpected_fault_is_generic_500(client, menu_service):
    menu_service.errors["get_categories"] = RuntimeError(
        "could not connect to postgres://app:hunter2@db",
    )
    res = await client.get("/api/menu/categories")
    assert res.status_code == 500
    assert res.json() == {"error": "Failed to fetch categories"}
    assert "hunter2" not in res.text


async def test_integrity_fault_is_409(client, menu_service):
    menu_service.errors["get_categories"] = IntegrityError(
        "INSERT INTO categories", {}, Exception("UNIQUE constraint failed: categories.slug"),
    )
    res = await client.get("/api/menu/categories")
    assert res.status_code == 409
    assert res.json() == {"error": "Resource already exists"}


async def test_database_fault_is_503(client, menu_service):
    menu_service.errors["get_categories"] = OperationalError(
        "SELECT 1", {}, Exception("could not connect to server"),
    )
    res = await client.get("/api/menu/categories")
    assert res.status_code == 503
    assert res.json() == {"error": "Internal server error"}
