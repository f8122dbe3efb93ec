"""Menu Routes — public catalogue browsing.

Invariants:
    - activeOnly is true only for the exact string "true"
    - Empty search term returns [] without touching the menu service
    - Malformed item id → 400, unknown item id → 404
"""

import logging

from fastapi import APIRouter, Depends, Query

from app.api.dependencies import get_menu_service
from app.api.responses import success
from app.api.routing import ShapedRoute
from app.core.request_parsing import (
    parse_flag, parse_int, parse_optional_flag, parse_uuid,
)
from app.core.service_protocols import MenuService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/menu", tags=["menu"], route_class=ShapedRoute)

MAX_PAGE_SIZE = 100


@router.get("/categories", summary="Fetch categories")
async def list_categories(
    active_only: str | None = Query(None, alias="activeOnly"),
    service: MenuService = Depends(get_menu_service),
):
    categories = await service.get_categories(parse_flag(active_only))
    return success(categories)


@router.get("/items", summary="Fetch menu items")
async def list_items(
    page: str | None = Query(None),
    limit: str | None = Query(None),
    category_id: str | None = Query(None, alias="categoryId"),
    is_available: str | None = Query(None, alias="isAvailable"),
    is_popular: str | None = Query(None, alias="isPopular"),
    search: str | None = Query(None),
    service: MenuService = Depends(get_menu_service),
):
    result = await service.list_menu_items(
        page=parse_int(page, "page", 1, minimum=1),
        limit=parse_int(limit, "limit", 20, minimum=1, maximum=MAX_PAGE_SIZE),
        category_id=parse_uuid(category_id, "categoryId") if category_id else None,
        is_available=parse_optional_flag(is_available),
        is_popular=parse_optional_flag(is_popular),
        search=search.strip() if search and search.strip() else None,
    )
    return success(result)


@router.get("/items/{item_id}", summary="Fetch menu item")
async def get_item(
    item_id: str, service: MenuService = Depends(get_menu_service),
):
    item = await service.get_menu_item(parse_uuid(item_id, "menu item id"))
    return success(item)


@router.get("/search", summary="Search menu items")
async def search_items(
    q: str | None = Query(None),
    service: MenuService = Depends(get_menu_service),
):
    term = (q or "").strip()
    if not term:
        return success([])
    return success(await service.search_menu_items(term))
