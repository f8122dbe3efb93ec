"""Menu Service — catalogue reads backed by SQLAlchemy.

Invariants:
    - Categories ordered by sort_order, then name
    - Search matches name case-insensitively, returns available items only,
      ordered by name and capped at search_limit
    - get_menu_item raises ResourceNotFoundError for unknown ids (never returns None)

Design Decisions:
    - ilike over full-text search: catalogue is small, matches the frontend's
      "contains" expectation
"""

import logging
import math
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import ResourceNotFoundError
from app.models.menu import Category, MenuItem
from app.schemas.menu import CategoryOut, MenuItemOut, MenuItemPage, MenuStatistics

logger = logging.getLogger(__name__)


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class SqlMenuService:
    """Menu reads for public and admin routes."""

    def __init__(self, db: AsyncSession, search_limit: int = 20):
        self.db = db
        self.search_limit = search_limit

    async def get_categories(self, active_only: bool) -> list[CategoryOut]:
        query = select(Category).order_by(Category.sort_order, Category.name)
        if active_only:
            query = query.where(Category.is_active.is_(True))
        result = await self.db.execute(query)
        return [CategoryOut.model_validate(c) for c in result.scalars().all()]

    async def get_menu_item(self, item_id: UUID) -> MenuItemOut:
        item = await self.db.get(MenuItem, item_id)
        if item is None:
            raise ResourceNotFoundError("Menu item", str(item_id))
        return MenuItemOut.model_validate(item)

    async def search_menu_items(self, term: str) -> list[MenuItemOut]:
        pattern = f"%{_escape_like(term)}%"
        result = await self.db.execute(
            select(MenuItem)
            .where(MenuItem.name.ilike(pattern, escape="\\"))
            .where(MenuItem.is_available.is_(True))
            .order_by(MenuItem.name)
            .limit(self.search_limit),
        )
        return [MenuItemOut.model_validate(i) for i in result.scalars().all()]

    async def list_menu_items(
        self,
        page: int,
        limit: int,
        category_id: UUID | None = None,
        is_available: bool | None = None,
        is_popular: bool | None = None,
        search: str | None = None,
    ) -> MenuItemPage:
        """Filtered, paginated listing (page is 1-based)."""
        conditions = []
        if category_id is not None:
            conditions.append(MenuItem.category_id == category_id)
        if is_available is not None:
            conditions.append(MenuItem.is_available.is_(is_available))
        if is_popular is not None:
            conditions.append(MenuItem.is_popular.is_(is_popular))
        if search:
            conditions.append(
                MenuItem.name.ilike(f"%{_escape_like(search)}%", escape="\\"),
            )

        total = await self.db.scalar(
            select(func.count()).select_from(MenuItem).where(*conditions),
        ) or 0
        result = await self.db.execute(
            select(MenuItem)
            .where(*conditions)
            .order_by(MenuItem.sort_order, MenuItem.name)
            .limit(limit)
            .offset((page - 1) * limit),
        )
        return MenuItemPage(
            items=[MenuItemOut.model_validate(i) for i in result.scalars().all()],
            total=total,
            page=page,
            limit=limit,
            total_pages=math.ceil(total / limit) if limit else 0,
        )

    async def get_menu_statistics(self) -> MenuStatistics:
        async def _count(*conditions) -> int:
            return await self.db.scalar(
                select(func.count()).select_from(MenuItem).where(*conditions),
            ) or 0

        return MenuStatistics(
            total_items=await _count(),
            available_items=await _count(MenuItem.is_available.is_(True)),
            popular_items=await _count(MenuItem.is_popular.is_(True)),
            vegetarian_items=await _count(MenuItem.is_vegetarian.is_(True)),
        )
