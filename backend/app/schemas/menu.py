"""Menu Schemas — categories, menu items and catalogue statistics."""

from datetime import datetime
from uuid import UUID

from pydantic import field_validator

from app.schemas.common import ApiModel


class CategoryOut(ApiModel):
    id: UUID
    name: str
    slug: str
    description: str | None = None
    image: str | None = None
    is_active: bool
    sort_order: int = 0
    created_at: datetime
    updated_at: datetime


class MenuItemOut(ApiModel):
    id: UUID
    name: str
    description: str | None = None
    price: float
    image: str | None = None
    category_id: UUID
    is_available: bool
    is_vegetarian: bool = False
    is_vegan: bool = False
    is_gluten_free: bool = False
    spice_level: str | None = None
    preparation_time: int | None = None
    ingredients: list[str] | None = None
    tags: list[str] | None = None
    is_popular: bool = False
    sort_order: int = 0
    created_at: datetime
    updated_at: datetime

    @field_validator("price", mode="before")
    @classmethod
    def decimal_to_float(cls, v):
        # Numeric columns come back as Decimal
        return float(v)


class MenuItemPage(ApiModel):
    """One page of menu items plus pagination counters."""
    items: list[MenuItemOut]
    total: int
    page: int
    limit: int
    total_pages: int


class MenuStatistics(ApiModel):
    total_items: int = 0
    available_items: int = 0
    popular_items: int = 0
    vegetarian_items: int = 0
