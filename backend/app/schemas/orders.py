"""Order Schemas — checkout input, order detail output and status updates.

Invariants:
    - An order request carries at least one line; each quantity is 1..99
    - Output money fields are floats converted from the stored Numeric(10, 2)
    - OrderStatusUpdate.status is restricted to OrderStatus values
"""

from datetime import datetime
from uuid import UUID

from pydantic import Field, field_validator

from app.core.domain_types import OrderStatus
from app.schemas.admin import AddressOut
from app.schemas.common import ApiModel


class OrderLineIn(ApiModel):
    menu_item_id: UUID
    quantity: int = Field(ge=1, le=99)
    special_instructions: str | None = Field(None, max_length=500)


class OrderCreate(ApiModel):
    items: list[OrderLineIn] = Field(min_length=1, max_length=50)
    delivery_address_id: UUID
    customer_notes: str | None = Field(None, max_length=1000)
    offer_id: UUID | None = None


class OrderStatusUpdate(ApiModel):
    status: OrderStatus
    kitchen_notes: str | None = Field(None, max_length=1000)


class OrderCancel(ApiModel):
    reason: str | None = Field(None, max_length=500)


class OrderItemOut(ApiModel):
    id: UUID
    menu_item_id: UUID
    name: str
    quantity: int
    unit_price: float
    total_price: float
    special_instructions: str | None = None

    @field_validator("unit_price", "total_price", mode="before")
    @classmethod
    def decimal_to_float(cls, v):
        return float(v)


class OrderOut(ApiModel):
    id: UUID
    order_number: str
    user_id: UUID
    status: str
    payment_status: str
    subtotal: float
    tax: float
    delivery_fee: float
    discount: float
    total: float
    customer_notes: str | None = None
    kitchen_notes: str | None = None
    estimated_delivery_time: datetime | None = None
    actual_delivery_time: datetime | None = None
    created_at: datetime
    updated_at: datetime
    delivery_address: AddressOut | None = None
    items: list[OrderItemOut] = Field(default_factory=list)

    @field_validator("subtotal", "tax", "delivery_fee", "discount", "total", mode="before")
    @classmethod
    def decimal_to_float(cls, v):
        return float(v)


class OrderPage(ApiModel):
    orders: list[OrderOut] = Field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 10
    total_pages: int = 0
