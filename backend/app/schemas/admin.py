"""Admin Schemas — dashboard, analytics, invoice and user-detail payloads.

Invariants:
    - Money fields are floats rounded to 2 decimals by the producing service
    - Counts default to 0 so an empty database still renders a dashboard
"""

from datetime import datetime
from uuid import UUID

from pydantic import Field, field_validator

from app.schemas.common import ApiModel


class DashboardStats(ApiModel):
    total_users: int = 0
    total_orders: int = 0
    total_menu_items: int = 0
    total_categories: int = 0
    total_revenue: float = 0.0
    delivered_orders: int = 0
    pending_orders: int = 0
    cancelled_orders: int = 0
    today_orders: int = 0
    today_revenue: float = 0.0
    order_growth: float = 0.0
    revenue_growth: float = 0.0


class DailyOrders(ApiModel):
    date: str
    orders: int
    revenue: float


class OrderAnalytics(ApiModel):
    total_orders: int = 0
    total_revenue: float = 0.0
    average_order_value: float = 0.0
    orders_by_status: dict[str, int] = Field(default_factory=dict)
    daily_orders: list[DailyOrders] = Field(default_factory=list)


class CustomerSegment(ApiModel):
    user_id: UUID
    email: str
    first_name: str | None = None
    last_name: str | None = None
    total_orders: int = 0
    total_spent: float = 0.0
    last_order_date: datetime | None = None
    loyalty_points: int = 0


class CustomerAnalytics(ApiModel):
    customer_segments: list[CustomerSegment] = Field(default_factory=list)
    new_customers: int = 0
    returning_customers: int = 0


class InvoiceSummary(ApiModel):
    total_invoices: int = 0
    total_revenue: float = 0.0
    paid_invoices: int = 0
    paid_revenue: float = 0.0
    pending_invoices: int = 0
    pending_revenue: float = 0.0
    average_order_value: float = 0.0


class MonthlyInvoices(ApiModel):
    month: str
    invoices: int
    revenue: float
    avg_order_value: float


class InvoiceStatistics(ApiModel):
    summary: InvoiceSummary
    monthly_breakdown: list[MonthlyInvoices] = Field(default_factory=list)


class AddressOut(ApiModel):
    id: UUID
    type: str | None = None
    label: str | None = None
    address_line1: str
    address_line2: str | None = None
    city: str
    state: str
    postal_code: str
    country: str
    is_default: bool = False


class RecentOrder(ApiModel):
    id: UUID
    order_number: str
    status: str
    payment_status: str
    total: float
    created_at: datetime

    @field_validator("total", mode="before")
    @classmethod
    def decimal_to_float(cls, v):
        return float(v)


class UserStatistics(ApiModel):
    total_orders: int = 0
    total_spent: float = 0.0
    avg_order_value: float = 0.0


class UserDetails(ApiModel):
    id: UUID
    external_id: str
    email: str
    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = None
    role: str
    is_active: bool
    loyalty_points: int = 0
    created_at: datetime
    addresses: list[AddressOut] = Field(default_factory=list)
    recent_orders: list[RecentOrder] = Field(default_factory=list)
    statistics: UserStatistics = Field(default_factory=UserStatistics)


class AdminLoginRequest(ApiModel):
    username: str = Field(min_length=1, max_length=200)
    password: str = Field(min_length=1, max_length=200)


class AdminLoginResponse(ApiModel):
    token: str
    username: str
    role: str
    expires_at: datetime
