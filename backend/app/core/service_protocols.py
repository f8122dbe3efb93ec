"""Service Façade Protocols — contracts between route handlers and the data layer.

Invariants:
    - Routes depend on these Protocols, never on a concrete service class
    - Inputs are validated primitives; outputs are schema DTOs
    - Failures are typed: ResourceNotFoundError, InvalidInputError, ConflictError,
      DatabaseError — anything else is treated as an internal fault by the shaper

Design Decisions:
    - Protocol over ABC: structural subtyping, test doubles need no inheritance
    - Async methods: implementations do IO; pure rules live in core modules
"""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from app.core.domain_types import (
    AuthenticatedIdentity, DateRange, InteractionType, OfferType, OrderStatus,
)
from app.schemas.admin import (
    CustomerAnalytics, DashboardStats, InvoiceStatistics, OrderAnalytics,
    UserDetails,
)
from app.schemas.menu import CategoryOut, MenuItemOut, MenuItemPage, MenuStatistics
from app.schemas.offers import DiscountResult, OfferOut
from app.schemas.orders import OrderCreate, OrderOut, OrderPage
from app.schemas.user import UserProfile


class MenuService(Protocol):
    """Catalogue reads."""
    async def get_categories(self, active_only: bool) -> list[CategoryOut]: ...
    async def get_menu_item(self, item_id: UUID) -> MenuItemOut: ...
    async def search_menu_items(self, term: str) -> list[MenuItemOut]: ...
    async def list_menu_items(
        self,
        page: int,
        limit: int,
        category_id: UUID | None = None,
        is_available: bool | None = None,
        is_popular: bool | None = None,
        search: str | None = None,
    ) -> MenuItemPage: ...
    async def get_menu_statistics(self) -> MenuStatistics: ...


class OfferService(Protocol):
    """Promotions: display, evaluation and interaction tracking."""
    async def get_active_offers(
        self, offer_type: OfferType | None = None, audience: str = "all",
    ) -> list[OfferOut]: ...
    async def get_popup_offers(
        self, user_id: str | None, session_id: str,
    ) -> list[OfferOut]: ...
    async def apply_offer_discount(
        self, offer_id: UUID, order_amount: float,
    ) -> DiscountResult: ...
    async def track_interaction(
        self,
        offer_id: UUID,
        interaction_type: InteractionType,
        user_id: str | None = None,
        session_id: str | None = None,
        order_id: UUID | None = None,
    ) -> None: ...


class OrderService(Protocol):
    """Checkout and history for customers, fulfilment and analytics for admins."""
    async def create_order(
        self, user_external_id: str, data: OrderCreate,
    ) -> OrderOut: ...
    async def list_user_orders(
        self,
        user_external_id: str,
        page: int,
        limit: int,
        status: OrderStatus | None = None,
    ) -> OrderPage: ...
    async def get_user_order(
        self, user_external_id: str, order_id: UUID,
    ) -> OrderOut: ...
    async def cancel_order(
        self, user_external_id: str, order_id: UUID, reason: str | None = None,
    ) -> OrderOut: ...
    async def get_order_details(self, order_id: UUID) -> OrderOut: ...
    async def update_order_status(
        self, order_id: UUID, status: OrderStatus, kitchen_notes: str | None = None,
    ) -> OrderOut: ...
    async def get_order_analytics(
        self, date_from: datetime | None, date_to: datetime | None,
    ) -> OrderAnalytics: ...


class AdminService(Protocol):
    async def get_dashboard_stats(
        self, date_range: DateRange | None,
    ) -> DashboardStats: ...
    async def get_customer_analytics(self) -> CustomerAnalytics: ...
    async def get_user_details(self, user_id: UUID) -> UserDetails: ...


class InvoiceService(Protocol):
    async def get_invoice_statistics(
        self, date_range: DateRange | None = None,
    ) -> InvoiceStatistics: ...


class UserService(Protocol):
    async def sync_from_identity(
        self, identity: AuthenticatedIdentity,
    ) -> UserProfile: ...
