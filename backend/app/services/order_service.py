"""Order Service — checkout, order history, fulfilment updates and order analytics.

Invariants:
    - Orders are placed and listed for the local user mirroring the identity
      subject (users.external_id); an unknown subject is ResourceNotFoundError
    - Prices are read from the menu inside the checkout transaction; unknown or
      unavailable items and foreign delivery addresses reject the whole order
    - An applied offer must evaluate valid against the subtotal, and its usage
      and conversion counters move in the same commit as the order
    - Customers only ever see their own orders (another user's id is a 404)
    - Reaching "delivered" stamps actual_delivery_time
    - Analytics: either date bound may be absent; an absent bound is unbounded on
      that side; rows are aggregated by core.analytics (no dialect SQL)

Design Decisions:
    - Pricing, delivery estimate and order numbering live in core.checkout (pure);
      this module only loads rows and persists the result
    - Clock and order-number suffix injected: tests pin both
    - populate_existing on reload: objects created in this session are re-read
      with their eager loads instead of lazy-loading in async context
"""

import logging
import math
import secrets
import string
import uuid
from datetime import datetime, timezone
from typing import Callable
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.analytics import OrderRow, summarize_orders
from app.core.checkout import (
    PricedLine, can_cancel, estimate_delivery, format_order_number, price_order,
)
from app.core.discounts import compute_discount
from app.core.domain_types import DiscountType, InteractionType, OrderStatus
from app.core.errors import ConflictError, InvalidInputError, ResourceNotFoundError
from app.models.menu import MenuItem
from app.models.offer import Offer, OfferInteraction
from app.models.order import Address, Order, OrderItem
from app.models.user import User
from app.schemas.admin import AddressOut, OrderAnalytics
from app.schemas.orders import OrderCreate, OrderItemOut, OrderOut, OrderPage
from app.services.offer_service import offer_terms

logger = logging.getLogger(__name__)

_SUFFIX_ALPHABET = string.ascii_lowercase + string.digits


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_order_suffix() -> str:
    return "".join(secrets.choice(_SUFFIX_ALPHABET) for _ in range(5))


async def load_order_rows(
    db: AsyncSession, start: datetime | None = None, end: datetime | None = None,
) -> list[OrderRow]:
    """Fetch the columns analytics needs for orders created within [start, end]."""
    query = select(
        Order.created_at, Order.total, Order.status, Order.payment_status,
    )
    if start is not None:
        query = query.where(Order.created_at >= start)
    if end is not None:
        query = query.where(Order.created_at <= end)
    result = await db.execute(query)
    return [
        OrderRow(
            created_at=created_at, total=float(total),
            status=status, payment_status=payment_status,
        )
        for created_at, total, status, payment_status in result.all()
    ]


def order_out(order: Order) -> OrderOut:
    address = order.delivery_address
    return OrderOut(
        id=order.id,
        order_number=order.order_number,
        user_id=order.user_id,
        status=order.status,
        payment_status=order.payment_status,
        subtotal=order.subtotal,
        tax=order.tax,
        delivery_fee=order.delivery_fee,
        discount=order.discount,
        total=order.total,
        customer_notes=order.customer_notes,
        kitchen_notes=order.kitchen_notes,
        estimated_delivery_time=order.estimated_delivery_time,
        actual_delivery_time=order.actual_delivery_time,
        created_at=order.created_at,
        updated_at=order.updated_at,
        delivery_address=AddressOut.model_validate(address) if address else None,
        items=[
            OrderItemOut(
                id=item.id,
                menu_item_id=item.menu_item_id,
                name=item.menu_item.name,
                quantity=item.quantity,
                unit_price=item.unit_price,
                total_price=item.total_price,
                special_instructions=item.special_instructions,
            )
            for item in order.items
        ],
    )


def _with_details(query):
    return query.options(
        selectinload(Order.items).selectinload(OrderItem.menu_item),
        selectinload(Order.delivery_address),
    ).execution_options(populate_existing=True)


class SqlOrderService:
    """Customer checkout and history, admin fulfilment and analytics."""

    def __init__(
        self,
        db: AsyncSession,
        clock: Callable[[], datetime] = _utcnow,
        order_suffix: Callable[[], str] = new_order_suffix,
    ):
        self.db = db
        self.clock = clock
        self.order_suffix = order_suffix

    async def _user_for(self, external_id: str) -> User:
        result = await self.db.execute(
            select(User).where(User.external_id == external_id),
        )
        user = result.scalar_one_or_none()
        if user is None:
            raise ResourceNotFoundError("User", external_id)
        return user

    async def _load(self, order_id: UUID, user_id: UUID | None = None) -> Order:
        query = select(Order).where(Order.id == order_id)
        if user_id is not None:
            query = query.where(Order.user_id == user_id)
        order = (await self.db.execute(_with_details(query))).scalar_one_or_none()
        if order is None:
            raise ResourceNotFoundError("Order", str(order_id))
        return order

    async def _priced_lines(self, data: OrderCreate) -> tuple[list[PricedLine], list[MenuItem]]:
        ids = {line.menu_item_id for line in data.items}
        result = await self.db.execute(select(MenuItem).where(MenuItem.id.in_(ids)))
        menu = {item.id: item for item in result.scalars().all()}

        lines = []
        for line in data.items:
            item = menu.get(line.menu_item_id)
            if item is None:
                raise InvalidInputError(
                    f"Menu item {line.menu_item_id} not found", field="items",
                )
            if not item.is_available:
                raise InvalidInputError(
                    f"{item.name} is currently unavailable", field="items",
                )
            lines.append(PricedLine(
                menu_item_id=item.id,
                quantity=line.quantity,
                unit_price=item.price,
                special_instructions=line.special_instructions,
            ))
        return lines, list(menu.values())

    async def create_order(self, user_external_id: str, data: OrderCreate) -> OrderOut:
        now = self.clock()
        user = await self._user_for(user_external_id)

        address = await self.db.get(Address, data.delivery_address_id)
        if address is None or address.user_id != user.id:
            raise ResourceNotFoundError("Delivery address", str(data.delivery_address_id))

        lines, menu_items = await self._priced_lines(data)
        totals = price_order(lines)

        offer = None
        if data.offer_id is not None:
            offer = await self.db.get(Offer, data.offer_id)
            outcome = compute_discount(
                offer_terms(offer) if offer else None, float(totals.subtotal), now,
            )
            if not outcome.is_valid:
                raise InvalidInputError(outcome.message, field="offerId")
            totals = price_order(
                lines,
                discount=outcome.discount_amount,
                free_delivery=offer.discount_type == DiscountType.FREE_DELIVERY.value,
            )

        order = Order(
            id=uuid.uuid4(),
            order_number=format_order_number(now, self.order_suffix()),
            user_id=user.id,
            subtotal=totals.subtotal,
            tax=totals.tax,
            delivery_fee=totals.delivery_fee,
            discount=totals.discount,
            total=totals.total,
            delivery_address_id=address.id,
            customer_notes=data.customer_notes,
            estimated_delivery_time=estimate_delivery(
                now, (item.preparation_time for item in menu_items),
            ),
            created_at=now,
            updated_at=now,
            items=[
                OrderItem(
                    menu_item_id=line.menu_item_id,
                    quantity=line.quantity,
                    unit_price=line.unit_price,
                    total_price=line.total_price,
                    special_instructions=line.special_instructions,
                    created_at=now,
                )
                for line in lines
            ],
        )
        self.db.add(order)
        if offer is not None:
            offer.used_count = (offer.used_count or 0) + 1
            offer.conversion_count = (offer.conversion_count or 0) + 1
            self.db.add(OfferInteraction(
                offer_id=offer.id,
                user_id=user_external_id,
                interaction_type=InteractionType.CONVERTED.value,
                order_id=order.id,
                created_at=now,
            ))
        await self.db.commit()
        logger.info(
            f"Order {order.order_number} placed",
            extra={"user_id": user_external_id, "order_id": str(order.id)},
        )
        return order_out(await self._load(order.id))

    async def list_user_orders(
        self,
        user_external_id: str,
        page: int,
        limit: int,
        status: OrderStatus | None = None,
    ) -> OrderPage:
        user = await self._user_for(user_external_id)
        conditions = [Order.user_id == user.id]
        if status is not None:
            conditions.append(Order.status == status.value)

        total = await self.db.scalar(
            select(func.count()).select_from(Order).where(*conditions),
        ) or 0
        result = await self.db.execute(_with_details(
            select(Order)
            .where(*conditions)
            .order_by(Order.created_at.desc())
            .limit(limit)
            .offset((page - 1) * limit),
        ))
        return OrderPage(
            orders=[order_out(o) for o in result.scalars().all()],
            total=total,
            page=page,
            limit=limit,
            total_pages=math.ceil(total / limit) if limit else 0,
        )

    async def get_user_order(self, user_external_id: str, order_id: UUID) -> OrderOut:
        user = await self._user_for(user_external_id)
        return order_out(await self._load(order_id, user.id))

    async def cancel_order(
        self, user_external_id: str, order_id: UUID, reason: str | None = None,
    ) -> OrderOut:
        user = await self._user_for(user_external_id)
        order = await self._load(order_id, user.id)
        if not can_cancel(order.status):
            raise ConflictError("Order cannot be cancelled at this stage")

        order.status = OrderStatus.CANCELLED.value
        if reason:
            order.customer_notes = (
                f"{order.customer_notes or ''}\nCancellation reason: {reason}".strip()
            )
        order.updated_at = self.clock()
        await self.db.commit()
        logger.info(
            f"Order {order.order_number} cancelled by customer",
            extra={"user_id": user_external_id, "order_id": str(order_id)},
        )
        return order_out(await self._load(order_id))

    async def get_order_details(self, order_id: UUID) -> OrderOut:
        return order_out(await self._load(order_id))

    async def update_order_status(
        self, order_id: UUID, status: OrderStatus, kitchen_notes: str | None = None,
    ) -> OrderOut:
        order = await self._load(order_id)
        now = self.clock()
        order.status = status.value
        if kitchen_notes is not None:
            order.kitchen_notes = kitchen_notes
        if status is OrderStatus.DELIVERED:
            order.actual_delivery_time = now
        order.updated_at = now
        await self.db.commit()
        logger.info(
            f"Order {order.order_number} moved to {status.value}",
            extra={"order_id": str(order_id)},
        )
        return order_out(await self._load(order_id))

    async def get_order_analytics(
        self, date_from: datetime | None, date_to: datetime | None,
    ) -> OrderAnalytics:
        rows = await load_order_rows(self.db, date_from, date_to)
        return OrderAnalytics(**summarize_orders(rows))
