"""Checkout Pricing — pure order totals, delivery estimate and order numbering.

Invariants:
    - Money is Decimal, quantized to 0.01 with ROUND_HALF_UP
    - tax = 18% of subtotal; delivery is free from a 500.00 subtotal, else 50.00
    - total = subtotal + tax + delivery_fee - discount, never below zero
    - A free-delivery offer waives the delivery fee instead of discounting items
    - Only pending or confirmed orders may be cancelled by the customer

Design Decisions:
    - Pure module: prices, "now" and the order-number suffix are passed in by
      the order service
    - Decimal over float: stored columns are Numeric(10, 2), totals must match
      what the database holds to the cent
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable
from uuid import UUID

from app.core.domain_types import OrderStatus

CENT = Decimal("0.01")
TAX_RATE = Decimal("0.18")
FREE_DELIVERY_THRESHOLD = Decimal("500.00")
DELIVERY_FEE = Decimal("50.00")
DEFAULT_PREPARATION_MINUTES = 30
DELIVERY_MINUTES = 30

CANCELLABLE_STATUSES = frozenset({OrderStatus.PENDING, OrderStatus.CONFIRMED})

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def money(value) -> Decimal:
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class PricedLine:
    """One requested menu item with the price it is sold at."""
    menu_item_id: UUID
    quantity: int
    unit_price: Decimal
    special_instructions: str | None = None

    @property
    def total_price(self) -> Decimal:
        return money(self.unit_price * self.quantity)


@dataclass(frozen=True)
class OrderTotals:
    subtotal: Decimal
    tax: Decimal
    delivery_fee: Decimal
    discount: Decimal
    total: Decimal


def price_order(
    lines: Iterable[PricedLine],
    discount: Decimal | float = 0,
    free_delivery: bool = False,
) -> OrderTotals:
    subtotal = money(sum((line.total_price for line in lines), Decimal(0)))
    tax = money(subtotal * TAX_RATE)
    if free_delivery or subtotal >= FREE_DELIVERY_THRESHOLD:
        delivery_fee = money(0)
    else:
        delivery_fee = DELIVERY_FEE
    discount = min(money(discount), subtotal)
    total = max(subtotal + tax + delivery_fee - discount, Decimal(0))
    return OrderTotals(subtotal, tax, delivery_fee, discount, money(total))


def estimate_delivery(
    now: datetime, preparation_minutes: Iterable[int | None] = (),
) -> datetime:
    """Slowest dish's preparation time plus the delivery leg."""
    known = [m for m in preparation_minutes if m]
    preparation = max(known) if known else DEFAULT_PREPARATION_MINUTES
    return now + timedelta(minutes=preparation + DELIVERY_MINUTES)


def _base36(number: int) -> str:
    digits = ""
    while True:
        number, remainder = divmod(number, 36)
        digits = _BASE36[remainder] + digits
        if number == 0:
            return digits


def format_order_number(now: datetime, suffix: str) -> str:
    """ORD-<epoch millis in base 36>-<suffix>, upper-cased."""
    millis = int(now.timestamp() * 1000)
    return f"ORD-{_base36(millis)}-{suffix}".upper()


def can_cancel(status: OrderStatus | str) -> bool:
    return OrderStatus(status) in CANCELLABLE_STATUSES
