"""Offer Discounts — pure evaluation of an offer against an order amount.

Invariants:
    - Never raises for business outcomes: invalid offers yield is_valid=False, amount 0
    - Discount never exceeds the order amount nor the offer's maximum cap
    - Validity window is inclusive on both ends

Design Decisions:
    - Pure function over ORM method: the service loads the row, this decides (no IO here)
    - Free delivery discounts 0 on the order amount; delivery fees are settled at checkout
"""

from dataclasses import dataclass
from datetime import datetime, timezone

from app.core.domain_types import DiscountType


@dataclass(frozen=True)
class OfferTerms:
    """The subset of an offer row that decides its discount."""
    discount_type: DiscountType
    discount_value: float
    is_active: bool
    valid_from: datetime
    valid_until: datetime
    minimum_order_amount: float | None = None
    maximum_discount_amount: float | None = None
    usage_limit: int | None = None
    used_count: int = 0


@dataclass(frozen=True)
class DiscountOutcome:
    is_valid: bool
    discount_amount: float
    message: str


def _as_utc(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def is_within_window(terms: OfferTerms, now: datetime) -> bool:
    return _as_utc(terms.valid_from) <= _as_utc(now) <= _as_utc(terms.valid_until)


def compute_discount(
    terms: OfferTerms | None, order_amount: float, now: datetime,
) -> DiscountOutcome:
    """Evaluate an offer for an order. Pure, no IO."""
    if terms is None:
        return DiscountOutcome(False, 0.0, "Offer not found")
    if not terms.is_active or not is_within_window(terms, now):
        return DiscountOutcome(False, 0.0, "Offer has expired")
    if (
        terms.minimum_order_amount
        and order_amount < terms.minimum_order_amount
    ):
        return DiscountOutcome(
            False, 0.0,
            f"Minimum order amount is ₹{terms.minimum_order_amount:.2f}",
        )
    if terms.usage_limit and terms.used_count >= terms.usage_limit:
        return DiscountOutcome(False, 0.0, "Offer usage limit reached")

    if terms.discount_type is DiscountType.PERCENTAGE:
        discount = order_amount * terms.discount_value / 100
    elif terms.discount_type is DiscountType.FIXED_AMOUNT:
        discount = terms.discount_value
    else:
        discount = 0.0

    if terms.maximum_discount_amount and discount > terms.maximum_discount_amount:
        discount = terms.maximum_discount_amount

    return DiscountOutcome(
        True, round(min(discount, order_amount), 2), "Offer applied successfully",
    )
