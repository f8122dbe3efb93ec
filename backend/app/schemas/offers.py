"""Offer Schemas — display offers, discount evaluation and interaction tracking.

Invariants:
    - DiscountResult mirrors the service outcome exactly (route returns it unchanged)
    - InteractionCreate.interaction_type is restricted to InteractionType values
"""

from datetime import datetime
from uuid import UUID

from pydantic import field_validator

from app.core.domain_types import InteractionType
from app.schemas.common import ApiModel


class OfferOut(ApiModel):
    id: UUID
    title: str
    description: str
    type: str
    discount_type: str
    discount_value: float
    minimum_order_amount: float | None = None
    maximum_discount_amount: float | None = None
    target_audience: str = "all"
    priority: int = 0
    valid_from: datetime
    valid_until: datetime
    popup_delay_seconds: int = 10
    show_frequency_hours: int = 24

    @field_validator(
        "discount_value", "minimum_order_amount", "maximum_discount_amount",
        mode="before",
    )
    @classmethod
    def decimal_to_float(cls, v):
        return float(v) if v is not None else None


class DiscountResult(ApiModel):
    is_valid: bool
    discount_amount: float
    message: str


class InteractionCreate(ApiModel):
    """Body of POST /api/offers/interact (after required-field checks)."""
    offer_id: UUID
    interaction_type: InteractionType
    order_id: UUID | None = None


class InteractionRecord(ApiModel):
    offer_id: UUID
    interaction_type: InteractionType
    user_id: str | None = None
    session_id: str | None = None
    timestamp: datetime
