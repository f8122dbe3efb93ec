"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - AuthenticatedIdentity is request-scoped and immutable
    - DateRange always carries both bounds (absent range is None, never half-open)
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers for ids: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", UUID)
MenuItemId = NewType("MenuItemId", UUID)
OfferId = NewType("OfferId", UUID)

# Produces a fresh correlation id for anonymous visitors
SessionIdGenerator = Callable[[], str]


# ─── Enums ───────────────────────────────────────────────────────

class UserRole(str, Enum):
    """Roles stored on users and carried in identity tokens."""
    CUSTOMER = "customer"
    ADMIN = "admin"
    KITCHEN_STAFF = "kitchen_staff"


class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    READY = "ready"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"


class OfferType(str, Enum):
    """Where an offer is displayed. BOTH matches every display type."""
    BANNER = "banner"
    POPUP = "popup"
    NOTIFICATION = "notification"
    BOTH = "both"


class DiscountType(str, Enum):
    PERCENTAGE = "percentage"
    FIXED_AMOUNT = "fixed_amount"
    FREE_DELIVERY = "free_delivery"


class InteractionType(str, Enum):
    VIEWED = "viewed"
    CLICKED = "clicked"
    DISMISSED = "dismissed"
    CONVERTED = "converted"


# ─── Value Types ─────────────────────────────────────────────────

@dataclass(frozen=True)
class AuthenticatedIdentity:
    """Caller identity resolved by the auth gate."""
    user_id: str
    role: UserRole = UserRole.CUSTOMER
    claims: dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def is_admin(self) -> bool:
        return self.role is UserRole.ADMIN


@dataclass(frozen=True)
class DateRange:
    """Closed interval of instants passed to analytics queries."""
    start: datetime
    end: datetime
