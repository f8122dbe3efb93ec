"""ORM Models — SQLAlchemy declarative models for all persisted entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - User is the owner of addresses and orders; an order owns its items

Design Decisions:
    - One file per aggregate for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from app.models.user import User  # noqa: F401
from app.models.menu import Category, MenuItem  # noqa: F401
from app.models.order import Address, Order, OrderItem  # noqa: F401
from app.models.offer import Offer, OfferInteraction  # noqa: F401
