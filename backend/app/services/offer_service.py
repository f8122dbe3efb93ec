"""Offer Service — active offers, popup selection, discounts and interaction tracking.

Invariants:
    - Active = is_active and valid_from <= now <= valid_until
    - An offer of type "both" is shown for every display type
    - Popup offers exclude anything the visitor interacted with inside the
      interaction window (user id takes precedence over session id)
    - track_interaction bumps the matching counter in the same transaction

Design Decisions:
    - Discount math delegated to core.discounts (pure, unit-tested without a DB)
    - Clock injected: tests pin "now" instead of patching datetime
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.discounts import OfferTerms, compute_discount
from app.core.domain_types import DiscountType, InteractionType, OfferType
from app.core.errors import ResourceNotFoundError
from app.models.offer import Offer, OfferInteraction
from app.schemas.offers import DiscountResult, OfferOut

logger = logging.getLogger(__name__)

_COUNTERS = {
    InteractionType.VIEWED: "view_count",
    InteractionType.CLICKED: "click_count",
    InteractionType.CONVERTED: "conversion_count",
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _to_float(value) -> float | None:
    return float(value) if value is not None else None


def offer_terms(offer: Offer) -> OfferTerms:
    return OfferTerms(
        discount_type=DiscountType(offer.discount_type),
        discount_value=float(offer.discount_value),
        is_active=offer.is_active,
        valid_from=offer.valid_from,
        valid_until=offer.valid_until,
        minimum_order_amount=_to_float(offer.minimum_order_amount),
        maximum_discount_amount=_to_float(offer.maximum_discount_amount),
        usage_limit=offer.usage_limit,
        used_count=offer.used_count or 0,
    )


class SqlOfferService:
    """Offer reads and writes for the public offers routes."""

    def __init__(
        self,
        db: AsyncSession,
        interaction_window_hours: int = 24,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.db = db
        self.interaction_window = timedelta(hours=interaction_window_hours)
        self.clock = clock

    async def _active_rows(self) -> list[Offer]:
        now = self.clock()
        result = await self.db.execute(
            select(Offer)
            .where(Offer.is_active.is_(True))
            .where(Offer.valid_from <= now)
            .where(Offer.valid_until >= now)
            .order_by(Offer.priority.desc(), Offer.created_at.desc()),
        )
        return list(result.scalars().all())

    async def get_active_offers(
        self, offer_type: OfferType | None = None, audience: str = "all",
    ) -> list[OfferOut]:
        rows = await self._active_rows()
        if offer_type is not None:
            rows = [
                o for o in rows
                if o.type in (offer_type.value, OfferType.BOTH.value)
            ]
        rows = [o for o in rows if o.target_audience in ("all", audience)]
        return [OfferOut.model_validate(o) for o in rows]

    async def get_popup_offers(
        self, user_id: str | None, session_id: str,
    ) -> list[OfferOut]:
        offers = await self.get_active_offers(OfferType.POPUP)
        if not offers:
            return []

        threshold = self.clock() - self.interaction_window
        query = select(OfferInteraction.offer_id).where(
            OfferInteraction.created_at >= threshold,
        )
        if user_id:
            query = query.where(OfferInteraction.user_id == user_id)
        else:
            query = query.where(OfferInteraction.session_id == session_id)
        result = await self.db.execute(query)
        seen = set(result.scalars().all())
        return [o for o in offers if o.id not in seen]

    async def apply_offer_discount(
        self, offer_id: UUID, order_amount: float,
    ) -> DiscountResult:
        offer = await self.db.get(Offer, offer_id)
        outcome = compute_discount(
            offer_terms(offer) if offer else None, order_amount, self.clock(),
        )
        return DiscountResult(
            is_valid=outcome.is_valid,
            discount_amount=outcome.discount_amount,
            message=outcome.message,
        )

    async def track_interaction(
        self,
        offer_id: UUID,
        interaction_type: InteractionType,
        user_id: str | None = None,
        session_id: str | None = None,
        order_id: UUID | None = None,
    ) -> None:
        offer = await self.db.get(Offer, offer_id)
        if offer is None:
            raise ResourceNotFoundError("Offer", str(offer_id))

        self.db.add(OfferInteraction(
            offer_id=offer_id,
            user_id=user_id,
            session_id=session_id,
            interaction_type=interaction_type.value,
            order_id=order_id,
            created_at=self.clock(),
        ))
        counter = _COUNTERS.get(interaction_type)
        if counter:
            column = getattr(Offer, counter)
            await self.db.execute(
                update(Offer)
                .where(Offer.id == offer_id)
                .values({counter: column + 1}),
            )
        await self.db.commit()
        logger.info(
            f"Offer {offer_id} {interaction_type.value}",
            extra={"session_id": session_id, "user_id": user_id},
        )
