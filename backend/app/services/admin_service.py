"""Admin Service — dashboard statistics, customer analytics and user details.

Invariants:
    - Dashboard default period is the last 30 days; growth compares against the
      period of equal length immediately before it
    - Entity totals (users, orders, items, categories) are all-time counts
    - get_user_details raises ResourceNotFoundError for unknown users
    - User statistics only count orders whose payment completed

Design Decisions:
    - Growth and period math live in core.analytics (pure); this module only queries
    - Customer segments sorted in Python: NULL ordering of SUM differs between
      PostgreSQL and SQLite
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable
from uuid import UUID

from sqlalchemy import distinct, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.analytics import (
    dashboard_figures, default_range, previous_period,
)
from app.core.domain_types import DateRange, PaymentStatus
from app.core.errors import ResourceNotFoundError
from app.models.menu import Category, MenuItem
from app.models.order import Address, Order
from app.models.user import User
from app.schemas.admin import (
    AddressOut, CustomerAnalytics, CustomerSegment, DashboardStats,
    RecentOrder, UserDetails, UserStatistics,
)
from app.services.order_service import load_order_rows

logger = logging.getLogger(__name__)

NEW_CUSTOMER_WINDOW = timedelta(days=30)
RECENT_ORDER_LIMIT = 10


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SqlAdminService:
    """Read-only admin analytics."""

    def __init__(self, db: AsyncSession, clock: Callable[[], datetime] = _utcnow):
        self.db = db
        self.clock = clock

    async def _count(self, model) -> int:
        return await self.db.scalar(select(func.count()).select_from(model)) or 0

    async def get_dashboard_stats(
        self, date_range: DateRange | None,
    ) -> DashboardStats:
        now = self.clock()
        period = date_range or default_range(now)
        today_start = now.replace(hour=0, minute=0, second=0, microsecond=0)
        window_start = min(previous_period(period).start, today_start)
        window_end = max(period.end, today_start + timedelta(days=1))
        rows = await load_order_rows(self.db, window_start, window_end)

        return DashboardStats(
            total_users=await self._count(User),
            total_orders=await self._count(Order),
            total_menu_items=await self._count(MenuItem),
            total_categories=await self._count(Category),
            **dashboard_figures(rows, period, now),
        )

    async def get_customer_analytics(self) -> CustomerAnalytics:
        result = await self.db.execute(
            select(
                User.id, User.email, User.first_name, User.last_name,
                User.loyalty_points,
                func.count(Order.id),
                func.sum(Order.total),
                func.max(Order.created_at),
            )
            .outerjoin(Order, Order.user_id == User.id)
            .group_by(
                User.id, User.email, User.first_name, User.last_name,
                User.loyalty_points,
            ),
        )
        segments = [
            CustomerSegment(
                user_id=user_id, email=email,
                first_name=first_name, last_name=last_name,
                loyalty_points=loyalty_points or 0,
                total_orders=order_count,
                total_spent=round(float(spent or 0), 2),
                last_order_date=last_order,
            )
            for (
                user_id, email, first_name, last_name, loyalty_points,
                order_count, spent, last_order,
            ) in result.all()
        ]
        segments.sort(key=lambda s: s.total_spent, reverse=True)

        cutoff = self.clock() - NEW_CUSTOMER_WINDOW
        new_customers = await self.db.scalar(
            select(func.count()).select_from(User).where(User.created_at >= cutoff),
        ) or 0
        returning_customers = await self.db.scalar(
            select(func.count(distinct(Order.user_id)))
            .join(User, Order.user_id == User.id)
            .where(Order.created_at >= cutoff)
            .where(User.created_at <= cutoff),
        ) or 0

        return CustomerAnalytics(
            customer_segments=segments,
            new_customers=new_customers,
            returning_customers=returning_customers,
        )

    async def get_user_details(self, user_id: UUID) -> UserDetails:
        user = await self.db.get(User, user_id)
        if user is None:
            raise ResourceNotFoundError("User", str(user_id))

        addresses = await self.db.execute(
            select(Address)
            .where(Address.user_id == user_id)
            .order_by(Address.is_default.desc(), Address.created_at),
        )
        recent = await self.db.execute(
            select(Order)
            .where(Order.user_id == user_id)
            .order_by(Order.created_at.desc())
            .limit(RECENT_ORDER_LIMIT),
        )
        stats = await self.db.execute(
            select(func.count(Order.id), func.sum(Order.total), func.avg(Order.total))
            .where(Order.user_id == user_id)
            .where(Order.payment_status == PaymentStatus.COMPLETED.value),
        )
        total_orders, total_spent, avg_value = stats.one()

        return UserDetails(
            id=user.id,
            external_id=user.external_id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            phone=user.phone,
            role=user.role,
            is_active=user.is_active,
            loyalty_points=user.loyalty_points,
            created_at=user.created_at,
            addresses=[AddressOut.model_validate(a) for a in addresses.scalars().all()],
            recent_orders=[RecentOrder.model_validate(o) for o in recent.scalars().all()],
            statistics=UserStatistics(
                total_orders=total_orders or 0,
                total_spent=round(float(total_spent or 0), 2),
                avg_order_value=round(float(avg_value or 0), 2),
            ),
        )
