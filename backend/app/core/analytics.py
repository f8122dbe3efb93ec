"""Order Analytics — pure aggregation of order rows into dashboard figures.

Invariants:
    - All inputs are plain OrderRow values (no IO, no DB)
    - Money is summed as float and rounded to 2 decimals on output
    - Empty input yields zeros, never raises (no division by zero)
    - Naive timestamps are treated as UTC (SQLite drops tzinfo on round-trip)

Design Decisions:
    - Aggregation in Python over dialect SQL (TO_CHAR, date_trunc): identical results
      on PostgreSQL and the SQLite test database
    - Returned dicts use the field names of the matching response schemas
"""

from collections import Counter, defaultdict
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Iterable

from app.core.domain_types import DateRange, PaymentStatus


@dataclass(frozen=True)
class OrderRow:
    created_at: datetime
    total: float
    status: str
    payment_status: str


def as_utc(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def _money(value: float) -> float:
    return round(value, 2)


def default_range(now: datetime, days: int = 30) -> DateRange:
    return DateRange(start=now - timedelta(days=days), end=now)


def start_of_year(now: datetime) -> DateRange:
    start = datetime(now.year, 1, 1, tzinfo=now.tzinfo or timezone.utc)
    return DateRange(start=start, end=now)


def previous_period(current: DateRange) -> DateRange:
    """Period of equal length ending where the current one starts."""
    length = current.end - current.start
    return DateRange(start=current.start - length, end=current.start)


def growth_percentage(current: float, previous: float) -> float:
    """Percent change vs previous, 0 when there is no previous baseline."""
    if previous <= 0:
        return 0.0
    return round((current - previous) / previous * 100, 2)


def in_range(rows: Iterable[OrderRow], period: DateRange) -> list[OrderRow]:
    start, end = as_utc(period.start), as_utc(period.end)
    return [r for r in rows if start <= as_utc(r.created_at) <= end]


def summarize_orders(rows: list[OrderRow]) -> dict:
    """Totals, status breakdown and per-day series for a set of orders."""
    total_revenue = sum(r.total for r in rows)
    by_status = Counter(r.status for r in rows)
    daily: dict[str, list[float]] = defaultdict(list)
    for r in rows:
        daily[as_utc(r.created_at).date().isoformat()].append(r.total)

    return {
        "total_orders": len(rows),
        "total_revenue": _money(total_revenue),
        "average_order_value": _money(total_revenue / len(rows)) if rows else 0.0,
        "orders_by_status": dict(by_status),
        "daily_orders": [
            {"date": day, "orders": len(totals), "revenue": _money(sum(totals))}
            for day, totals in sorted(daily.items())
        ],
    }


def summarize_invoices(rows: list[OrderRow]) -> dict:
    """Invoice summary (paid vs pending) and a YYYY-MM monthly breakdown."""
    paid = [r for r in rows if r.payment_status == PaymentStatus.COMPLETED.value]
    pending = [r for r in rows if r.payment_status == PaymentStatus.PENDING.value]
    total_revenue = sum(r.total for r in rows)

    monthly: dict[str, list[float]] = defaultdict(list)
    for r in rows:
        monthly[as_utc(r.created_at).strftime("%Y-%m")].append(r.total)

    return {
        "summary": {
            "total_invoices": len(rows),
            "total_revenue": _money(total_revenue),
            "paid_invoices": len(paid),
            "paid_revenue": _money(sum(r.total for r in paid)),
            "pending_invoices": len(pending),
            "pending_revenue": _money(sum(r.total for r in pending)),
            "average_order_value": (
                _money(total_revenue / len(rows)) if rows else 0.0
            ),
        },
        "monthly_breakdown": [
            {
                "month": month,
                "invoices": len(totals),
                "revenue": _money(sum(totals)),
                "avg_order_value": _money(sum(totals) / len(totals)),
            }
            for month, totals in sorted(monthly.items())
        ],
    }


def dashboard_figures(
    rows: list[OrderRow], period: DateRange, now: datetime,
) -> dict:
    """Revenue, status counts, today's numbers and growth vs previous period."""
    current = in_range(rows, period)
    previous = in_range(rows, previous_period(period))
    today_start = as_utc(now).replace(hour=0, minute=0, second=0, microsecond=0)
    today = in_range(
        rows, DateRange(start=today_start, end=today_start + timedelta(days=1)),
    )
    statuses = Counter(r.status for r in current)
    current_revenue = sum(r.total for r in current)
    previous_revenue = sum(r.total for r in previous)

    return {
        "total_revenue": _money(current_revenue),
        "delivered_orders": statuses.get("delivered", 0),
        "pending_orders": statuses.get("pending", 0),
        "cancelled_orders": statuses.get("cancelled", 0),
        "today_orders": len(today),
        "today_revenue": _money(sum(r.total for r in today)),
        "order_growth": growth_percentage(len(current), len(previous)),
        "revenue_growth": growth_percentage(current_revenue, previous_revenue),
    }
