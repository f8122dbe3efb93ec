"""Order Analytics — verifies aggregation of order rows.

Tests:
    - Empty input yields zeros
    - Order summary: totals, average, status breakdown, sorted daily series
    - Invoice summary: paid vs pending split and YYYY-MM breakdown
    - Dashboard figures compare against the previous period of equal length
"""

from datetime import datetime, timedelta, timezone

from app.core.analytics import (
    OrderRow, dashboard_figures, default_range, growth_percentage,
    previous_period, start_of_year, summarize_invoices, summarize_orders,
)
from app.core.domain_types import DateRange

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


def _row(days_ago: float, total: float, status="delivered", payment="completed"):
    return OrderRow(
        created_at=NOW - timedelta(days=days_ago), total=total,
        status=status, payment_status=payment,
    )


def test_empty_summaries_are_zero():
    orders = summarize_orders([])
    assert orders["total_orders"] == 0
    assert orders["average_order_value"] == 0.0
    assert orders["daily_orders"] == []
    invoices = summarize_invoices([])
    assert invoices["summary"]["average_order_value"] == 0.0
    assert invoices["monthly_breakdown"] == []


def test_summarize_orders():
    rows = [
        _row(0, 100.0),
        _row(0, 50.5, status="pending"),
        _row(2, 200.0, status="cancelled"),
    ]
    summary = summarize_orders(rows)
    assert summary["total_orders"] == 3
    assert summary["total_revenue"] == 350.5
    assert summary["average_order_value"] == 116.83
    assert summary["orders_by_status"] == {
        "delivered": 1, "pending": 1, "cancelled": 1,
    }
    assert summary["daily_orders"] == [
        {"date": "2024-06-13", "orders": 1, "revenue": 200.0},
        {"date": "2024-06-15", "orders": 2, "revenue": 150.5},
    ]


def test_naive_timestamps_bucket_as_utc():
    row = OrderRow(
        created_at=datetime(2024, 6, 15, 23, 30), total=10.0,
        status="pending", payment_status="pending",
    )
    assert summarize_orders([row])["daily_orders"][0]["date"] == "2024-06-15"


def test_summarize_invoices():
    rows = [
        _row(0, 100.0),
        _row(40, 300.0, payment="pending"),
        _row(41, 60.0, payment="failed"),
    ]
    result = summarize_invoices(rows)
    assert result["summary"] == {
        "total_invoices": 3,
        "total_revenue": 460.0,
        "paid_invoices": 1,
        "paid_revenue": 100.0,
        "pending_invoices": 1,
        "pending_revenue": 300.0,
        "average_order_value": 153.33,
    }
    assert [m["month"] for m in result["monthly_breakdown"]] == ["2024-05", "2024-06"]
    assert result["monthly_breakdown"][0] == {
        "month": "2024-05", "invoices": 2, "revenue": 360.0, "avg_order_value": 180.0,
    }


def test_growth_percentage():
    assert growth_percentage(150, 100) == 50.0
    assert growth_percentage(50, 100) == -50.0
    assert growth_percentage(1, 3) == -66.67
    assert growth_percentage(10, 0) == 0.0


def test_periods():
    period = default_range(NOW)
    assert period == DateRange(start=NOW - timedelta(days=30), end=NOW)
    assert previous_period(period) == DateRange(
        start=NOW - timedelta(days=60), end=NOW - timedelta(days=30),
    )
    assert start_of_year(NOW).start == datetime(2024, 1, 1, tzinfo=timezone.utc)


def test_dashboard_figures_growth_vs_previous_period():
    rows = [
        _row(0, 100.0),
        _row(1, 100.0, status="pending"),
        _row(5, 100.0, status="cancelled"),
        _row(40, 150.0),
    ]
    figures = dashboard_figures(rows, default_range(NOW), NOW)
    assert figures["total_revenue"] == 300.0
    assert figures["delivered_orders"] == 1
    assert figures["pending_orders"] == 1
    assert figures["cancelled_orders"] == 1
    assert figures["today_orders"] == 1
    assert figures["today_revenue"] == 100.0
    assert figures["order_growth"] == 200.0
    assert figures["revenue_growth"] == 100.0
