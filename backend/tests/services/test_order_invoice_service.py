"""Order & Invoice Services — verifies date-bounded analytics over stored orders."""

from datetime import datetime, timedelta, timezone

from app.core.domain_types import DateRange
from app.services.invoice_service import SqlInvoiceService
from app.services.order_service import SqlOrderService

JAN = datetime(2024, 1, 10, 12, 0, tzinfo=timezone.utc)


async def test_order_analytics_bounds(test_db, add_user, add_order):
    user = await add_user()
    await add_order(user, "100.00", status="delivered", created_at=JAN)
    await add_order(user, "300.00", status="pending", created_at=JAN + timedelta(days=1))
    await add_order(user, "50.00", status="cancelled", created_at=JAN + timedelta(days=40))
    service = SqlOrderService(test_db)

    everything = await service.get_order_analytics(None, None)
    assert everything.total_orders == 3
    assert everything.total_revenue == 450.0

    january = await service.get_order_analytics(None, JAN + timedelta(days=5))
    assert january.total_orders == 2
    assert january.average_order_value == 200.0
    assert january.orders_by_status == {"delivered": 1, "pending": 1}
    assert [d.date for d in january.daily_orders] == ["2024-01-10", "2024-01-11"]

    later = await service.get_order_analytics(JAN + timedelta(days=2), None)
    assert later.total_orders == 1


async def test_invoice_statistics_range(test_db, add_user, add_order):
    user = await add_user()
    await add_order(user, "100.00", payment_status="completed", created_at=JAN)
    await add_order(user, "60.00", payment_status="pending", created_at=JAN + timedelta(days=30))
    await add_order(user, "80.00", payment_status="completed", created_at=JAN - timedelta(days=60))

    stats = await SqlInvoiceService(test_db).get_invoice_statistics(
        DateRange(start=datetime(2024, 1, 1, tzinfo=timezone.utc), end=JAN + timedelta(days=60)),
    )
    assert stats.summary.total_invoices == 2
    assert stats.summary.paid_revenue == 100.0
    assert stats.summary.pending_revenue == 60.0
    assert [m.month for m in stats.monthly_breakdown] == ["2024-01", "2024-02"]


async def test_invoice_statistics_default_is_year_to_date(test_db, add_user, add_order):
    user = await add_user()
    await add_order(user, "100.00", created_at=JAN)
    await add_order(user, "40.00", created_at=JAN - timedelta(days=30))

    stats = await SqlInvoiceService(
        test_db, clock=lambda: datetime(2024, 3, 1, tzinfo=timezone.utc),
    ).get_invoice_statistics()
    assert stats.summary.total_invoices == 1
    assert stats.summary.total_revenue == 100.0
