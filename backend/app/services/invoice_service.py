"""Invoice Service — invoice statistics derived from orders.

Invariants:
    - Default period is the start of the current year until now
    - Paid = payment_status "completed"; pending = payment_status "pending"
"""

from datetime import datetime, timezone
from typing import Callable

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.analytics import start_of_year, summarize_invoices
from app.core.domain_types import DateRange
from app.schemas.admin import InvoiceStatistics
from app.services.order_service import load_order_rows


class SqlInvoiceService:
    def __init__(
        self,
        db: AsyncSession,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.db = db
        self.clock = clock

    async def get_invoice_statistics(
        self, date_range: DateRange | None = None,
    ) -> InvoiceStatistics:
        period = date_range or start_of_year(self.clock())
        rows = await load_order_rows(self.db, period.start, period.end)
        return InvoiceStatistics(**summarize_invoices(rows))
