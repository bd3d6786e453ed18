"""
pos_modules.reporting.service
=============================

Responsibility:
    Assemble the sales report for a date range.  Sales, purchase costs and
    completed returns are read through their own services and handed to
    ``pos_engines.sales_report.SalesReportCalculator``; nothing is written.
"""

from __future__ import annotations

from datetime import date

from sqlalchemy.orm import Session

from pos_config.schema import StoreSettings
from pos_engines.sales_report import (
    ReportLine,
    ReportSale,
    SalesReport,
    SalesReportCalculator,
)
from pos_kernel.domain.clock import Clock, SystemClock
from pos_kernel.domain.values import Money
from pos_kernel.logging_config import get_logger
from pos_modules.purchasing.service import PurchasingService
from pos_modules.returns.models import ReturnStatus
from pos_modules.returns.service import ReturnsService
from pos_modules.sales.models import Sale
from pos_modules.sales.service import SalesService

logger = get_logger("modules.reporting.service")


class ReportingService:
    """Read-only reports over sales, purchases and returns."""

    def __init__(
        self,
        session: Session,
        settings: StoreSettings,
        clock: Clock | None = None,
    ):
        self._settings = settings
        clock = clock or SystemClock()
        self._sales = SalesService(session, settings, clock)
        self._purchasing = PurchasingService(session, clock)
        self._returns = ReturnsService(session, clock)
        self._calculator = SalesReportCalculator()

    def sales_report(
        self,
        start: date | None = None,
        end: date | None = None,
    ) -> SalesReport:
        """
        Revenue, cost, profit and loss for sales made between ``start`` and
        ``end`` inclusive.

        Cost uses each product's unit cost on its latest completed purchase.
        Loss is the value of completed returns dated inside the range.
        """
        currency = self._settings.currency
        sales = [self._to_report_sale(s) for s in self._sales.list_sales(start, end)]
        unit_costs = {
            product_id: Money.of(cost, currency)
            for product_id, cost in self._purchasing.latest_unit_costs().items()
        }
        returns = [
            Money.of(r.total_value, currency)
            for r in self._returns.list_returns(ReturnStatus.COMPLETED, start, end)
        ]
        report = self._calculator.build(
            sales, unit_costs, returns=returns, currency=currency,
        )
        logger.info("report_generated", extra={
            "start": start.isoformat() if start else None,
            "end": end.isoformat() if end else None,
            "sale_count": report.sale_count,
            "total_revenue": str(report.total_revenue.amount),
        })
        return report

    @staticmethod
    def _to_report_sale(sale: Sale) -> ReportSale:
        return ReportSale(
            sale_id=sale.id,
            day=sale.sale_day,
            total=Money.of(sale.total, sale.currency),
            lines=tuple(
                ReportLine(
                    product_id=item.product_id,
                    category=item.category,
                    unit_price=Money.of(item.price, sale.currency),
                    quantity=item.quantity,
                )
                for item in sale.items
            ),
        )
