"""
Sales Report Engine - revenue, cost, profit and loss over a set of sales.

Pure functions with no I/O.  The reporting service loads sales, the latest
purchase cost of each product and the completed returns, then calls
``SalesReportCalculator.build``.

    total_revenue = sum(sale totals)            (tax included)
    total_cost    = sum(unit cost x quantity)   (latest completed purchase cost)
    gross_profit  = total_revenue - total_cost
    total_loss    = sum(completed return values)

Products never purchased have no known cost and contribute zero cost.
"""

from __future__ import annotations

import time
from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Mapping, Sequence
from uuid import UUID

from pos_kernel.domain.values import Currency, Money
from pos_kernel.logging_config import get_logger

logger = get_logger("engines.sales_report")

UNCATEGORIZED = "Uncategorized"


@dataclass(frozen=True)
class ReportLine:
    product_id: UUID | str
    category: str | None
    unit_price: Money
    quantity: int

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class ReportSale:
    sale_id: UUID | str
    day: date
    total: Money
    lines: tuple[ReportLine, ...]


@dataclass(frozen=True)
class SalesReport:
    total_revenue: Money
    total_cost: Money
    gross_profit: Money
    total_loss: Money
    sale_count: int
    sales_by_day: tuple[tuple[date, Money], ...]
    sales_by_category: tuple[tuple[str, Money], ...]

    @property
    def net_profit(self) -> Money:
        """Gross profit less the value of goods returned."""
        return self.gross_profit - self.total_loss


class SalesReportCalculator:
    """Aggregates sales into the figures shown on the reports page."""

    def build(
        self,
        sales: Sequence[ReportSale],
        unit_costs: Mapping[UUID | str, Money],
        returns: Iterable[Money] = (),
        currency: str | Currency = "USD",
    ) -> SalesReport:
        t0 = time.monotonic()
        zero = Money.zero(currency)

        revenue = zero
        cost = zero
        by_day: dict[date, Money] = defaultdict(lambda: zero)
        by_category: dict[str, Money] = defaultdict(lambda: zero)
        missing_costs: set[str] = set()

        for sale in sales:
            revenue = revenue + sale.total
            by_day[sale.day] = by_day[sale.day] + sale.total
            for line in sale.lines:
                unit_cost = unit_costs.get(line.product_id)
                if unit_cost is None:
                    missing_costs.add(str(line.product_id))
                else:
                    cost = cost + unit_cost * line.quantity
                category = line.category or UNCATEGORIZED
                by_category[category] = by_category[category] + line.line_total

        loss = Money.total(returns, currency)
        cost = cost.round()

        report = SalesReport(
            total_revenue=revenue,
            total_cost=cost,
            gross_profit=revenue - cost,
            total_loss=loss,
            sale_count=len(sales),
            sales_by_day=tuple(sorted(by_day.items())),
            sales_by_category=tuple(
                (name, amount)
                for name, amount in sorted(by_category.items())
                if amount.is_positive
            ),
        )

        if missing_costs:
            logger.warning("sales_report_missing_costs", extra={
                "product_count": len(missing_costs),
            })
        logger.info("sales_report_built", extra={
            "sale_count": report.sale_count,
            "total_revenue": str(report.total_revenue.amount),
            "total_cost": str(report.total_cost.amount),
            "gross_profit": str(report.gross_profit.amount),
            "total_loss": str(report.total_loss.amount),
            "duration_ms": round((time.monotonic() - t0) * 1000, 2),
        })
        return report
