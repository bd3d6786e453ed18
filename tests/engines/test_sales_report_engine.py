"""Tests for the sales report engine."""

from datetime import date

import pytest

from pos_engines.sales_report import (
    UNCATEGORIZED,
    ReportLine,
    ReportSale,
    SalesReportCalculator,
)
from pos_kernel.domain.values import Money


def usd(amount: str) -> Money:
    return Money.of(amount, "USD")


@pytest.fixture
def sales():
    return [
        ReportSale(
            sale_id="s1",
            day=date(2024, 3, 2),
            total=usd("11.47"),
            lines=(
                ReportLine("cola", "Drinks", usd("2.99"), 2),
                ReportLine("chips", "Snacks", usd("5.49"), 1),
            ),
        ),
        ReportSale(
            sale_id="s2",
            day=date(2024, 3, 1),
            total=usd("5.98"),
            lines=(ReportLine("cola", "Drinks", usd("2.99"), 2),),
        ),
        ReportSale(
            sale_id="s3",
            day=date(2024, 3, 2),
            total=usd("3.00"),
            lines=(ReportLine("soap", None, usd("3.00"), 1),),
        ),
    ]


@pytest.fixture
def unit_costs():
    return {"cola": usd("1.50"), "chips": usd("3.00")}


class TestSalesReport:

    def test_revenue_cost_profit(self, sales, unit_costs):
        report = SalesReportCalculator().build(sales, unit_costs, currency="USD")
        assert report.total_revenue == usd("20.45")
        # cola 4 x 1.50 + chips 1 x 3.00; soap has no cost
        assert report.total_cost == usd("9.00")
        assert report.gross_profit == usd("11.45")
        assert report.sale_count == 3

    def test_loss_from_returns(self, sales, unit_costs):
        report = SalesReportCalculator().build(
            sales, unit_costs, returns=[usd("2.99"), usd("5.49")], currency="USD",
        )
        assert report.total_loss == usd("8.48")
        assert report.net_profit == usd("2.97")

    def test_sales_by_day_sorted(self, sales, unit_costs):
        report = SalesReportCalculator().build(sales, unit_costs, currency="USD")
        assert report.sales_by_day == (
            (date(2024, 3, 1), usd("5.98")),
            (date(2024, 3, 2), usd("14.47")),
        )

    def test_sales_by_category(self, sales, unit_costs):
        report = SalesReportCalculator().build(sales, unit_costs, currency="USD")
        assert dict(report.sales_by_category) == {
            "Drinks": usd("11.96"),
            "Snacks": usd("5.49"),
            UNCATEGORIZED: usd("3.00"),
        }

    def test_missing_cost_logged(self, sales, captured_logs):
        SalesReportCalculator().build(sales, {}, currency="USD")
        assert any(
            r["message"] == "sales_report_missing_costs" and r["product_count"] == 3
            for r in captured_logs()
        )

    def test_empty(self):
        report = SalesReportCalculator().build([], {}, currency="USD")
        assert report.total_revenue.is_zero
        assert report.sales_by_day == ()
        assert report.sales_by_category == ()
