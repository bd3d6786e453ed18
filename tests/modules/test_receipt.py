"""Tests for plain-text receipts."""

from decimal import Decimal

from pos_config.schema import StoreSettings
from pos_modules.sales.cart import Cart
from pos_modules.sales.models import PaymentMethod
from pos_modules.sales.receipt import WIDTH, render_receipt


def _row(left: str, right: str) -> str:
    return left + " " * (WIDTH - len(left) - len(right)) + right


def _checkout(service, cola, cola_330, chips, method, **kwargs):
    cart = Cart()
    cart.add(cola, cola_330, quantity=2)
    cart.add(chips, chips.variants[0])
    return service.checkout(cart, method, **kwargs).sale


class TestRenderReceipt:

    def test_cash_receipt_with_tax(self, taxed_sales_service, taxed_settings, cola, cola_330, chips):
        sale = _checkout(
            taxed_sales_service, cola, cola_330, chips,
            PaymentMethod.CASH, amount_tendered=Decimal("20.00"),
        )
        text = render_receipt(sale, taxed_settings)
        lines = text.splitlines()

        assert lines[0].strip() == "Cashy"
        assert lines[1].strip() == "Thank you for shopping with us!"
        assert _row("Receipt:", str(sale.id)[:8].upper()) in lines
        assert _row("Date:", "2024-03-15 10:00") in lines
        assert "Cola (330ml)" in lines
        assert _row("  2 x $2.99", "$5.98") in lines
        assert _row("  1 x $5.49", "$5.49") in lines
        assert _row("Subtotal", "$11.47") in lines
        assert _row("Tax (8%)", "$0.92") in lines
        assert _row("TOTAL", "$12.39") in lines
        assert _row("Payment", "Cash") in lines
        assert _row("Tendered", "$20.00") in lines
        assert _row("Change", "$7.61") in lines
        assert lines[-1].strip() == "Please come again."
        assert all(len(line) <= WIDTH for line in lines)
        assert text.endswith("\n")

    def test_untaxed_receipt_has_no_tax_row(self, sales_service, settings, cola, cola_330, chips):
        sale = _checkout(sales_service, cola, cola_330, chips, PaymentMethod.CARD)
        text = render_receipt(sale, settings)
        assert "Tax" not in text
        assert "Change" not in text
        assert _row("TOTAL", "$11.47") in text.splitlines()

    def test_credit_receipt_shows_balance(self, sales_service, settings, cola, cola_330, chips):
        sale = _checkout(
            sales_service, cola, cola_330, chips,
            PaymentMethod.CREDIT, customer_name="Kamal Silva",
        )
        lines = render_receipt(sale, settings).splitlines()
        assert _row("Customer:", "Kamal Silva") in lines
        assert _row("Due date", "2024-04-14") in lines
        assert _row("Balance due", "$11.47") in lines

    def test_header_and_footer_optional(self, sales_service, cola, cola_330, chips):
        sale = _checkout(sales_service, cola, cola_330, chips, PaymentMethod.CARD)
        bare = StoreSettings(
            store_name="Corner Shop", receipt_header_text="", receipt_footer_text="",
        )
        lines = render_receipt(sale, bare).splitlines()
        assert lines[0].strip() == "Corner Shop"
        assert lines[1] == "-" * WIDTH
        assert lines[-1] == _row("Payment", "Card")

    def test_reprint_uses_rate_charged_on_sale(
        self, taxed_sales_service, sales_service, taxed_settings, cola, cola_330, chips,
    ):
        sale = _checkout(taxed_sales_service, cola, cola_330, chips, PaymentMethod.CARD)
        stored = sales_service.get_sale(sale.id)
        assert stored.tax_rate == Decimal("8")

        raised = StoreSettings(enable_tax=True, tax_rate="12.5")
        lines = render_receipt(stored, raised).splitlines()
        assert _row("Tax (8%)", "$0.92") in lines
        assert "Tax (12.5%)" not in "\n".join(lines)

    def test_untaxed_sale_stores_zero_rate(self, sales_service, cola, cola_330, chips):
        sale = _checkout(sales_service, cola, cola_330, chips, PaymentMethod.CARD)
        assert sales_service.get_sale(sale.id).tax_rate == Decimal("0")
