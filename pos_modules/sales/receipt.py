"""
Plain-text receipts (``pos_modules.sales.receipt``).

Layout, 40 columns wide:

    store name / header text
    date, receipt number
    one row per item: name, qty x price, line total
    subtotal, tax at the rate charged on the sale, total
    payment method, tendered, change (cash) or due date (credit)
    footer text
"""

from __future__ import annotations

from decimal import Decimal

from pos_config.schema import StoreSettings
from pos_kernel.domain.values import Money
from pos_modules.sales.models import PaymentMethod, Sale

WIDTH = 40


def _row(left: str, right: str, width: int = WIDTH) -> str:
    space = max(width - len(left) - len(right), 1)
    return f"{left}{' ' * space}{right}"


def render_receipt(sale: Sale, settings: StoreSettings, width: int = WIDTH) -> str:
    def fmt(amount: Decimal) -> str:
        return Money.of(amount, sale.currency).format()

    rule = "-" * width
    lines = [
        settings.store_name.center(width).rstrip(),
    ]
    if settings.receipt_header_text:
        lines.append(settings.receipt_header_text.center(width).rstrip())
    lines += [
        rule,
        _row("Date:", sale.sale_date.strftime("%Y-%m-%d %H:%M"), width),
        _row("Receipt:", str(sale.id)[:8].upper(), width),
    ]
    if sale.customer_name:
        lines.append(_row("Customer:", sale.customer_name, width))
    lines.append(rule)

    for item in sale.items:
        lines.append(f"{item.product_name} ({item.variant_name})"[:width])
        lines.append(_row(f"  {item.quantity} x {fmt(item.price)}", fmt(item.line_total), width))

    lines.append(rule)
    lines.append(_row("Subtotal", fmt(sale.subtotal), width))
    if sale.tax:
        lines.append(_row(f"Tax ({sale.tax_rate.normalize():f}%)", fmt(sale.tax), width))
    lines.append(_row("TOTAL", fmt(sale.total), width))
    lines.append(rule)
    lines.append(_row("Payment", sale.payment_method.value, width))
    if sale.payment_method is PaymentMethod.CASH:
        lines.append(_row("Tendered", fmt(sale.amount_tendered), width))
        lines.append(_row("Change", fmt(sale.change), width))
    elif sale.payment_method is PaymentMethod.CREDIT and sale.due_date is not None:
        lines.append(_row("Due date", sale.due_date.isoformat(), width))
        lines.append(_row("Balance due", fmt(sale.balance_due), width))

    if settings.receipt_footer_text:
        lines.append(rule)
        lines.append(settings.receipt_footer_text.center(width).rstrip())
    return "\n".join(lines) + "\n"
