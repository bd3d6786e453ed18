"""
Cart -- the order under construction at the till (``pos_modules.sales.cart``).

The cart is in-memory only; nothing is persisted until checkout.  Adding a
variant that is already in the cart increases its quantity instead of
adding a second line.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal
from uuid import UUID

from pos_config.schema import StoreSettings
from pos_engines.order_totals import OrderCalculator, OrderLine, OrderTotals
from pos_kernel.domain.values import Money
from pos_kernel.exceptions import VariantNotFoundError
from pos_modules.inventory.models import Product, ProductVariant


@dataclass(frozen=True)
class CartLine:
    product_id: UUID
    product_name: str
    variant_id: UUID
    variant_name: str
    unit_price: Decimal
    quantity: int
    category: str | None = None

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


class Cart:
    """Ordered collection of cart lines keyed by variant."""

    def __init__(self) -> None:
        self._lines: dict[UUID, CartLine] = {}

    def add(self, product: Product, variant: ProductVariant, quantity: int = 1) -> CartLine:
        if variant.product_id != product.id:
            raise VariantNotFoundError(str(variant.id), str(product.id))
        if quantity <= 0:
            raise ValueError(f"Quantity must be positive, got {quantity}")
        existing = self._lines.get(variant.id)
        if existing is not None:
            line = replace(existing, quantity=existing.quantity + quantity)
        else:
            line = CartLine(
                product_id=product.id,
                product_name=product.name,
                variant_id=variant.id,
                variant_name=variant.name,
                unit_price=variant.price,
                quantity=quantity,
                category=product.category,
            )
        self._lines[variant.id] = line
        return line

    def update_quantity(self, variant_id: UUID, quantity: int) -> CartLine | None:
        """Set a line's quantity; zero or less removes the line."""
        if variant_id not in self._lines:
            raise VariantNotFoundError(str(variant_id))
        if quantity <= 0:
            del self._lines[variant_id]
            return None
        line = replace(self._lines[variant_id], quantity=quantity)
        self._lines[variant_id] = line
        return line

    def remove(self, variant_id: UUID) -> None:
        self._lines.pop(variant_id, None)

    def clear(self) -> None:
        self._lines.clear()

    def lines(self) -> tuple[CartLine, ...]:
        return tuple(self._lines.values())

    @property
    def is_empty(self) -> bool:
        return not self._lines

    def __len__(self) -> int:
        return len(self._lines)

    def order_lines(self, currency: str) -> tuple[OrderLine, ...]:
        return tuple(
            OrderLine(
                variant_id=line.variant_id,
                product_id=line.product_id,
                name=f"{line.product_name} ({line.variant_name})",
                unit_price=Money.of(line.unit_price, currency),
                quantity=line.quantity,
            )
            for line in self._lines.values()
        )

    def totals(self, settings: StoreSettings) -> OrderTotals:
        """Subtotal, tax and total under the store's tax settings."""
        return OrderCalculator().calculate(
            self.order_lines(settings.currency),
            tax_rate=settings.tax_fraction,
            tax_enabled=settings.enable_tax,
            currency=settings.currency,
        )
