"""
Inventory Domain Models (``pos_modules.inventory.models``).

Frozen dataclass value objects for the product catalog: products, their
sellable variants (size, colour, pack) and stock movements.

* All models are ``frozen=True``.
* Prices use ``Decimal`` -- NEVER ``float``.  Stock is a whole number of
  units.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID


class StockMovementReason(Enum):
    SALE = "sale"
    PURCHASE = "purchase"
    RETURN = "return"
    ADJUSTMENT = "adjustment"


@dataclass(frozen=True)
class VariantSpec:
    """A variant to create along with a new product."""
    sku: str
    name: str
    price: Decimal
    stock: int = 0

    def __post_init__(self):
        if not self.sku or not self.sku.strip():
            raise ValueError("SKU is required")
        if not self.name or not self.name.strip():
            raise ValueError("Variant name is required")
        if self.price < 0:
            raise ValueError("Price cannot be negative")
        if self.stock < 0:
            raise ValueError("Stock cannot be negative")


@dataclass(frozen=True)
class ProductVariant:
    """A sellable variant of a product, with its own SKU, price and stock."""
    id: UUID
    product_id: UUID
    sku: str
    name: str
    price: Decimal
    stock: int


@dataclass(frozen=True)
class Product:
    id: UUID
    name: str
    category: str | None = None
    brand: str | None = None
    unit: str = "pcs"
    variants: tuple[ProductVariant, ...] = ()

    def variant(self, variant_id: UUID) -> ProductVariant | None:
        return next((v for v in self.variants if v.id == variant_id), None)

    @property
    def total_stock(self) -> int:
        return sum(v.stock for v in self.variants)


@dataclass(frozen=True)
class StockMovement:
    """One change to a variant's stock level."""
    id: UUID
    variant_id: UUID
    delta: int
    reason: StockMovementReason
    reference: str | None
    occurred_at: datetime
