"""
Tests for the purchasing module service.

Validates:
- total_cost = sum(quantity x cost)
- Stock is received once, on completion
- Cancelled and completed purchases are final
- Latest unit cost per product
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest

from pos_kernel.exceptions import (
    InvalidTransitionError,
    PurchaseNotFoundError,
    VariantNotFoundError,
)
from pos_modules.inventory.models import StockMovementReason
from pos_modules.purchasing.models import PurchaseItem, PurchaseStatus
from pos_modules.purchasing.service import PurchasingService


@pytest.fixture
def purchasing_service(session, deterministic_clock, test_actor_id):
    return PurchasingService(session, deterministic_clock, actor_id=test_actor_id)


@pytest.fixture
def restock(cola, cola_330, cola_1500):
    return [
        PurchaseItem(product_id=cola.id, variant_id=cola_330.id, quantity=48, cost=Decimal("1.50")),
        PurchaseItem(
            product_id=cola.id, variant_id=cola_1500.id, quantity=12, cost=Decimal("2.10"),
            batch_number="B-2024-03", expiry_date=date(2024, 9, 30),
        ),
    ]


class TestPurchaseItem:

    def test_line_cost(self, cola, cola_330):
        item = PurchaseItem(cola.id, cola_330.id, quantity=3, cost=Decimal("1.25"))
        assert item.line_cost == Decimal("3.75")

    def test_quantity_must_be_positive(self, cola, cola_330):
        with pytest.raises(ValueError, match="positive"):
            PurchaseItem(cola.id, cola_330.id, quantity=0, cost=Decimal("1"))

    def test_cost_not_negative(self, cola, cola_330):
        with pytest.raises(ValueError, match="negative"):
            PurchaseItem(cola.id, cola_330.id, quantity=1, cost=Decimal("-1"))


class TestPurchasingService:

    def test_pending_purchase_does_not_touch_stock(
        self, purchasing_service, inventory_service, restock, cola_330, deterministic_clock,
    ):
        purchase = purchasing_service.create_purchase(" Lanka Beverages ", restock)
        assert purchase.status is PurchaseStatus.PENDING
        assert purchase.supplier_name == "Lanka Beverages"
        assert purchase.purchase_date == deterministic_clock.today()
        assert purchase.total_cost == Decimal("97.20")
        assert inventory_service.get_variant(cola_330.id).stock == 24

    def test_complete_receives_stock(
        self, purchasing_service, inventory_service, restock, cola_330, cola_1500,
    ):
        pending = purchasing_service.create_purchase("Lanka Beverages", restock)
        completed = purchasing_service.complete_purchase(pending.id)
        assert completed.status is PurchaseStatus.COMPLETED
        assert completed.completed_at is not None
        assert inventory_service.get_variant(cola_330.id).stock == 72
        assert inventory_service.get_variant(cola_1500.id).stock == 22
        movements = inventory_service.stock_movements(cola_330.id)
        received = [m for m in movements if m.reason is StockMovementReason.PURCHASE]
        assert [m.delta for m in received] == [48]
        assert received[0].reference == str(pending.id)

    def test_create_completed(self, purchasing_service, inventory_service, restock, cola_330):
        purchase = purchasing_service.create_purchase("Lanka Beverages", restock, complete=True)
        assert purchase.status is PurchaseStatus.COMPLETED
        assert inventory_service.get_variant(cola_330.id).stock == 72

    def test_items_round_trip(self, purchasing_service, restock):
        purchase = purchasing_service.create_purchase("Lanka Beverages", restock, reference="INV-881")
        stored = purchasing_service.get_purchase(purchase.id)
        assert stored.reference == "INV-881"
        assert stored.items[1].batch_number == "B-2024-03"
        assert stored.items[1].expiry_date == date(2024, 9, 30)
        assert [i.quantity for i in stored.items] == [48, 12]

    def test_completed_purchase_is_final(self, purchasing_service, restock):
        purchase = purchasing_service.create_purchase("Lanka Beverages", restock, complete=True)
        with pytest.raises(InvalidTransitionError):
            purchasing_service.complete_purchase(purchase.id)
        with pytest.raises(InvalidTransitionError):
            purchasing_service.cancel_purchase(purchase.id)

    def test_cancel(self, purchasing_service, inventory_service, restock, cola_330):
        purchase = purchasing_service.create_purchase("Lanka Beverages", restock)
        cancelled = purchasing_service.cancel_purchase(purchase.id)
        assert cancelled.status is PurchaseStatus.CANCELLED
        with pytest.raises(InvalidTransitionError):
            purchasing_service.complete_purchase(purchase.id)
        assert inventory_service.get_variant(cola_330.id).stock == 24

    def test_supplier_and_items_required(self, purchasing_service, restock):
        with pytest.raises(ValueError, match="Supplier"):
            purchasing_service.create_purchase(" ", restock)
        with pytest.raises(ValueError, match="at least one item"):
            purchasing_service.create_purchase("Lanka Beverages", [])

    def test_variant_must_exist(self, purchasing_service, cola):
        item = PurchaseItem(cola.id, uuid4(), quantity=1, cost=Decimal("1"))
        with pytest.raises(VariantNotFoundError):
            purchasing_service.create_purchase("Lanka Beverages", [item])

    def test_unknown_purchase(self, purchasing_service):
        with pytest.raises(PurchaseNotFoundError):
            purchasing_service.get_purchase(uuid4())

    def test_list_by_status(self, purchasing_service, restock):
        purchasing_service.create_purchase("A", restock)
        purchasing_service.create_purchase("B", restock, complete=True)
        assert len(purchasing_service.list_purchases()) == 2
        completed = purchasing_service.list_purchases(PurchaseStatus.COMPLETED)
        assert [p.supplier_name for p in completed] == ["B"]


class TestLatestUnitCosts:

    def test_latest_completed_purchase_wins(
        self, purchasing_service, cola, cola_330, chips,
    ):
        purchasing_service.create_purchase(
            "A", [PurchaseItem(cola.id, cola_330.id, 10, Decimal("1.40"))],
            purchase_date=date(2024, 3, 1), complete=True,
        )
        purchasing_service.create_purchase(
            "B", [PurchaseItem(cola.id, cola_330.id, 10, Decimal("1.55"))],
            purchase_date=date(2024, 3, 10), complete=True,
        )
        purchasing_service.create_purchase(
            "C", [PurchaseItem(cola.id, cola_330.id, 10, Decimal("0.10"))],
            purchase_date=date(2024, 3, 12),
        )
        purchasing_service.create_purchase(
            "D", [PurchaseItem(chips.id, chips.variants[0].id, 5, Decimal("3.00"))],
            purchase_date=date(2024, 3, 2), complete=True,
        )
        costs = purchasing_service.latest_unit_costs()
        assert costs == {cola.id: Decimal("1.55"), chips.id: Decimal("3.00")}

    def test_no_purchases(self, purchasing_service):
        assert purchasing_service.latest_unit_costs() == {}
