"""
Shared fixtures for module tests.

Provides the services most tests compose and a small catalog to sell from.

DESIGN RULE: Every fixture is opt-in.  No autouse.  Each test explicitly
declares which services and catalog entries it depends on in its function
signature.
"""

from decimal import Decimal

import pytest

from pos_config.schema import StoreSettings
from pos_modules.cash.service import CashDrawerService
from pos_modules.inventory.models import VariantSpec
from pos_modules.inventory.service import InventoryService
from pos_modules.sales.service import SalesService

# ---------------------------------------------------------------------------
# Services
# ---------------------------------------------------------------------------

@pytest.fixture
def inventory_service(session, deterministic_clock, test_actor_id):
    return InventoryService(session, deterministic_clock, actor_id=test_actor_id)


@pytest.fixture
def drawer_service(session, settings, deterministic_clock, test_actor_id):
    return CashDrawerService(session, settings, deterministic_clock, actor_id=test_actor_id)


@pytest.fixture
def sales_service(session, settings, deterministic_clock, test_actor_id):
    return SalesService(session, settings, deterministic_clock, actor_id=test_actor_id)


@pytest.fixture
def taxed_sales_service(session, taxed_settings, deterministic_clock, test_actor_id):
    return SalesService(session, taxed_settings, deterministic_clock, actor_id=test_actor_id)


@pytest.fixture
def lkr_settings():
    """Wages-board store paying in rupees."""
    return StoreSettings(currency="LKR", payroll_type="wagesBoard")


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

@pytest.fixture
def cola(inventory_service):
    """Cola in two sizes: 330ml at 2.99 (24 in stock), 1.5L at 3.49 (10)."""
    return inventory_service.create_product(
        "Cola",
        category="Drinks",
        brand="Fizz",
        variants=[
            VariantSpec(sku="COLA-330", name="330ml", price=Decimal("2.99"), stock=24),
            VariantSpec(sku="COLA-1500", name="1.5L", price=Decimal("3.49"), stock=10),
        ],
    )


@pytest.fixture
def chips(inventory_service):
    """Chips at 5.49, five in stock."""
    return inventory_service.create_product(
        "Chips",
        category="Snacks",
        variants=[VariantSpec(sku="CHIPS-150", name="150g", price=Decimal("5.49"), stock=5)],
    )


@pytest.fixture
def cola_330(cola):
    return next(v for v in cola.variants if v.sku == "COLA-330")


@pytest.fixture
def cola_1500(cola):
    return next(v for v in cola.variants if v.sku == "COLA-1500")
