"""Tests for the database layer: session scope, exact decimals, rounding."""

from decimal import Decimal

import pytest
from sqlalchemy import func, select

from pos_kernel.db.engine import get_engine, get_session, reset_engine, session_scope
from pos_kernel.db.types import SYSTEM_ACTOR_ID, money_from_str, round_money
from pos_modules.inventory.orm import ProductModel, ProductVariantModel


def _product(name: str = "Cola") -> ProductModel:
    return ProductModel(name=name, category="Drinks", created_by_id=SYSTEM_ACTOR_ID)


class TestSessionScope:

    def test_commits_on_success(self, session):
        with session_scope() as scoped:
            scoped.add(_product())
        assert session.scalar(select(func.count()).select_from(ProductModel)) == 1

    def test_rolls_back_and_reraises(self, session, captured_logs):
        with pytest.raises(RuntimeError, match="till offline"):
            with session_scope() as scoped:
                scoped.add(_product())
                scoped.flush()
                raise RuntimeError("till offline")
        assert session.scalar(select(func.count()).select_from(ProductModel)) == 0
        assert any(r["message"] == "transaction_rolled_back" for r in captured_logs())

    def test_decimal_round_trips_exactly(self, session):
        with session_scope() as scoped:
            product = _product()
            product.variants.append(ProductVariantModel(
                sku="COLA-330", name="330ml", price=Decimal("2.990000001"),
                stock=3, created_by_id=SYSTEM_ACTOR_ID,
            ))
            scoped.add(product)
        variant = session.scalars(select(ProductVariantModel)).one()
        assert variant.price == Decimal("2.990000001")
        assert isinstance(variant.price, Decimal)


class TestUninitializedEngine:

    def test_get_engine_raises(self):
        reset_engine()
        with pytest.raises(RuntimeError, match="not initialized"):
            get_engine()

    def test_get_session_raises(self):
        reset_engine()
        with pytest.raises(RuntimeError, match="not initialized"):
            get_session()


class TestRounding:

    @pytest.mark.parametrize("value, places, expected", [
        ("2.345", 2, "2.35"),
        ("2.344", 2, "2.34"),
        ("-2.345", 2, "-2.35"),
        ("3466.666", 2, "3466.67"),
        ("12.5", 0, "13"),
    ])
    def test_round_money_half_up(self, value, places, expected):
        assert round_money(Decimal(value), places) == Decimal(expected)

    def test_money_from_str(self):
        assert money_from_str(" 1,250.50 ") == Decimal("1250.50")

    @pytest.mark.parametrize("value", ["abc", "", "NaN", "Infinity"])
    def test_money_from_str_rejects(self, value):
        with pytest.raises(ValueError, match="Invalid amount"):
            money_from_str(value)
