"""Tests for the structured logging system (pos_kernel/logging_config.py)."""

import json
import logging
from decimal import Decimal
from io import StringIO
from uuid import uuid4

import pytest

from pos_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    get_logger,
    reset_logging,
)


@pytest.fixture(autouse=True)
def _clean_logging():
    """Reset logging state between tests."""
    reset_logging()
    LogContext.clear()
    yield
    LogContext.clear()
    reset_logging()


def _make_handler() -> tuple[logging.Handler, StringIO]:
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    return handler, stream


def _parse_log(stream: StringIO) -> dict:
    """Parse the first JSON log line from a stream."""
    line = stream.getvalue().strip().split("\n")[0]
    return json.loads(line)


def _parse_all_logs(stream: StringIO) -> list[dict]:
    lines = stream.getvalue().strip().split("\n")
    return [json.loads(line) for line in lines if line]


# ---------------------------------------------------------------------------
# StructuredFormatter tests
# ---------------------------------------------------------------------------


class TestStructuredFormatter:
    """Tests for JSON log output format."""

    def test_basic_json_output(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        logger = get_logger("test")
        logger.info("hello")

        record = _parse_log(stream)
        assert record["level"] == "INFO"
        assert record["message"] == "hello"
        assert record["logger"] == "pos_kernel.test"
        assert "ts" in record

    def test_extra_fields_included(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        logger = get_logger("test")
        logger.info("sale_completed", extra={"line_count": 3, "total": "12.39"})

        record = _parse_log(stream)
        assert record["line_count"] == 3
        assert record["total"] == "12.39"

    def test_context_fields_included(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        logger = get_logger("test")
        LogContext.set(correlation_id="abc-123", sale_id="sale-456")
        logger.info("test_msg")

        record = _parse_log(stream)
        assert record["correlation_id"] == "abc-123"
        assert record["sale_id"] == "sale-456"

    def test_exception_fields(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        logger = get_logger("test")
        try:
            raise ValueError("boom")
        except ValueError:
            logger.error("failed", exc_info=True)

        record = _parse_log(stream)
        assert record["exc_type"] == "ValueError"
        assert record["exc_message"] == "boom"
        assert "traceback" in record

    def test_pos_exception_code_extracted(self):
        """POS exceptions carry a .code attribute and structured fields."""
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        logger = get_logger("test")
        from pos_kernel.exceptions import InsufficientStockError

        try:
            raise InsufficientStockError("v-1", "COLA-330", 2, 5)
        except InsufficientStockError:
            logger.error("stock_error", exc_info=True)

        record = _parse_log(stream)
        assert record["exc_code"] == "INSUFFICIENT_STOCK"
        assert record["exc_type"] == "InsufficientStockError"
        assert record["exc_sku"] == "COLA-330"
        assert record["exc_available"] == 2
        assert record["exc_requested"] == 5

    def test_no_context_fields_when_empty(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        logger = get_logger("test")
        logger.info("bare_message")

        record = _parse_log(stream)
        assert "correlation_id" not in record
        assert "sale_id" not in record

    def test_uuid_and_decimal_serialized(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        logger = get_logger("test")
        uid = uuid4()
        logger.info("with_values", extra={"sale_ref": uid, "amount": Decimal("9.90")})

        record = _parse_log(stream)
        assert record["sale_ref"] == str(uid)
        assert record["amount"] == "9.90"

    def test_debug_filtered_at_info(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        logger = get_logger("test")
        logger.info("first")
        logger.warning("second", extra={"k": "v"})
        logger.debug("third")

        logs = _parse_all_logs(stream)
        assert len(logs) == 2
        for record in logs:
            assert "ts" in record
            assert "level" in record
            assert "logger" in record
            assert "message" in record


# ---------------------------------------------------------------------------
# LogContext tests
# ---------------------------------------------------------------------------


class TestLogContext:
    """Tests for context propagation."""

    def test_set_and_get(self):
        LogContext.set(correlation_id="x", drawer_session_id="y")
        assert LogContext.get_all() == {"correlation_id": "x", "drawer_session_id": "y"}

    def test_clear(self):
        LogContext.set(correlation_id="x")
        LogContext.clear()
        assert LogContext.get_all() == {}

    def test_bind_context_manager(self):
        LogContext.set(sale_id="outer")
        with LogContext.bind(sale_id="inner"):
            assert LogContext.get_all()["sale_id"] == "inner"
        assert LogContext.get_all()["sale_id"] == "outer"

    def test_bind_restores_none(self):
        assert "payroll_run_id" not in LogContext.get_all()
        with LogContext.bind(payroll_run_id="temp"):
            assert LogContext.get_all()["payroll_run_id"] == "temp"
        assert "payroll_run_id" not in LogContext.get_all()

    def test_bind_rejects_unknown_field(self):
        with pytest.raises(ValueError, match="Unknown log context fields"):
            LogContext.bind(event_id="nope")

    def test_all_fields(self):
        LogContext.set(
            correlation_id="c",
            actor_id="a",
            register_id="r",
            drawer_session_id="d",
            sale_id="s",
            payroll_run_id="p",
        )
        ctx = LogContext.get_all()
        assert len(ctx) == 6
        assert ctx["register_id"] == "r"


# ---------------------------------------------------------------------------
# configure_logging tests
# ---------------------------------------------------------------------------


class TestConfigureLogging:
    """Tests for initialization."""

    def test_idempotent(self):
        h1, _ = _make_handler()
        configure_logging(handler=h1)
        h2, _ = _make_handler()
        configure_logging(handler=h2)
        root = logging.getLogger("pos_kernel")
        structured = [
            h for h in root.handlers if isinstance(h.formatter, StructuredFormatter)
        ]
        assert structured == [h1]
        assert h2 not in root.handlers

    def test_get_logger_returns_child(self):
        logger = get_logger("modules.sales.service")
        assert logger.name == "pos_kernel.modules.sales.service"

    def test_logger_hierarchy(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler, level=logging.DEBUG)
        get_logger("deep.nested.module").debug("hierarchy_test")

        record = _parse_log(stream)
        assert record["message"] == "hierarchy_test"
        assert record["logger"] == "pos_kernel.deep.nested.module"
