"""
Pytest fixtures for the POS test suite.

Provides:
- Structured logging configured once per session, plus a log capture
- A deterministic clock and default store settings
- An in-memory SQLite session with every module table created

Environment Variables:
- DATABASE_URL: SQLAlchemy URL to run the database tests against.
  If not set, an in-memory SQLite database is used.
"""

import json
import logging
import os
from datetime import datetime, timezone
from io import StringIO
from uuid import uuid4

import pytest

from pos_config.schema import StoreSettings
from pos_kernel.db.engine import (
    create_tables,
    drop_tables,
    get_session,
    init_engine_from_url,
    reset_engine,
)
from pos_kernel.domain.clock import DeterministicClock
from pos_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)

# Actor recorded on every row written by the tests
TEST_ACTOR_ID = uuid4()

DEFAULT_DATABASE_URL = "sqlite://"


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture pos_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, sales_service):
            sales_service.checkout(cart, PaymentMethod.CASH)
            logs = captured_logs()
            assert any(r["message"] == "sale_completed" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("pos_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Domain fixtures
# =============================================================================


@pytest.fixture
def deterministic_clock():
    """Clock fixed at 2024-03-15 10:00 UTC."""
    return DeterministicClock(datetime(2024, 3, 15, 10, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def settings():
    """Default store settings: USD, tax off, salary theory payroll."""
    return StoreSettings()


@pytest.fixture
def taxed_settings():
    """Store settings with 8 % tax switched on."""
    return StoreSettings(enable_tax=True, tax_rate="8")


@pytest.fixture
def test_actor_id():
    return TEST_ACTOR_ID


# =============================================================================
# Database fixtures
# =============================================================================


def get_database_url() -> str:
    """Get database URL from environment, or use in-memory SQLite."""
    return os.environ.get("DATABASE_URL", DEFAULT_DATABASE_URL)


@pytest.fixture
def session():
    """
    A session on a freshly created schema.

    Tables are created before the test and dropped afterwards, so each
    test starts from an empty store.
    """
    init_engine_from_url(get_database_url())
    create_tables()
    db_session = get_session()
    yield db_session
    db_session.rollback()
    db_session.close()
    drop_tables()
    reset_engine()
