"""Database layer - engine, base classes and column types."""

from pos_kernel.db.base import UUID, Base, ExactDecimal, TrackedBase, UUIDString
from pos_kernel.db.engine import (
    create_tables,
    drop_tables,
    get_engine,
    get_session,
    init_engine_from_url,
    reset_engine,
    session_scope,
)
from pos_kernel.db.types import SYSTEM_ACTOR_ID, round_money

__all__ = [
    "get_engine",
    "get_session",
    "init_engine_from_url",
    "session_scope",
    "create_tables",
    "drop_tables",
    "reset_engine",
    "Base",
    "TrackedBase",
    "UUIDString",
    "ExactDecimal",
    "UUID",
    "SYSTEM_ACTOR_ID",
    "round_money",
]
