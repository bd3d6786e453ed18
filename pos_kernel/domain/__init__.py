"""
Pure domain layer.

This module contains value objects and domain logic with NO dependencies on:
- ORM (SQLAlchemy)
- Database
- Time/clock (other than the Clock abstraction itself)
- I/O

All domain objects are immutable and deterministic.
"""

from pos_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from pos_kernel.domain.currency import CurrencyInfo, CurrencyRegistry
from pos_kernel.domain.values import Currency, Money
from pos_kernel.domain.workflow import Transition, Workflow

__all__ = [
    "Clock",
    "SystemClock",
    "DeterministicClock",
    "CurrencyInfo",
    "CurrencyRegistry",
    "Currency",
    "Money",
    "Transition",
    "Workflow",
]
