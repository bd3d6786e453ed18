"""
POS Kernel

Shared foundation for the point-of-sale and back-office packages:
- Money and currency value objects with explicit rounding
- Injectable clock and workflow state machines
- Typed exception hierarchy
- Structured JSON logging
- SQLAlchemy base classes and session management
"""

__version__ = "0.1.0"
