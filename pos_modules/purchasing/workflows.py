"""Purchasing Workflows.

State machine for a purchase order.
"""

from pos_kernel.domain.workflow import Transition, Workflow
from pos_modules.purchasing.models import PurchaseStatus

_PENDING = PurchaseStatus.PENDING.value
_COMPLETED = PurchaseStatus.COMPLETED.value
_CANCELLED = PurchaseStatus.CANCELLED.value

PURCHASE_WORKFLOW = Workflow(
    name="purchase",
    description="Purchase order: received into stock or cancelled",
    initial_state=_PENDING,
    states=(_PENDING, _COMPLETED, _CANCELLED),
    transitions=(
        Transition(_PENDING, _COMPLETED, action="complete"),
        Transition(_PENDING, _CANCELLED, action="cancel"),
    ),
    terminal_states=(_COMPLETED, _CANCELLED),
)
