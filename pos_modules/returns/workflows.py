"""Returns Workflows.

State machine for a customer return.
"""

from pos_kernel.domain.workflow import Transition, Workflow
from pos_modules.returns.models import ReturnStatus

_PENDING = ReturnStatus.PENDING.value
_COMPLETED = ReturnStatus.COMPLETED.value
_CANCELLED = ReturnStatus.CANCELLED.value

RETURN_WORKFLOW = Workflow(
    name="customer_return",
    description="Customer return: restocked or cancelled",
    initial_state=_PENDING,
    states=(_PENDING, _COMPLETED, _CANCELLED),
    transitions=(
        Transition(_PENDING, _COMPLETED, action="complete"),
        Transition(_PENDING, _CANCELLED, action="cancel"),
    ),
    terminal_states=(_COMPLETED, _CANCELLED),
)
