"""Cash Drawer Workflows.

State machine for a drawer session.
"""

from pos_kernel.domain.workflow import Transition, Workflow
from pos_modules.cash.models import DrawerSessionStatus

_ACTIVE = DrawerSessionStatus.ACTIVE.value
_CLOSED = DrawerSessionStatus.CLOSED.value

DRAWER_SESSION_WORKFLOW = Workflow(
    name="cash_drawer_session",
    description="Drawer opened with a float, closed with a count",
    initial_state=_ACTIVE,
    states=(_ACTIVE, _CLOSED),
    transitions=(
        Transition(_ACTIVE, _CLOSED, action="close"),
    ),
    terminal_states=(_CLOSED,),
)
