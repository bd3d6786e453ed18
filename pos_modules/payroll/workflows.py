"""Payroll Workflows.

A run is editable while Pending, locked once Completed, and final once Paid.
"""

from pos_kernel.domain.workflow import Transition, Workflow
from pos_modules.payroll.models import PayrollRunStatus

_PENDING = PayrollRunStatus.PENDING.value
_COMPLETED = PayrollRunStatus.COMPLETED.value
_PAID = PayrollRunStatus.PAID.value

PAYROLL_RUN_WORKFLOW = Workflow(
    name="payroll_run",
    description="Monthly payroll run: review, approve, pay",
    initial_state=_PENDING,
    states=(_PENDING, _COMPLETED, _PAID),
    transitions=(
        Transition(_PENDING, _COMPLETED, action="complete"),
        Transition(_COMPLETED, _PAID, action="pay"),
    ),
    terminal_states=(_PAID,),
)
