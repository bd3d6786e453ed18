"""Unit tests for the document workflow state machine."""

import pytest

from pos_kernel.domain.workflow import Transition, Workflow
from pos_kernel.exceptions import InvalidTransitionError
from pos_modules.cash.workflows import DRAWER_SESSION_WORKFLOW
from pos_modules.payroll.workflows import PAYROLL_RUN_WORKFLOW
from pos_modules.purchasing.workflows import PURCHASE_WORKFLOW
from pos_modules.returns.workflows import RETURN_WORKFLOW


class TestWorkflowDefinition:

    def test_initial_state_must_be_declared(self):
        with pytest.raises(ValueError, match="initial state"):
            Workflow(
                name="bad", description="", initial_state="X",
                states=("A",), transitions=(),
            )

    def test_transition_states_must_be_declared(self):
        with pytest.raises(ValueError, match="unknown state"):
            Workflow(
                name="bad", description="", initial_state="A",
                states=("A",), transitions=(Transition("A", "B", "go"),),
            )

    def test_terminal_state_has_no_exits(self):
        with pytest.raises(ValueError, match="terminal state"):
            Workflow(
                name="bad", description="", initial_state="A",
                states=("A", "B"),
                transitions=(Transition("A", "B", "go"), Transition("B", "A", "back")),
                terminal_states=("B",),
            )


class TestTransitions:

    def test_allowed_actions(self):
        assert set(PURCHASE_WORKFLOW.allowed_actions("Pending")) == {"complete", "cancel"}
        assert PURCHASE_WORKFLOW.allowed_actions("Completed") == ()

    def test_can(self):
        assert PAYROLL_RUN_WORKFLOW.can("Pending", "complete")
        assert not PAYROLL_RUN_WORKFLOW.can("Pending", "pay")

    def test_transition_returns_target(self):
        assert DRAWER_SESSION_WORKFLOW.transition("Active", "close") == "Closed"

    def test_invalid_transition_raises(self):
        with pytest.raises(InvalidTransitionError) as exc_info:
            RETURN_WORKFLOW.transition("Cancelled", "complete")
        assert exc_info.value.code == "INVALID_TRANSITION"
        assert exc_info.value.from_state == "Cancelled"
        assert exc_info.value.action == "complete"

    def test_payroll_run_is_pending_completed_paid(self):
        state = PAYROLL_RUN_WORKFLOW.initial_state
        assert state == "Pending"
        state = PAYROLL_RUN_WORKFLOW.transition(state, "complete")
        state = PAYROLL_RUN_WORKFLOW.transition(state, "pay")
        assert state == "Paid"
        assert state in PAYROLL_RUN_WORKFLOW.terminal_states
