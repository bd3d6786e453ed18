"""
Canonical workflow types (``pos_kernel.domain.workflow``).

Responsibility
--------------
Pure value objects for document state machines.  Purchases, returns,
payroll runs and cash drawer sessions each declare a ``Workflow`` in their
module's ``workflows.py``; services call ``Workflow.transition`` instead of
comparing status strings inline.

Architecture position
---------------------
**Kernel domain layer** -- pure value objects.  ZERO I/O.

Invariants enforced
-------------------
* Transitions reference only states in ``Workflow.states``.
* ``initial_state`` is a member of ``states``.
"""

from __future__ import annotations

from dataclasses import dataclass

from pos_kernel.exceptions import InvalidTransitionError


@dataclass(frozen=True)
class Transition:
    """A valid state transition in a workflow."""
    from_state: str
    to_state: str
    action: str


@dataclass(frozen=True)
class Workflow:
    """A state machine definition for a document lifecycle.

    Contract: frozen; ``transitions`` reference only states in ``states``.
    ``terminal_states`` are states with no outgoing transitions.
    """
    name: str
    description: str
    initial_state: str
    states: tuple[str, ...]
    transitions: tuple[Transition, ...]
    terminal_states: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.initial_state not in self.states:
            raise ValueError(
                f"{self.name}: initial state '{self.initial_state}' not in states"
            )
        for t in self.transitions:
            if t.from_state not in self.states or t.to_state not in self.states:
                raise ValueError(
                    f"{self.name}: transition '{t.action}' references unknown state"
                )
        for state in self.terminal_states:
            if any(t.from_state == state for t in self.transitions):
                raise ValueError(
                    f"{self.name}: terminal state '{state}' has outgoing transitions"
                )

    def allowed_actions(self, state: str) -> tuple[str, ...]:
        return tuple(t.action for t in self.transitions if t.from_state == state)

    def can(self, state: str, action: str) -> bool:
        return action in self.allowed_actions(state)

    def transition(self, state: str, action: str) -> str:
        """Return the target state of ``action`` from ``state``.

        Raises:
            InvalidTransitionError: if no such transition is declared.
        """
        for t in self.transitions:
            if t.from_state == state and t.action == action:
                return t.to_state
        raise InvalidTransitionError(self.name, state, action)
