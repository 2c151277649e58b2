"""
State machine specification types.

A resource that owns a status field declares its legal transitions here; the
runtime validator in ``mapcrud.runtime.state_machine`` enforces them.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


def _state_name(state: Any) -> str:
    if isinstance(state, Enum):
        return str(state.value)
    return str(state)


class StateTransitionSpec(BaseModel):
    """
    A single allowed transition.

    ``from_state`` may be ``"*"`` to allow the transition from any state.
    """

    from_state: str = Field(description="Source state (or '*')")
    to_state: str = Field(description="Target state")

    model_config = ConfigDict(frozen=True)


class StateMachineSpec(BaseModel):
    """
    Complete state machine specification for a resource.

    Attributes:
        status_field: Name of the field that holds the state
        states: List of valid states
        transitions: List of allowed state transitions
    """

    status_field: str = Field(default="status", description="Field holding the state")
    states: list[str] = Field(default_factory=list, description="Valid states")
    transitions: list[StateTransitionSpec] = Field(
        default_factory=list, description="Allowed transitions"
    )

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_table(
        cls,
        table: dict[Any, list[Any]],
        status_field: str = "status",
    ) -> "StateMachineSpec":
        """
        Build a spec from a ``{state: [allowed targets]}`` table.

        Every key is a state; a state with an empty list is terminal.
        """
        transitions = [
            StateTransitionSpec(from_state=_state_name(source), to_state=_state_name(target))
            for source, targets in table.items()
            for target in targets
        ]
        states = [_state_name(state) for state in table]
        return cls(status_field=status_field, states=states, transitions=transitions)

    def get_allowed_targets(self, from_state: str) -> set[str]:
        """Get all states reachable from a given state."""
        return {
            t.to_state for t in self.transitions if t.from_state in (from_state, "*")
        }

    def is_transition_allowed(self, from_state: str, to_state: str) -> bool:
        """Check if a transition is allowed."""
        return to_state in self.get_allowed_targets(from_state)
