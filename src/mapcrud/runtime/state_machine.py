"""
Status transition validation.

Resources that own a status field declare a ``StateMachineSpec``; stores run
``validate_status_update`` before touching a record so an illegal transition
never mutates state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from mapcrud.runtime.errors import InvalidTransitionError

if TYPE_CHECKING:
    from mapcrud.specs.state_machine import StateMachineSpec, StateTransitionSpec

logger = logging.getLogger(__name__)


def _state_value(state: Any) -> Any:
    if isinstance(state, Enum):
        return state.value
    return state


# =============================================================================
# Validation Result
# =============================================================================


@dataclass
class TransitionValidationResult:
    """Result of validating a state transition."""

    is_valid: bool
    error: InvalidTransitionError | None = None
    transition: StateTransitionSpec | None = None

    @classmethod
    def success(cls, transition: StateTransitionSpec | None = None) -> TransitionValidationResult:
        return cls(is_valid=True, transition=transition)

    @classmethod
    def failure(cls, error: InvalidTransitionError) -> TransitionValidationResult:
        return cls(is_valid=False, error=error)


# =============================================================================
# Transition Validator
# =============================================================================


class TransitionValidator:
    """
    Validates state transitions against a state machine specification.

    A transition is legal only when the target is listed for the current
    state. Re-entering the current state is not a transition and is rejected
    unless the table lists it explicitly.
    """

    def __init__(self, state_machine: StateMachineSpec):
        self.state_machine = state_machine

    def validate_transition(self, from_state: Any, to_state: Any) -> TransitionValidationResult:
        """
        Validate a state transition.

        Args:
            from_state: Current state value (str or Enum member)
            to_state: Desired new state value

        Returns:
            TransitionValidationResult with validation outcome
        """
        source = _state_value(from_state)
        target = _state_value(to_state)

        if not self.state_machine.is_transition_allowed(source, target):
            allowed = self.state_machine.get_allowed_targets(source)
            logger.debug(f"Rejected transition {source} -> {target}; allowed: {sorted(allowed)}")
            return TransitionValidationResult.failure(
                InvalidTransitionError(source, target, allowed)
            )

        transition = next(
            (
                t
                for t in self.state_machine.transitions
                if t.to_state == target and t.from_state in (source, "*")
            ),
            None,
        )
        return TransitionValidationResult.success(transition)


# =============================================================================
# Helper Functions
# =============================================================================


def validate_status_update(
    state_machine: StateMachineSpec | None,
    current_data: dict[str, Any],
    update_data: dict[str, Any],
) -> TransitionValidationResult | None:
    """
    Validate a status field update against a state machine.

    This is the main entry point for validation during updates.

    Args:
        state_machine: State machine spec (or None if the resource has none)
        current_data: Current record data
        update_data: Data being updated

    Returns:
        TransitionValidationResult if the update sets the status, None otherwise
    """
    if state_machine is None:
        return None

    status_field = state_machine.status_field
    new_status = _state_value(update_data.get(status_field))
    if new_status is None:
        return None

    current_status = _state_value(current_data.get(status_field))
    if current_status is None:
        if new_status in state_machine.states:
            return TransitionValidationResult.success()
        return TransitionValidationResult.failure(
            InvalidTransitionError(
                "<none>",
                new_status,
                set(state_machine.states),
                f"Invalid state '{new_status}'. Valid states: {', '.join(state_machine.states)}",
            )
        )

    return TransitionValidator(state_machine).validate_transition(current_status, new_status)
