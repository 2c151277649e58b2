"""
Error taxonomy for mapcrud.

Every failure the core can raise carries the HTTP status the transport
boundary should map it to. The core itself never catches these.
"""

from __future__ import annotations

from typing import Any


class MapcrudError(Exception):
    """Base exception for mapcrud failures."""

    status_code: int = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NotFoundError(MapcrudError):
    """Raised when a store lookup by id yields no record."""

    status_code = 404

    def __init__(self, resource: str, id: Any, message: str | None = None):
        self.resource = resource
        self.id = id
        super().__init__(message or f"{resource} with ID {id} not found")


class ValidationFailedError(MapcrudError):
    """
    Raised when one or more field rules reject an input.

    Attributes:
        messages: One message per failing field, in mapping-table order
        fields: Names of the failing fields, in the same order
        shape: Name of the shape being validated
    """

    status_code = 400

    def __init__(
        self,
        messages: list[str],
        fields: list[str] | None = None,
        shape: str | None = None,
    ):
        self.messages = list(messages)
        self.fields = list(fields or [])
        self.shape = shape
        super().__init__("; ".join(self.messages))


class BusinessRuleViolationError(MapcrudError):
    """Raised when a resource-specific invariant is violated."""

    status_code = 400


class InvalidTransitionError(BusinessRuleViolationError):
    """Raised when a status transition is not allowed by the state machine."""

    def __init__(
        self,
        from_state: str,
        to_state: str,
        allowed_states: set[str] | None = None,
        message: str | None = None,
    ):
        self.from_state = from_state
        self.to_state = to_state
        self.allowed_states = allowed_states or set()
        super().__init__(message or f"Invalid status transition from {from_state} to {to_state}")


class ConfigurationWarning(UserWarning):
    """Emitted when a mapping table is missing or malformed for a shape."""
