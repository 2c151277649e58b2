"""
Field rule registry.

Pure functions that turn a description, an example and optional bounds into a
``FieldRule``, and the helpers that resolve a rule into its two halves: the
documentation attribute rendered by the OpenAPI layer and the ordered
validation predicates run by the input applier.

Mapping tables reference the factories lazily:

    CREATE_PAYMENT_MAPPING = {
        "amount": lambda: number_field("Payment amount", 99.99),
        "currency": lambda: string_field("Currency code", "USD", min_length=3, max_length=3),
    }
"""

from __future__ import annotations

import math
import re
from collections.abc import Callable, Sized
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any

from mapcrud.specs.field import FieldConstraints, FieldKind, FieldRule

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


# =============================================================================
# Rule Factories
# =============================================================================


def string_field(
    description: str,
    example: Any,
    required: bool = True,
    min_length: int | None = None,
    max_length: int | None = None,
) -> FieldRule:
    """Create a string field rule with optional length bounds."""
    return FieldRule(
        description=description,
        example=example,
        required=required,
        kind=FieldKind.STRING,
        constraints=FieldConstraints(min_length=min_length, max_length=max_length),
    )


def email_field(description: str, example: Any, required: bool = True) -> FieldRule:
    """Create a string field rule that must look like an email address."""
    return FieldRule(
        description=description,
        example=example,
        required=required,
        kind=FieldKind.STRING,
        format="email",
    )


def number_field(
    description: str,
    example: Any,
    required: bool = True,
    min: float | None = None,
    max: float | None = None,
) -> FieldRule:
    """Create a numeric field rule with an optional inclusive range."""
    return FieldRule(
        description=description,
        example=example,
        required=required,
        kind=FieldKind.NUMBER,
        constraints=FieldConstraints(min=min, max=max),
    )


def boolean_field(description: str, example: Any, required: bool = True) -> FieldRule:
    return FieldRule(
        description=description,
        example=example,
        required=required,
        kind=FieldKind.BOOLEAN,
    )


def enum_field(
    enum_type: type[Enum] | Any,
    description: str,
    example: Any,
    required: bool = True,
) -> FieldRule:
    """
    Create an enum field rule.

    Args:
        enum_type: Enum class, or any collection of allowed values
        description: Field description
        example: Example value (should be one of the allowed values)
        required: Whether the field must be present

    Returns:
        Rule whose predicate is membership in the declared value set
    """
    return FieldRule(
        description=description,
        example=example,
        required=required,
        kind=FieldKind.ENUM,
        constraints=FieldConstraints(enum_values=enum_type),
    )


def array_field(
    description: str,
    example: Any,
    required: bool = True,
    min_length: int | None = None,
    max_length: int | None = None,
) -> FieldRule:
    """
    Create an array field rule.

    Length bounds count items. Elements are not validated individually.
    """
    return FieldRule(
        description=description,
        example=example,
        required=required,
        kind=FieldKind.ARRAY,
        is_array=True,
        constraints=FieldConstraints(min_length=min_length, max_length=max_length),
    )


# =============================================================================
# Predicates
# =============================================================================


@dataclass(frozen=True)
class FieldPredicate:
    """
    A single validation check for one field.

    Attributes:
        name: Short identifier (``isString``, ``maxLength``, ...)
        test: Callable returning True when the value passes
        message: Failure message template; ``{field}`` is the field name
    """

    name: str
    test: Callable[[Any], bool]
    message: str

    def describe(self, field: str) -> str:
        return self.message.format(field=field)


def is_present(value: Any, required: bool) -> bool:
    """
    Presence check run before any predicate.

    Absent and ``None`` values are never present; a required field also
    treats the empty string as absent.
    """
    if value is None:
        return False
    if required and isinstance(value, str) and value == "":
        return False
    return True


def _is_string(value: Any) -> bool:
    return isinstance(value, str)


def _is_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, Decimal):
        return value.is_finite()
    if isinstance(value, (int, float)):
        return math.isfinite(value)
    return False


def _is_boolean(value: Any) -> bool:
    return isinstance(value, bool)


def _is_array(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _is_email(value: Any) -> bool:
    return isinstance(value, str) and EMAIL_PATTERN.match(value) is not None


def _format_bound(bound: float) -> str:
    if float(bound).is_integer():
        return str(int(bound))
    return str(bound)


def _enum_matches(value: Any, allowed: tuple[Any, ...]) -> bool:
    if isinstance(value, Enum):
        value = value.value
    return value in allowed


def build_predicates(rule: FieldRule) -> tuple[FieldPredicate, ...]:
    """
    Resolve a rule into its ordered validation predicates.

    Order: type check, format, enum membership, length, range. The input
    applier reports only the first failing predicate per field.
    """
    predicates: list[FieldPredicate] = []
    kind = rule.resolved_kind
    constraints = rule.constraints

    if kind == FieldKind.STRING:
        predicates.append(FieldPredicate("isString", _is_string, "{field} must be a string"))
    elif kind == FieldKind.NUMBER:
        predicates.append(FieldPredicate("isNumber", _is_number, "{field} must be a number"))
    elif kind == FieldKind.BOOLEAN:
        predicates.append(
            FieldPredicate("isBoolean", _is_boolean, "{field} must be a boolean value")
        )
    elif kind == FieldKind.ARRAY:
        predicates.append(FieldPredicate("isArray", _is_array, "{field} must be an array"))

    if rule.format == "email":
        predicates.append(FieldPredicate("isEmail", _is_email, "{field} must be an email"))

    if constraints.enum_values is not None:
        allowed = constraints.enum_values
        listing = ", ".join(str(v) for v in allowed)
        predicates.append(
            FieldPredicate(
                "isEnum",
                lambda value: _enum_matches(value, allowed),
                f"{{field}} must be one of the following values: {listing}",
            )
        )

    is_array = kind == FieldKind.ARRAY
    if constraints.min_length is not None:
        min_length = constraints.min_length
        predicates.append(
            FieldPredicate(
                "arrayMinSize" if is_array else "minLength",
                lambda value: isinstance(value, Sized) and len(value) >= min_length,
                f"{{field}} must contain at least {min_length} elements"
                if is_array
                else f"{{field}} must be longer than or equal to {min_length} characters",
            )
        )
    if constraints.max_length is not None:
        max_length = constraints.max_length
        predicates.append(
            FieldPredicate(
                "arrayMaxSize" if is_array else "maxLength",
                lambda value: isinstance(value, Sized) and len(value) <= max_length,
                f"{{field}} must contain no more than {max_length} elements"
                if is_array
                else f"{{field}} must be shorter than or equal to {max_length} characters",
            )
        )

    if constraints.min is not None:
        minimum = constraints.min
        predicates.append(
            FieldPredicate(
                "min",
                lambda value: _is_number(value) and value >= minimum,
                f"{{field}} must not be less than {_format_bound(minimum)}",
            )
        )
    if constraints.max is not None:
        maximum = constraints.max
        predicates.append(
            FieldPredicate(
                "max",
                lambda value: _is_number(value) and value <= maximum,
                f"{{field}} must not be greater than {_format_bound(maximum)}",
            )
        )

    return tuple(predicates)


# =============================================================================
# Documentation
# =============================================================================


def build_documentation(rule: FieldRule) -> dict[str, Any]:
    """
    Resolve a rule into its documentation attribute.

    Keys are only present when the rule provides them; ``type`` is absent when
    the kind could not be resolved.
    """
    doc: dict[str, Any] = {
        "description": rule.description,
        "required": rule.required,
    }
    if rule.example is not None:
        doc["example"] = rule.example

    kind = rule.resolved_kind
    if kind is not None:
        doc["type"] = kind.value
    if rule.format:
        doc["format"] = rule.format

    constraints = rule.constraints
    if constraints.enum_values is not None:
        doc["enum"] = list(constraints.enum_values)
    if constraints.min is not None:
        doc["minimum"] = constraints.min
    if constraints.max is not None:
        doc["maximum"] = constraints.max
    if constraints.min_length is not None:
        doc["minLength"] = constraints.min_length
    if constraints.max_length is not None:
        doc["maxLength"] = constraints.max_length
    if rule.is_array or kind == FieldKind.ARRAY:
        doc["isArray"] = True
    return doc
