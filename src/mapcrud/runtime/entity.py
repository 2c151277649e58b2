"""
Entity synthesizer.

Gives a plain data shape a shallow-copy constructor: ``Shape(partial)`` copies
every field the partial provides onto a fresh instance, ``Shape()`` leaves all
fields unset.

Construction order is fixed for every shape: the class's own (pre-synthesis)
``__init__`` runs first with no arguments, then the partial is copied over the
result. Defaults established by that ``__init__`` are therefore overwritten by
whatever the partial provides, and the partial is never passed through it.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, TypeVar

T = TypeVar("T")

BARE_INIT_ATTR = "__bare_init__"


# =============================================================================
# Field Copy
# =============================================================================


def plain_fields(partial: Any) -> dict[str, Any]:
    """
    Extract the fields a partial object provides.

    Accepts mappings (string keys only), pydantic models (only the fields
    that were explicitly set) and plain objects (their instance attributes).
    Anything else provides no fields.
    """
    if partial is None:
        return {}
    if isinstance(partial, Mapping):
        return {key: value for key, value in partial.items() if isinstance(key, str)}
    model_dump = getattr(partial, "model_dump", None)
    if callable(model_dump):
        return dict(model_dump(exclude_unset=True))
    if hasattr(partial, "__dict__"):
        return dict(vars(partial))
    return {}


def assign_fields(instance: Any, partial: Any) -> Any:
    """Shallow-copy the fields of ``partial`` onto ``instance`` in order."""
    for name, value in plain_fields(partial).items():
        setattr(instance, name, value)
    return instance


# =============================================================================
# Constructor Synthesis
# =============================================================================


def is_synthesized(shape: type) -> bool:
    """True when the shape's constructor was produced by ``auto_entity``."""
    return getattr(shape.__init__, BARE_INIT_ATTR, None) is not None


def auto_entity(cls: type[T]) -> type[T]:
    """
    Class decorator that installs a shallow-copy constructor.

    The class object itself is modified and returned, so its name, module and
    qualified name are unchanged. Applying the decorator twice is a no-op, and
    subclasses of a decorated class inherit the constructor.

    Example:
        @auto_entity
        class Payment(BaseEntity):
            amount: float
            currency: str

        Payment({"amount": 10, "currency": "USD"})
    """
    if BARE_INIT_ATTR in getattr(cls.__dict__.get("__init__"), "__dict__", {}):
        return cls

    original_init: Callable[..., None] = cls.__init__  # type: ignore[misc]
    bare_init = getattr(original_init, BARE_INIT_ATTR, original_init)

    def __init__(self: Any, partial: Any = None, /) -> None:
        bare_init(self)
        assign_fields(self, partial)

    __init__.__qualname__ = f"{cls.__qualname__}.__init__"
    __init__.__doc__ = f"Create a {cls.__name__}, copying fields from an optional partial."
    setattr(__init__, BARE_INIT_ATTR, bare_init)
    cls.__init__ = __init__  # type: ignore[misc]
    return cls


def build_from(shape: type[T], partial: Any = None) -> T:
    """
    Build an instance of ``shape`` from a partial object.

    Used wherever the runtime produces an entity or response instance. Shapes
    with a synthesized constructor get the partial directly; any other shape is
    constructed bare and then populated.
    """
    if is_synthesized(shape):
        return shape(partial)  # type: ignore[call-arg]
    instance = shape()
    return assign_fields(instance, partial)


# =============================================================================
# Flattening
# =============================================================================

_SCALARS = (str, int, float, bool, Decimal, datetime, date, Enum)


def _flatten(value: Any) -> Any:
    if value is None or isinstance(value, _SCALARS):
        return value
    if isinstance(value, Mapping):
        return {key: _flatten(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_flatten(item) for item in value]
    if hasattr(value, "__dict__"):
        return to_plain(value, deep=True)
    return value


def to_plain(obj: Any, deep: bool = False) -> Any:
    """
    Flatten an instance into a plain dict of its fields.

    Args:
        obj: Shape instance, mapping or pydantic model
        deep: Also flatten nested shapes and lists of shapes

    Returns:
        A new dict; scalars and unknown objects are returned unchanged
    """
    if obj is None or isinstance(obj, _SCALARS):
        return obj
    if isinstance(obj, (list, tuple)):
        return [to_plain(item, deep=deep) for item in obj]
    if isinstance(obj, Mapping):
        data = dict(obj)
    elif callable(getattr(obj, "model_dump", None)):
        data = obj.model_dump()
    elif hasattr(obj, "__dict__"):
        data = dict(vars(obj))
    else:
        return obj
    if deep:
        return {key: _flatten(value) for key, value in data.items()}
    return data
