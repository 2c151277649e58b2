"""
Base resource shapes.

Resources declare their entities, input DTOs and response DTOs by
subclassing these and annotating fields. Field semantics (validation and
documentation) come from the mapping table applied to each subclass; the
shapes themselves carry none.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, ClassVar

from mapcrud.runtime.entity import auto_entity, to_plain
from mapcrud.runtime.input_decoration import declared_field_names, validate_input
from mapcrud.runtime.response_decoration import auto_response, document_response
from mapcrud.specs.field import FieldKind, ResponseFieldConfig

# =============================================================================
# Base Shape
# =============================================================================


@auto_entity
class BaseShape:
    """
    Named record type with a shallow-copy constructor.

    Instances compare equal when they are of the same type and hold the same
    fields.
    """

    @classmethod
    def declared_fields(cls) -> list[str]:
        """Annotated field names, base classes first."""
        return declared_field_names(cls)

    def to_dict(self) -> dict[str, Any]:
        """Flatten into a plain dict of the fields that are set."""
        return to_plain(self)

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return vars(self) == vars(other)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        fields = ", ".join(f"{k}={v!r}" for k, v in vars(self).items())
        return f"{type(self).__name__}({fields})"


class BaseEntity(BaseShape):
    """Stored record with store-assigned identity and timestamps."""

    id: int
    created_at: datetime
    updated_at: datetime


# =============================================================================
# Input Shapes
# =============================================================================


class BaseDto(BaseShape):
    """
    Input shape validated on construction.

    ``CreatePaymentDto(payload)`` checks the payload against the input
    metadata attached by ``auto_apply`` and raises ``ValidationFailedError``
    before any field is assigned.
    """

    forbid_unknown_fields: ClassVar[bool] = True

    def __init__(self, payload: Any = None, /) -> None:
        validate_input(type(self), payload)
        super().__init__(payload)


class BaseCreateDto(BaseDto):
    """Input shape for create operations."""


class BaseUpdateDto(BaseDto):
    """Input shape for partial updates; only the fields that were sent are set."""


# =============================================================================
# Response Shapes
# =============================================================================

BASE_RESPONSE_MAPPING: dict[str, ResponseFieldConfig] = {
    "id": ResponseFieldConfig(description="Unique identifier", example=1),
    "created_at": ResponseFieldConfig(
        description="Creation timestamp",
        example="2024-01-01T00:00:00.000Z",
    ),
    "updated_at": ResponseFieldConfig(
        description="Last update timestamp",
        example="2024-01-01T00:00:00.000Z",
    ),
}

BASE_LIST_RESPONSE_MAPPING: dict[str, ResponseFieldConfig] = {
    "items": ResponseFieldConfig(
        description="List of items",
        example=[],
        type=FieldKind.ARRAY,
        is_array=True,
    ),
    "total": ResponseFieldConfig(description="Total number of items", example=10),
}


@auto_response(BASE_RESPONSE_MAPPING)
class BaseResponseDto(BaseShape):
    """Single-item response built from a stored entity."""

    id: int
    created_at: datetime
    updated_at: datetime


@document_response(BASE_LIST_RESPONSE_MAPPING)
class BaseListResponseDto(BaseShape):
    """
    List response: the items plus their count.

    ``item_class`` names the single-item response shape for documentation.
    """

    item_class: ClassVar[type | None] = None

    items: list[Any]
    total: int

    def __init__(self, items: list[Any] | None = None, total: int | None = None) -> None:
        self.items = list(items or [])
        self.total = len(self.items) if total is None else total
