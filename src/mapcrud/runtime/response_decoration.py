"""
Response decoration applier.

Attaches documentation from a response mapping table to a response DTO and
gives it the same shallow-copy constructor entities have. Response shapes are
always built from a fully formed source object:

    @auto_response(PAYMENT_RESPONSE_MAPPING)
    class PaymentResponseDto(BaseResponseDto):
        amount: float
        ...

    PaymentResponseDto(payment)

When a field config has no explicit ``type`` the kind is inferred (enum, then
array flag, then the example's runtime type). A field that stays untyped is a
documentation degradation only: it is logged and still rendered, without a
type, and never blocks a response.
"""

from __future__ import annotations

import logging
import warnings
from collections.abc import Callable, Mapping
from typing import Any, TypeVar

from pydantic import ValidationError

from mapcrud.runtime.entity import auto_entity
from mapcrud.runtime.errors import ConfigurationWarning
from mapcrud.runtime.logging import get_core_logger, log_with_context
from mapcrud.runtime.metadata import FieldMetadata, MetadataKind, attach_metadata
from mapcrud.specs.field import ResponseFieldConfig

T = TypeVar("T")

logger = get_core_logger()


def response_documentation(config: ResponseFieldConfig) -> dict[str, Any]:
    """Documentation attribute for one response field."""
    doc: dict[str, Any] = {
        "description": config.description,
        "required": config.required,
    }
    if config.example is not None:
        doc["example"] = config.example
    kind = config.resolved_kind
    if kind is not None:
        doc["type"] = kind.value
    if config.enum is not None:
        doc["enum"] = list(config.enum)
    if config.is_array:
        doc["isArray"] = True
    return doc


def resolve_response_mapping(mapping: Any, shape_name: str) -> list[FieldMetadata] | None:
    """
    Resolve a response mapping table into per-field metadata.

    Entries may be ``ResponseFieldConfig`` instances or plain dicts with the
    same keys (``isArray`` is accepted as an alias of ``is_array``).

    Returns:
        Metadata in table order, or None when the table is malformed
    """
    if not isinstance(mapping, Mapping):
        _configuration_warning(shape_name, f"expected a mapping, got {type(mapping).__name__}")
        return None

    resolved: list[FieldMetadata] = []
    for field_name, entry in mapping.items():
        if not isinstance(field_name, str):
            _configuration_warning(shape_name, f"field name {field_name!r} is not a string")
            return None
        try:
            config = _coerce_config(entry)
        except (TypeError, ValidationError) as e:
            _configuration_warning(shape_name, f"config for '{field_name}' is invalid: {e}")
            return None

        untyped = config.resolved_kind is None
        if untyped:
            log_with_context(
                logger,
                logging.WARNING,
                f"Could not infer a documentation type for {shape_name}.{field_name}",
                shape=shape_name,
                field=field_name,
                example=repr(config.example),
            )
        resolved.append(
            FieldMetadata(
                name=field_name,
                documentation=response_documentation(config),
                required=config.required,
                untyped=untyped,
            )
        )
    return resolved


def _coerce_config(entry: Any) -> ResponseFieldConfig:
    if isinstance(entry, ResponseFieldConfig):
        return entry
    if isinstance(entry, Mapping):
        data = dict(entry)
        if "isArray" in data:
            data["is_array"] = data.pop("isArray")
        return ResponseFieldConfig.model_validate(data)
    raise TypeError(f"expected ResponseFieldConfig or mapping, got {type(entry).__name__}")


def _configuration_warning(shape_name: str, reason: str) -> None:
    message = f"Response mapping for {shape_name} is malformed ({reason}); shape left undocumented"
    warnings.warn(message, ConfigurationWarning, stacklevel=4)
    log_with_context(logger, logging.WARNING, message, shape=shape_name, reason=reason)


def document_response(mapping: Any) -> Callable[[type[T]], type[T]]:
    """Class decorator attaching response documentation only."""

    def decorator(cls: type[T]) -> type[T]:
        resolved = resolve_response_mapping(mapping, cls.__name__)
        if resolved is not None:
            attach_metadata(cls, MetadataKind.RESPONSE, resolved)
        return cls

    return decorator


def auto_response(mapping: Any) -> Callable[[type[T]], type[T]]:
    """
    Class decorator attaching response documentation and a shallow-copy
    constructor.

    The decorated class keeps its own name; no wrapper type is created.
    The constructor is synthesized even when the mapping is malformed.
    """

    def decorator(cls: type[T]) -> type[T]:
        return auto_entity(document_response(mapping)(cls))

    return decorator
