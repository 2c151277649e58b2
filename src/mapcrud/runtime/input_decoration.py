"""
Input decoration applier.

Attaches validation predicates and documentation from an input mapping table
to a DTO class at definition time, and validates payloads against the attached
metadata at construction time.

The applier works in two phases:

1. ``resolve_input_mapping`` is pure: it turns a mapping table into a list of
   ``FieldMetadata`` records, or returns None when the table is malformed.
2. ``attach_metadata`` (the only side effect) stores the records on the class.

A malformed table never breaks the class definition. The shape is left
undecorated and a ``ConfigurationWarning`` is emitted instead.
"""

from __future__ import annotations

import inspect
import logging
import warnings
from collections.abc import Callable, Mapping
from typing import Any, ClassVar, TypeVar, get_origin

from mapcrud.runtime.entity import plain_fields
from mapcrud.runtime.errors import ConfigurationWarning, ValidationFailedError
from mapcrud.runtime.field_registry import build_documentation, build_predicates, is_present
from mapcrud.runtime.logging import get_core_logger, log_with_context
from mapcrud.runtime.metadata import (
    FieldMetadata,
    MetadataKind,
    attach_metadata,
    get_field_metadata,
)
from mapcrud.specs.field import FieldRule

T = TypeVar("T")

logger = get_core_logger()


def _configuration_warning(shape_name: str, reason: str) -> None:
    message = f"Input mapping for {shape_name} is malformed ({reason}); shape left undecorated"
    warnings.warn(message, ConfigurationWarning, stacklevel=4)
    log_with_context(logger, logging.WARNING, message, shape=shape_name, reason=reason)


def _is_class_var(annotation: Any) -> bool:
    if isinstance(annotation, str):
        return annotation.startswith(("ClassVar", "typing.ClassVar"))
    return get_origin(annotation) is ClassVar or annotation is ClassVar


def declared_field_names(shape: type) -> list[str]:
    """Annotated instance field names across the MRO, base classes first."""
    names: list[str] = []
    for klass in reversed(shape.__mro__):
        for name, annotation in inspect.get_annotations(klass).items():
            if name.startswith("_") or _is_class_var(annotation) or name in names:
                continue
            names.append(name)
    return names


# =============================================================================
# Phase 1: Resolution
# =============================================================================


def resolve_input_mapping(mapping: Any, shape_name: str) -> list[FieldMetadata] | None:
    """
    Resolve an input mapping table into per-field metadata.

    Args:
        mapping: ``{field name: zero-argument FieldRule producer}``
        shape_name: Name of the target shape (diagnostics only)

    Returns:
        Metadata in table order, or None when the table is malformed
    """
    if not isinstance(mapping, Mapping):
        _configuration_warning(shape_name, f"expected a mapping, got {type(mapping).__name__}")
        return None

    resolved: list[FieldMetadata] = []
    for field_name, producer in mapping.items():
        if not isinstance(field_name, str):
            _configuration_warning(shape_name, f"field name {field_name!r} is not a string")
            return None
        if not callable(producer):
            _configuration_warning(shape_name, f"rule for '{field_name}' is not callable")
            return None
        try:
            rule = producer()
        except Exception as e:
            _configuration_warning(shape_name, f"rule for '{field_name}' raised {e!r}")
            return None
        if not isinstance(rule, FieldRule):
            _configuration_warning(
                shape_name,
                f"rule for '{field_name}' produced {type(rule).__name__}, not FieldRule",
            )
            return None

        untyped = rule.resolved_kind is None
        if untyped:
            log_with_context(
                logger,
                logging.WARNING,
                f"Could not infer a documentation type for {shape_name}.{field_name}",
                shape=shape_name,
                field=field_name,
                example=repr(rule.example),
            )
        resolved.append(
            FieldMetadata(
                name=field_name,
                documentation=build_documentation(rule),
                predicates=build_predicates(rule),
                required=rule.required,
                untyped=untyped,
            )
        )
    return resolved


# =============================================================================
# Phase 2: Attachment
# =============================================================================


def auto_apply(mapping: Any) -> Callable[[type[T]], type[T]]:
    """
    Class decorator applying an input mapping table to a DTO.

    Example:
        @auto_apply(CREATE_PAYMENT_MAPPING)
        class CreatePaymentDto(BaseCreateDto):
            amount: float
            currency: str
    """

    def decorator(cls: type[T]) -> type[T]:
        resolved = resolve_input_mapping(mapping, cls.__name__)
        if resolved is None:
            return cls

        declared = declared_field_names(cls)
        for meta in resolved:
            if meta.name not in declared:
                log_with_context(
                    logger,
                    logging.WARNING,
                    f"Mapping field '{meta.name}' is not declared on {cls.__name__}",
                    shape=cls.__name__,
                    field=meta.name,
                )

        attach_metadata(cls, MetadataKind.INPUT, resolved)
        logger.debug(f"Applied {len(resolved)} input rules to {cls.__name__}")
        return cls

    return decorator


# =============================================================================
# Validation
# =============================================================================


def validate_input(shape: type, payload: Any) -> dict[str, Any]:
    """
    Validate a payload against the input metadata attached to a shape.

    Presence is checked first; absent optional fields skip every other check.
    Each failing field contributes exactly one message (its first failing
    predicate), in mapping-table order. Unknown properties are reported last
    when the shape sets ``forbid_unknown_fields``.

    Returns:
        The payload's fields as a plain dict

    Raises:
        ValidationFailedError: If any field fails; nothing is applied
    """
    values = plain_fields(payload)
    metadata = get_field_metadata(shape, MetadataKind.INPUT)

    messages: list[str] = []
    failed: list[str] = []
    for name, meta in metadata.items():
        value = values.get(name)
        if not is_present(value, meta.required):
            if meta.required:
                messages.append(f"{name} should not be empty")
                failed.append(name)
            continue
        for predicate in meta.predicates:
            if not predicate.test(value):
                messages.append(predicate.describe(name))
                failed.append(name)
                break

    if getattr(shape, "forbid_unknown_fields", False) and metadata:
        allowed = set(metadata) | set(declared_field_names(shape))
        for name in values:
            if name not in allowed:
                messages.append(f"property {name} should not exist")
                failed.append(name)

    if messages:
        logger.debug(f"Validation failed for {shape.__name__}: {messages}")
        raise ValidationFailedError(messages, failed, shape.__name__)
    return values
