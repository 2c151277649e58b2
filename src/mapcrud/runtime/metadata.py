"""
Field metadata storage.

The single place where resolved field metadata is attached to, and read back
from, a shape class. Appliers call ``attach_metadata`` once per shape at class
definition time; validation, OpenAPI rendering and the CLI only read.

Metadata is stored per class under ``__shape_metadata__`` in the class's own
``__dict__`` so subclasses never mutate their bases. Readers merge the MRO
base-first, so a subclass inherits and may override its bases' fields.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from mapcrud.runtime.field_registry import FieldPredicate

METADATA_ATTR = "__shape_metadata__"


class MetadataKind(StrEnum):
    """Which applier produced the metadata."""

    INPUT = "input"
    RESPONSE = "response"


@dataclass(frozen=True)
class FieldMetadata:
    """
    Resolved metadata for one field of a shape.

    Attributes:
        name: Field name
        documentation: Documentation attribute (rendered by the OpenAPI layer)
        predicates: Validation predicates, empty for response fields
        required: Whether the field must be present
        untyped: True when no kind could be resolved for documentation
    """

    name: str
    documentation: dict[str, Any] = field(default_factory=dict)
    predicates: tuple[FieldPredicate, ...] = ()
    required: bool = True
    untyped: bool = False


def attach_metadata(
    shape: type, kind: MetadataKind | str, fields: list[FieldMetadata]
) -> type:
    """
    Attach resolved field metadata to a shape class.

    Replaces any metadata of the same kind previously attached to this exact
    class. Field order is preserved.
    """
    kind = MetadataKind(kind)
    own: dict[MetadataKind, dict[str, FieldMetadata]] = dict(
        shape.__dict__.get(METADATA_ATTR, {})
    )
    own[kind] = {meta.name: meta for meta in fields}
    setattr(shape, METADATA_ATTR, own)
    return shape


def get_field_metadata(shape: type, kind: MetadataKind | str) -> dict[str, FieldMetadata]:
    """
    Read the merged field metadata of a shape.

    Returns:
        Ordered mapping of field name to metadata, base classes first
    """
    kind = MetadataKind(kind)
    merged: dict[str, FieldMetadata] = {}
    for klass in reversed(shape.__mro__):
        own = klass.__dict__.get(METADATA_ATTR)
        if own and kind in own:
            merged.update(own[kind])
    return merged


def has_metadata(shape: type, kind: MetadataKind | str) -> bool:
    return bool(get_field_metadata(shape, kind))


def get_untyped_fields(shape: type) -> list[str]:
    """Names of input and response fields whose documentation type could not be resolved."""
    untyped: list[str] = []
    for kind in (MetadataKind.INPUT, MetadataKind.RESPONSE):
        for name, meta in get_field_metadata(shape, kind).items():
            if meta.untyped and name not in untyped:
                untyped.append(name)
    return untyped
