"""
mapcrud runtime.

Mapping-table appliers, shape base classes, stores, the generic CRUD
controller and the FastAPI glue around them.
"""

from mapcrud.runtime.controller import CRUDController
from mapcrud.runtime.entity import assign_fields, auto_entity, build_from, plain_fields, to_plain
from mapcrud.runtime.errors import (
    BusinessRuleViolationError,
    ConfigurationWarning,
    InvalidTransitionError,
    MapcrudError,
    NotFoundError,
    ValidationFailedError,
)
from mapcrud.runtime.field_registry import (
    array_field,
    boolean_field,
    email_field,
    enum_field,
    number_field,
    string_field,
)
from mapcrud.runtime.input_decoration import auto_apply, resolve_input_mapping, validate_input
from mapcrud.runtime.metadata import (
    FieldMetadata,
    MetadataKind,
    attach_metadata,
    get_field_metadata,
    get_untyped_fields,
)
from mapcrud.runtime.response_decoration import (
    auto_response,
    document_response,
    resolve_response_mapping,
)
from mapcrud.runtime.shapes import (
    BaseCreateDto,
    BaseDto,
    BaseEntity,
    BaseListResponseDto,
    BaseResponseDto,
    BaseShape,
    BaseUpdateDto,
)
from mapcrud.runtime.store import BaseStore, InMemoryStore

__all__ = [
    # Errors
    "BusinessRuleViolationError",
    "ConfigurationWarning",
    "InvalidTransitionError",
    "MapcrudError",
    "NotFoundError",
    "ValidationFailedError",
    # Field registry
    "array_field",
    "boolean_field",
    "email_field",
    "enum_field",
    "number_field",
    "string_field",
    # Metadata
    "FieldMetadata",
    "MetadataKind",
    "attach_metadata",
    "get_field_metadata",
    "get_untyped_fields",
    # Appliers
    "assign_fields",
    "auto_apply",
    "auto_entity",
    "auto_response",
    "build_from",
    "document_response",
    "plain_fields",
    "resolve_input_mapping",
    "resolve_response_mapping",
    "to_plain",
    "validate_input",
    # Shapes
    "BaseCreateDto",
    "BaseDto",
    "BaseEntity",
    "BaseListResponseDto",
    "BaseResponseDto",
    "BaseShape",
    "BaseUpdateDto",
    # Stores and controller
    "BaseStore",
    "CRUDController",
    "InMemoryStore",
]
