"""
OpenAPI rendering of attached field metadata.

Turns the documentation that the input and response appliers attached to a
shape into JSON-schema fragments, and wraps them in the envelope schemas the
HTTP boundary actually returns.
"""

from __future__ import annotations

from typing import Any

from mapcrud.runtime.metadata import FieldMetadata, MetadataKind, get_field_metadata

_SCHEMA_TYPES = {
    "string": "string",
    "number": "number",
    "boolean": "boolean",
    "array": "array",
}


def _enum_type(values: list[Any]) -> str | None:
    if values and all(isinstance(v, str) for v in values):
        return "string"
    if values and all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in values):
        return "number"
    return None


def field_schema(documentation: dict[str, Any]) -> dict[str, Any]:
    """
    Render one field's documentation attribute as a JSON-schema property.

    Fields without a resolved ``type`` are rendered without one.
    """
    schema: dict[str, Any] = {}
    kind = documentation.get("type")

    if kind == "enum":
        enum_type = _enum_type(documentation.get("enum", []))
        if enum_type:
            schema["type"] = enum_type
    elif kind in _SCHEMA_TYPES:
        schema["type"] = _SCHEMA_TYPES[kind]

    if "description" in documentation:
        schema["description"] = documentation["description"]
    if "example" in documentation:
        schema["example"] = documentation["example"]
    if "format" in documentation:
        schema["format"] = documentation["format"]
    if "enum" in documentation:
        schema["enum"] = list(documentation["enum"])
    if "minimum" in documentation:
        schema["minimum"] = documentation["minimum"]
    if "maximum" in documentation:
        schema["maximum"] = documentation["maximum"]

    length_keys = ("minItems", "maxItems") if documentation.get("isArray") else (
        "minLength",
        "maxLength",
    )
    if "minLength" in documentation:
        schema[length_keys[0]] = documentation["minLength"]
    if "maxLength" in documentation:
        schema[length_keys[1]] = documentation["maxLength"]

    if documentation.get("isArray") and kind != "array":
        wrapped: dict[str, Any] = {"type": "array"}
        if "description" in schema:
            wrapped["description"] = schema.pop("description")
        wrapped["items"] = schema
        return wrapped
    if schema.get("type") == "array":
        schema.setdefault("items", {})
    return schema


def _object_schema(title: str, fields: dict[str, FieldMetadata]) -> dict[str, Any]:
    properties = {name: field_schema(meta.documentation) for name, meta in fields.items()}
    required = [name for name, meta in fields.items() if meta.required]
    schema: dict[str, Any] = {"title": title, "type": "object", "properties": properties}
    if required:
        schema["required"] = required
    return schema


def shape_schema(shape: type) -> dict[str, Any]:
    """
    Render a shape's attached metadata as an object schema.

    Response metadata is preferred; input shapes fall back to their input
    metadata. List responses render ``items`` using their ``item_class``.
    """
    fields = get_field_metadata(shape, MetadataKind.RESPONSE)
    if not fields:
        fields = get_field_metadata(shape, MetadataKind.INPUT)
    schema = _object_schema(shape.__name__, fields)

    item_class = getattr(shape, "item_class", None)
    if item_class is not None and "items" in schema["properties"]:
        items_property = schema["properties"]["items"]
        items_property["items"] = shape_schema(item_class)
    return schema


def envelope_schema(data_schema: dict[str, Any] | None) -> dict[str, Any]:
    """Schema of the success envelope around ``data_schema``."""
    return {
        "type": "object",
        "properties": {
            "data": data_schema or {},
            "message": {"type": "string", "example": "Success"},
            "statusCode": {"type": "integer", "example": 200},
            "timestamp": {
                "type": "string",
                "format": "date-time",
                "example": "2024-01-01T00:00:00.000Z",
            },
        },
        "required": ["data", "message", "statusCode", "timestamp"],
    }


def failure_schema() -> dict[str, Any]:
    """Schema of the failure envelope."""
    return {
        "type": "object",
        "properties": {
            "statusCode": {"type": "integer", "example": 404},
            "timestamp": {
                "type": "string",
                "format": "date-time",
                "example": "2024-01-01T00:00:00.000Z",
            },
            "path": {"type": "string", "example": "/payments/999"},
            "message": {
                "oneOf": [
                    {"type": "string"},
                    {"type": "array", "items": {"type": "string"}},
                ],
                "example": "Payment with ID 999 not found",
            },
        },
        "required": ["statusCode", "timestamp", "path", "message"],
    }


def acknowledgement_schema() -> dict[str, Any]:
    """Schema of the delete acknowledgement payload."""
    return {
        "type": "object",
        "properties": {
            "message": {"type": "string", "example": "Payment with ID 1 deleted successfully"}
        },
        "required": ["message"],
    }
