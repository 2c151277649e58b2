"""
Route generator - builds FastAPI routers around a CRUD controller.

Each handler parses the request, constructs the input DTO (which validates
it), calls the controller and wraps the result in the success envelope.
Endpoint documentation (summary, parameters, request and response schemas)
is rendered from the field metadata attached to the shapes.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from fastapi import APIRouter, Path, Request
from fastapi.responses import Response

from mapcrud.runtime.controller import CRUDController
from mapcrud.runtime.envelope import envelope_response
from mapcrud.runtime.errors import ValidationFailedError
from mapcrud.runtime.openapi import (
    acknowledgement_schema,
    envelope_schema,
    failure_schema,
    shape_schema,
)


async def parse_request_body(request: Request) -> dict[str, Any]:
    """
    Parse the request body as a JSON object.

    An empty body is treated as an empty object.

    Raises:
        ValidationFailedError: If the body is not valid JSON or not an object
    """
    if not (await request.body()).strip():
        return {}
    try:
        body = await request.json()
    except ValueError:
        raise ValidationFailedError(["Request body must be valid JSON"]) from None
    if not isinstance(body, dict):
        raise ValidationFailedError(["Request body must be a JSON object"])
    return body


def id_param(entity_name: str) -> Any:
    return Path(description=f"{entity_name} ID")


# =============================================================================
# Handler Factories
# =============================================================================


def create_create_handler(controller: CRUDController) -> Callable[..., Any]:
    """Create a handler for POST /."""

    async def create(request: Request) -> Response:
        body = await parse_request_body(request)
        data = controller.create_schema(body)
        result = await controller.create_entity(data)
        return envelope_response(result, 201)

    return create


def create_list_handler(controller: CRUDController) -> Callable[..., Any]:
    """Create a handler for GET /."""

    async def find_all() -> Response:
        result = await controller.find_all_entities()
        return envelope_response(result)

    return find_all


def create_read_handler(controller: CRUDController) -> Callable[..., Any]:
    """Create a handler for GET /{id}."""

    async def find_one(id: int = id_param(controller.entity_name)) -> Response:
        result = await controller.find_one_entity(id)
        return envelope_response(result)

    return find_one


def create_update_handler(controller: CRUDController) -> Callable[..., Any]:
    """Create a handler for PATCH /{id}."""

    async def update(request: Request, id: int = id_param(controller.entity_name)) -> Response:
        body = await parse_request_body(request)
        data = controller.update_schema(body)
        result = await controller.update_entity(id, data)
        return envelope_response(result)

    return update


def create_delete_handler(controller: CRUDController) -> Callable[..., Any]:
    """Create a handler for DELETE /{id}."""

    async def remove(id: int = id_param(controller.entity_name)) -> Response:
        result = await controller.remove_entity(id)
        return envelope_response(result)

    return remove


# =============================================================================
# Route Generator
# =============================================================================


class RouteGenerator:
    """
    Generates documented FastAPI routes for one resource.

    Args:
        controller: Controller the handlers delegate to
        prefix: URL prefix shared by the routes (e.g. "/payments")
        tag: OpenAPI tag grouping the routes
    """

    def __init__(self, controller: CRUDController, prefix: str = "", tag: str | None = None):
        self.controller = controller
        self.entity_name = controller.entity_name
        self.tag = tag or controller.entity_name
        self._router = APIRouter(prefix=prefix)

    @property
    def router(self) -> APIRouter:
        return self._router

    def add_route(
        self,
        method: str,
        path: str,
        handler: Callable[..., Any],
        *,
        summary: str,
        status_code: int = 200,
        description: str | None = None,
        data_schema: dict[str, Any] | None = None,
        request_shape: type | None = None,
        errors: dict[int, str] | None = None,
    ) -> None:
        """
        Add a route with its documentation.

        Args:
            method: HTTP method
            path: Route path relative to the router prefix
            handler: Endpoint function
            summary: Operation summary
            status_code: Success status code
            description: Success response description
            data_schema: Schema of the ``data`` payload in the success envelope
            request_shape: Input DTO documented as the request body
            errors: Error status codes and their descriptions
        """
        method_map = {
            "GET": self._router.get,
            "POST": self._router.post,
            "PUT": self._router.put,
            "PATCH": self._router.patch,
            "DELETE": self._router.delete,
        }
        router_method = method_map.get(method.upper())
        if not router_method:
            raise ValueError(f"Unsupported HTTP method: {method}")

        responses: dict[int | str, dict[str, Any]] = {
            status_code: {
                "description": description or summary,
                "content": {"application/json": {"schema": envelope_schema(data_schema)}},
            }
        }
        for code, error_description in (errors or {}).items():
            responses[code] = {
                "description": error_description,
                "content": {"application/json": {"schema": failure_schema()}},
            }

        route_kwargs: dict[str, Any] = {
            "summary": summary,
            "tags": [self.tag],
            "status_code": status_code,
            "responses": responses,
        }
        if request_shape is not None:
            route_kwargs["openapi_extra"] = {
                "requestBody": {
                    "required": True,
                    "content": {"application/json": {"schema": shape_schema(request_shape)}},
                }
            }

        router_method(path, **route_kwargs)(handler)

    def add_crud_routes(self, include_list: bool = True) -> APIRouter:
        """
        Add the five standard CRUD routes.

        Args:
            include_list: Set False when the resource provides its own list route
        """
        controller = self.controller
        name = self.entity_name
        single = shape_schema(controller.response_class)

        self.add_route(
            "POST",
            "",
            create_create_handler(controller),
            summary=f"Create a new {name}",
            status_code=201,
            description=f"{name} created successfully",
            data_schema=shape_schema(controller.created_response_class),
            request_shape=controller.create_schema,
            errors={400: "Bad Request"},
        )
        if include_list:
            self.add_route(
                "GET",
                "",
                create_list_handler(controller),
                summary=f"Get all {name}s",
                description=f"List of {name}s",
                data_schema=shape_schema(controller.list_response_class),
            )
        self.add_route(
            "GET",
            "/{id}",
            create_read_handler(controller),
            summary=f"Get {name} by ID",
            description=f"{name} found",
            data_schema=single,
            errors={400: "Bad Request", 404: f"{name} not found"},
        )
        self.add_route(
            "PATCH",
            "/{id}",
            create_update_handler(controller),
            summary=f"Update {name} by ID",
            description=f"{name} updated successfully",
            data_schema=single,
            request_shape=controller.update_schema,
            errors={400: "Bad Request", 404: f"{name} not found"},
        )
        self.add_route(
            "DELETE",
            "/{id}",
            create_delete_handler(controller),
            summary=f"Delete {name} by ID",
            description=f"{name} deleted successfully",
            data_schema=acknowledgement_schema(),
            errors={400: "Bad Request", 404: f"{name} not found"},
        )
        return self._router


def create_crud_router(
    controller: CRUDController, *, prefix: str, tag: str | None = None
) -> APIRouter:
    """
    Create a router exposing the standard CRUD routes of a controller.

    Args:
        controller: Controller for the resource
        prefix: URL prefix (e.g. "/payments")
        tag: OpenAPI tag (defaults to the entity name)

    Returns:
        Router with POST /, GET /, GET /{id}, PATCH /{id} and DELETE /{id}
    """
    return RouteGenerator(controller, prefix=prefix, tag=tag).add_crud_routes()
