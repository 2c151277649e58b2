"""Payment HTTP routes under ``/payments``."""

from __future__ import annotations

from fastapi import APIRouter, Path, Query
from fastapi.responses import Response

from mapcrud.resources.payment.controller import PaymentController
from mapcrud.resources.payment.enums import PaymentStatus
from mapcrud.runtime.envelope import envelope_response
from mapcrud.runtime.openapi import shape_schema
from mapcrud.runtime.route_generator import RouteGenerator, id_param


def create_payment_router(controller: PaymentController | None = None) -> APIRouter:
    """
    Build the payment router.

    Args:
        controller: Controller to serve (a fresh in-memory one by default)

    Returns:
        Router with the CRUD routes plus process, refund and status lookups
    """
    controller = controller or PaymentController()
    generator = RouteGenerator(controller, prefix="/payments", tag="Payment")
    single = shape_schema(controller.response_class)
    listing = shape_schema(controller.list_response_class)

    async def find_all(
        status: PaymentStatus | None = Query(None, description="Filter by payment status"),
        email: str | None = Query(None, description="Filter by customer email"),
    ) -> Response:
        result = await controller.find_all_entities(status=status, email=email)
        return envelope_response(result)

    async def find_by_status(
        status: PaymentStatus = Path(description="Payment status"),
    ) -> Response:
        result = await controller.find_by_status(status)
        return envelope_response(result)

    async def process_payment(id: int = id_param("Payment")) -> Response:
        result = await controller.process_payment(id)
        return envelope_response(result)

    async def refund_payment(id: int = id_param("Payment")) -> Response:
        result = await controller.refund_payment(id)
        return envelope_response(result)

    generator.add_route(
        "GET",
        "",
        find_all,
        summary="Get all Payments",
        description="List of Payments",
        data_schema=listing,
        errors={400: "Bad Request"},
    )
    generator.add_route(
        "GET",
        "/status/{status}",
        find_by_status,
        summary="Get payments by status",
        description="List of payments with specified status",
        data_schema=listing,
        errors={400: "Bad Request"},
    )
    generator.add_crud_routes(include_list=False)
    generator.add_route(
        "POST",
        "/{id}/process",
        process_payment,
        summary="Process a pending payment",
        description="Payment processed successfully",
        data_schema=single,
        errors={400: "Payment cannot be processed", 404: "Payment not found"},
    )
    generator.add_route(
        "POST",
        "/{id}/refund",
        refund_payment,
        summary="Refund a completed payment",
        description="Payment refunded successfully",
        data_schema=single,
        errors={400: "Payment cannot be refunded", 404: "Payment not found"},
    )
    return generator.router
