"""
Payment resource.

A sample resource built on the mapcrud runtime: entity, mapping tables,
input and response DTOs, business rules and HTTP routes.
"""

from mapcrud.resources.payment.controller import PaymentController
from mapcrud.resources.payment.dto import (
    CREATE_PAYMENT_MAPPING,
    UPDATE_PAYMENT_MAPPING,
    CreatePaymentDto,
    UpdatePaymentDto,
)
from mapcrud.resources.payment.entity import Payment
from mapcrud.resources.payment.enums import PaymentStatus
from mapcrud.resources.payment.responses import (
    PAYMENT_CREATED_RESPONSE_MAPPING,
    PAYMENT_RESPONSE_MAPPING,
    PaymentCreatedResponseDto,
    PaymentListResponseDto,
    PaymentResponseDto,
)
from mapcrud.resources.payment.routes import create_payment_router
from mapcrud.resources.payment.service import PAYMENT_STATE_MACHINE, PaymentService

PAYMENT_SHAPES: list[type] = [
    CreatePaymentDto,
    UpdatePaymentDto,
    PaymentResponseDto,
    PaymentCreatedResponseDto,
    PaymentListResponseDto,
]

__all__ = [
    "CREATE_PAYMENT_MAPPING",
    "PAYMENT_CREATED_RESPONSE_MAPPING",
    "PAYMENT_RESPONSE_MAPPING",
    "PAYMENT_SHAPES",
    "PAYMENT_STATE_MACHINE",
    "UPDATE_PAYMENT_MAPPING",
    "CreatePaymentDto",
    "Payment",
    "PaymentController",
    "PaymentCreatedResponseDto",
    "PaymentListResponseDto",
    "PaymentResponseDto",
    "PaymentService",
    "PaymentStatus",
    "UpdatePaymentDto",
    "create_payment_router",
]
