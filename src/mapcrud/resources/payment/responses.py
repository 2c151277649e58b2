"""Payment response DTOs and their documentation tables."""

from __future__ import annotations

from typing import ClassVar

from mapcrud.resources.payment.enums import PaymentStatus
from mapcrud.runtime.response_decoration import auto_response
from mapcrud.runtime.shapes import BaseListResponseDto, BaseResponseDto
from mapcrud.specs.field import ResponseFieldConfig

PAYMENT_RESPONSE_MAPPING: dict[str, ResponseFieldConfig] = {
    "amount": ResponseFieldConfig(description="Payment amount", example=99.99, type=float),
    "currency": ResponseFieldConfig(description="Payment currency", example="USD", type=str),
    "status": ResponseFieldConfig(
        description="Payment status", example="completed", enum=PaymentStatus
    ),
    "customer_email": ResponseFieldConfig(
        description="Customer email", example="customer@example.com", type=str
    ),
    "customer_name": ResponseFieldConfig(
        description="Customer name", example="John Doe", type=str
    ),
    "description": ResponseFieldConfig(
        description="Payment description",
        example="Payment for order #1234",
        required=False,
        type=str,
    ),
    "transaction_id": ResponseFieldConfig(
        description="Transaction ID", example="txn_1234567890", required=False, type=str
    ),
}

PAYMENT_CREATED_RESPONSE_MAPPING: dict[str, ResponseFieldConfig] = {
    name: PAYMENT_RESPONSE_MAPPING[name]
    for name in ("amount", "currency", "status", "transaction_id")
}


@auto_response(PAYMENT_RESPONSE_MAPPING)
class PaymentResponseDto(BaseResponseDto):
    amount: float
    currency: str
    status: PaymentStatus
    customer_email: str
    customer_name: str
    description: str | None
    transaction_id: str | None


@auto_response(PAYMENT_CREATED_RESPONSE_MAPPING)
class PaymentCreatedResponseDto(BaseResponseDto):
    """Response returned by create; documents the fields a client needs first."""

    amount: float
    currency: str
    status: PaymentStatus
    transaction_id: str | None


class PaymentListResponseDto(BaseListResponseDto):
    item_class: ClassVar[type | None] = PaymentResponseDto

    items: list[PaymentResponseDto]
