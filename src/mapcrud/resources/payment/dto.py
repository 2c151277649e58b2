"""
Payment input DTOs and their mapping tables.

Validation and documentation for each field come from the mapping table the
DTO is decorated with.
"""

from __future__ import annotations

from mapcrud.resources.payment.enums import PaymentStatus
from mapcrud.runtime.field_registry import email_field, enum_field, number_field, string_field
from mapcrud.runtime.input_decoration import auto_apply
from mapcrud.runtime.shapes import BaseCreateDto, BaseUpdateDto

CREATE_PAYMENT_MAPPING = {
    "amount": lambda: number_field("Payment amount", 99.99),
    "currency": lambda: string_field(
        "Payment currency (USD, EUR, GBP)", "USD", min_length=3, max_length=3
    ),
    "customer_email": lambda: email_field("Customer email", "customer@example.com"),
    "customer_name": lambda: string_field(
        "Customer name", "John Doe", min_length=2, max_length=100
    ),
    "description": lambda: string_field(
        "Payment description", "Payment for order #1234", required=False, max_length=500
    ),
}

UPDATE_PAYMENT_MAPPING = {
    "amount": lambda: number_field("Payment amount", 99.99, required=False),
    "currency": lambda: string_field(
        "Payment currency (USD, EUR, GBP)", "USD", required=False, min_length=3, max_length=3
    ),
    "status": lambda: enum_field(PaymentStatus, "Payment status", "completed", required=False),
    "customer_email": lambda: email_field(
        "Customer email", "customer@example.com", required=False
    ),
    "customer_name": lambda: string_field(
        "Customer name", "John Doe", required=False, min_length=2, max_length=100
    ),
    "description": lambda: string_field(
        "Payment description", "Payment for order #1234", required=False, max_length=500
    ),
}


@auto_apply(CREATE_PAYMENT_MAPPING)
class CreatePaymentDto(BaseCreateDto):
    amount: float
    currency: str
    customer_email: str
    customer_name: str
    description: str | None


@auto_apply(UPDATE_PAYMENT_MAPPING)
class UpdatePaymentDto(BaseUpdateDto):
    amount: float | None
    currency: str | None
    status: PaymentStatus | None
    customer_email: str | None
    customer_name: str | None
    description: str | None
