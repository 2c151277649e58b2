"""Payment controller: the generic CRUD wiring plus payment operations."""

from __future__ import annotations

from mapcrud.resources.payment.dto import CreatePaymentDto, UpdatePaymentDto
from mapcrud.resources.payment.entity import Payment
from mapcrud.resources.payment.enums import PaymentStatus
from mapcrud.resources.payment.responses import (
    PaymentCreatedResponseDto,
    PaymentListResponseDto,
    PaymentResponseDto,
)
from mapcrud.resources.payment.service import PaymentService
from mapcrud.runtime.controller import CRUDController


class PaymentController(
    CRUDController[
        Payment,
        CreatePaymentDto,
        UpdatePaymentDto,
        PaymentResponseDto,
        PaymentListResponseDto,
    ]
):
    """
    Payment endpoints.

    ``find_all_entities`` accepts optional filters; when both are given the
    status filter wins.
    """

    def __init__(self, service: PaymentService | None = None):
        self.service = service or PaymentService()
        super().__init__(
            "Payment",
            self.service,
            response_class=PaymentResponseDto,
            list_response_class=PaymentListResponseDto,
            create_schema=CreatePaymentDto,
            update_schema=UpdatePaymentDto,
            created_response_class=PaymentCreatedResponseDto,
        )

    async def find_all_entities(
        self,
        status: PaymentStatus | str | None = None,
        email: str | None = None,
    ) -> PaymentListResponseDto:
        if status:
            payments = await self.service.find_by_status(status)
        elif email:
            payments = await self.service.find_by_customer_email(email)
        else:
            payments = await self.service.find_all()
        return self.build_list_response(payments)

    async def find_by_status(self, status: PaymentStatus | str) -> PaymentListResponseDto:
        return self.build_list_response(await self.service.find_by_status(status))

    async def process_payment(self, id: int) -> PaymentResponseDto:
        return self.build_response(await self.service.process_payment(id))

    async def refund_payment(self, id: int) -> PaymentResponseDto:
        return self.build_response(await self.service.refund_payment(id))
