"""
Tests for the payment service and controller business rules.
"""

import re

import pytest
from support import FixedRandom

from mapcrud.resources.payment import (
    CreatePaymentDto,
    PaymentController,
    PaymentCreatedResponseDto,
    PaymentService,
    PaymentStatus,
    UpdatePaymentDto,
)
from mapcrud.runtime.errors import (
    BusinessRuleViolationError,
    InvalidTransitionError,
    NotFoundError,
    ValidationFailedError,
)

TRANSACTION_ID = re.compile(r"^txn_\d+_[a-z0-9]{9}$")


def payload(**overrides: object) -> dict:
    data = {
        "amount": 99.99,
        "currency": "USD",
        "customer_email": "a@b.com",
        "customer_name": "A B",
    }
    data.update(overrides)
    return data


class TestCreatePayment:
    """Tests for creating payments."""

    @pytest.mark.asyncio
    async def test_new_payment_is_pending(self, payment_service: PaymentService) -> None:
        payment = await payment_service.create(CreatePaymentDto(payload()))
        assert payment.id == 1
        assert payment.status == PaymentStatus.PENDING
        assert payment.amount == 99.99
        assert TRANSACTION_ID.match(payment.transaction_id)

    @pytest.mark.asyncio
    async def test_transaction_ids_are_unique(self, payment_service: PaymentService) -> None:
        first = await payment_service.create(CreatePaymentDto(payload()))
        second = await payment_service.create(CreatePaymentDto(payload()))
        assert first.id != second.id
        assert first.transaction_id != second.transaction_id

    @pytest.mark.asyncio
    async def test_client_status_is_ignored(self, payment_service: PaymentService) -> None:
        payment = await payment_service.create(payload(status="completed"))
        assert payment.status == PaymentStatus.PENDING

    @pytest.mark.asyncio
    async def test_non_positive_amount_rejected(self, payment_service: PaymentService) -> None:
        with pytest.raises(BusinessRuleViolationError, match="Payment amount must be positive"):
            await payment_service.create(CreatePaymentDto(payload(amount=-5)))
        assert await payment_service.find_all() == []

    @pytest.mark.asyncio
    async def test_unsupported_currency_rejected(self, payment_service: PaymentService) -> None:
        with pytest.raises(BusinessRuleViolationError) as exc_info:
            await payment_service.create(CreatePaymentDto(payload(currency="JPY")))
        assert exc_info.value.message == "Invalid currency. Supported: USD, EUR, GBP"

    @pytest.mark.asyncio
    async def test_currency_is_case_insensitive(self, payment_service: PaymentService) -> None:
        payment = await payment_service.create(CreatePaymentDto(payload(currency="eur")))
        assert payment.currency == "eur"

    def test_shape_rules_run_first(self) -> None:
        with pytest.raises(ValidationFailedError) as exc_info:
            CreatePaymentDto(payload(currency="US", customer_email="nope"))
        assert exc_info.value.messages == [
            "currency must be longer than or equal to 3 characters",
            "customer_email must be an email",
        ]


class TestUpdatePayment:
    """Tests for updates and status transitions."""

    @pytest.mark.asyncio
    async def test_pending_to_completed(self, payment_service: PaymentService) -> None:
        await payment_service.create(payload())
        updated = await payment_service.update(1, UpdatePaymentDto({"status": "completed"}))
        assert updated.status == PaymentStatus.COMPLETED
        assert isinstance(updated.status, PaymentStatus)

    @pytest.mark.asyncio
    async def test_pending_to_refunded_rejected(self, payment_service: PaymentService) -> None:
        await payment_service.create(payload())
        with pytest.raises(InvalidTransitionError, match="from pending to refunded"):
            await payment_service.update(1, UpdatePaymentDto({"status": "refunded"}))
        assert (await payment_service.find_one(1)).status == PaymentStatus.PENDING

    def test_invalid_status_value_rejected_by_dto(self) -> None:
        with pytest.raises(ValidationFailedError) as exc_info:
            UpdatePaymentDto({"status": "lost"})
        assert exc_info.value.messages == [
            "status must be one of the following values: pending, completed, failed, refunded"
        ]

    @pytest.mark.asyncio
    async def test_amount_rechecked_on_update(self, payment_service: PaymentService) -> None:
        await payment_service.create(payload())
        with pytest.raises(BusinessRuleViolationError):
            await payment_service.update(1, UpdatePaymentDto({"amount": 0}))
        assert (await payment_service.find_one(1)).amount == 99.99

    @pytest.mark.asyncio
    async def test_null_status_keeps_transition_rules(
        self, payment_service: PaymentService
    ) -> None:
        await payment_service.create(payload())
        updated = await payment_service.update(
            1, UpdatePaymentDto({"status": None, "amount": None})
        )
        assert updated.status == PaymentStatus.PENDING
        assert updated.amount == 99.99
        with pytest.raises(InvalidTransitionError, match="from pending to refunded"):
            await payment_service.update(1, UpdatePaymentDto({"status": "refunded"}))


class TestRemovePayment:
    """Tests for deleting payments."""

    @pytest.mark.asyncio
    async def test_pending_payment_can_be_deleted(self, payment_service: PaymentService) -> None:
        await payment_service.create(payload())
        assert await payment_service.remove(1)

    @pytest.mark.asyncio
    async def test_completed_payment_cannot_be_deleted(
        self, payment_service: PaymentService
    ) -> None:
        await payment_service.create(payload())
        await payment_service.process_payment(1)
        with pytest.raises(BusinessRuleViolationError, match="Cannot delete completed payments"):
            await payment_service.remove(1)
        assert await payment_service.find_one(1) is not None


class TestProcessAndRefund:
    """Tests for the simulated processor and refunds."""

    @pytest.mark.asyncio
    async def test_process_success(self, payment_service: PaymentService) -> None:
        await payment_service.create(payload())
        payment = await payment_service.process_payment(1)
        assert payment.status == PaymentStatus.COMPLETED

    @pytest.mark.asyncio
    async def test_process_failure(self) -> None:
        service = PaymentService(rng=FixedRandom(0.95))
        await service.create(payload())
        payment = await service.process_payment(1)
        assert payment.status == PaymentStatus.FAILED

    @pytest.mark.asyncio
    async def test_process_requires_pending(self, payment_service: PaymentService) -> None:
        await payment_service.create(payload())
        await payment_service.process_payment(1)
        with pytest.raises(
            BusinessRuleViolationError, match="Payment with ID 1 is not in pending status"
        ):
            await payment_service.process_payment(1)

    @pytest.mark.asyncio
    async def test_process_missing(self, payment_service: PaymentService) -> None:
        with pytest.raises(NotFoundError, match="Payment with ID 999 not found"):
            await payment_service.process_payment(999)

    @pytest.mark.asyncio
    async def test_refund_completed(self, payment_service: PaymentService) -> None:
        await payment_service.create(payload())
        await payment_service.process_payment(1)
        payment = await payment_service.refund_payment(1)
        assert payment.status == PaymentStatus.REFUNDED

    @pytest.mark.asyncio
    async def test_refund_requires_completed(self, payment_service: PaymentService) -> None:
        await payment_service.create(payload())
        with pytest.raises(BusinessRuleViolationError, match="Can only refund completed payments"):
            await payment_service.refund_payment(1)


class TestQueries:
    """Tests for filtered lookups."""

    @pytest.mark.asyncio
    async def test_find_by_status(self, payment_service: PaymentService) -> None:
        await payment_service.create(payload())
        await payment_service.create(payload())
        await payment_service.process_payment(2)

        pending = await payment_service.find_by_status(PaymentStatus.PENDING)
        completed = await payment_service.find_by_status("completed")
        assert [p.id for p in pending] == [1]
        assert [p.id for p in completed] == [2]

    @pytest.mark.asyncio
    async def test_find_by_customer_email(self, payment_service: PaymentService) -> None:
        await payment_service.create(payload())
        await payment_service.create(payload(customer_email="c@d.com"))
        found = await payment_service.find_by_customer_email("c@d.com")
        assert [p.id for p in found] == [2]


class TestPaymentController:
    """Tests for the payment controller wiring."""

    @pytest.mark.asyncio
    async def test_create_returns_created_shape(
        self, payment_controller: PaymentController, create_dto: CreatePaymentDto
    ) -> None:
        response = await payment_controller.create_entity(create_dto)
        assert isinstance(response, PaymentCreatedResponseDto)
        assert response.status == PaymentStatus.PENDING

    @pytest.mark.asyncio
    async def test_find_one_missing(self, payment_controller: PaymentController) -> None:
        with pytest.raises(NotFoundError) as exc_info:
            await payment_controller.find_one_entity(999)
        assert exc_info.value.message == "Payment with ID 999 not found"

    @pytest.mark.asyncio
    async def test_status_filter_wins_over_email(
        self, payment_controller: PaymentController, create_dto: CreatePaymentDto
    ) -> None:
        await payment_controller.create_entity(create_dto)
        result = await payment_controller.find_all_entities(
            status=PaymentStatus.COMPLETED, email="a@b.com"
        )
        assert result.total == 0

        result = await payment_controller.find_all_entities(email="a@b.com")
        assert result.total == 1
