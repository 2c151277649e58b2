"""
Payment service.

In-memory store for payments plus the payment business rules:

- amounts must be positive
- currencies are limited to USD, EUR and GBP (case-insensitive)
- new payments start ``pending`` with a generated transaction id
- status transitions follow ``PAYMENT_STATE_MACHINE``
- completed and refunded payments cannot be deleted

Every rule is checked before the store is mutated.
"""

from __future__ import annotations

import random
import string
import time
from typing import Any

from mapcrud.resources.payment.entity import Payment
from mapcrud.resources.payment.enums import PaymentStatus
from mapcrud.runtime.errors import BusinessRuleViolationError, NotFoundError
from mapcrud.runtime.logging import get_core_logger
from mapcrud.runtime.store import InMemoryStore
from mapcrud.specs.state_machine import StateMachineSpec

logger = get_core_logger()

SUPPORTED_CURRENCIES = ("USD", "EUR", "GBP")

# Probability that simulated processing succeeds
PROCESSING_SUCCESS_RATE = 0.9

PAYMENT_STATE_MACHINE = StateMachineSpec.from_table(
    {
        PaymentStatus.PENDING: [PaymentStatus.COMPLETED, PaymentStatus.FAILED],
        PaymentStatus.COMPLETED: [PaymentStatus.REFUNDED],
        PaymentStatus.FAILED: [],
        PaymentStatus.REFUNDED: [],
    }
)

_TRANSACTION_ALPHABET = string.ascii_lowercase + string.digits


class PaymentService(InMemoryStore[Payment]):
    """
    Store and business rules for payments.

    Args:
        rng: Random source for simulated processing and transaction ids
    """

    def __init__(self, rng: random.Random | None = None):
        super().__init__(Payment, "Payment", state_machine=PAYMENT_STATE_MACHINE)
        self._rng = rng or random.Random()

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    @staticmethod
    def validate_amount(amount: Any) -> None:
        if amount is None or amount <= 0:
            raise BusinessRuleViolationError("Payment amount must be positive")

    @staticmethod
    def validate_currency(currency: str | None) -> None:
        if currency is None or currency.upper() not in SUPPORTED_CURRENCIES:
            raise BusinessRuleViolationError(
                f"Invalid currency. Supported: {', '.join(SUPPORTED_CURRENCIES)}"
            )

    def generate_transaction_id(self) -> str:
        """``txn_<epoch millis>_<9 random base-36 chars>``."""
        suffix = "".join(self._rng.choice(_TRANSACTION_ALPHABET) for _ in range(9))
        return f"txn_{int(time.time() * 1000)}_{suffix}"

    # -------------------------------------------------------------------------
    # Store hooks
    # -------------------------------------------------------------------------

    def prepare_create(self, values: dict[str, Any]) -> dict[str, Any]:
        self.validate_amount(values.get("amount"))
        self.validate_currency(values.get("currency"))
        return {
            **values,
            "status": PaymentStatus.PENDING,
            "transaction_id": self.generate_transaction_id(),
        }

    def prepare_update(self, current: Payment, changes: dict[str, Any]) -> dict[str, Any]:
        if changes.get("amount") is not None:
            self.validate_amount(changes["amount"])
        if changes.get("currency") is not None:
            self.validate_currency(changes["currency"])
        if changes.get("status") is not None:
            changes = {**changes, "status": PaymentStatus(changes["status"])}
        return changes

    def prepare_remove(self, current: Payment) -> None:
        if current.status in (PaymentStatus.COMPLETED, PaymentStatus.REFUNDED):
            raise BusinessRuleViolationError(f"Cannot delete {current.status} payments")

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    async def find_by_status(self, status: PaymentStatus | str) -> list[Payment]:
        return [p for p in await self.find_all() if p.status == status]

    async def find_by_customer_email(self, email: str) -> list[Payment]:
        return [p for p in await self.find_all() if p.customer_email == email]

    # -------------------------------------------------------------------------
    # Business operations
    # -------------------------------------------------------------------------

    async def _get(self, id: int) -> Payment:
        payment = await self.find_one(id)
        if payment is None:
            raise NotFoundError("Payment", id)
        return payment

    async def process_payment(self, id: int) -> Payment:
        """
        Simulate processing a pending payment.

        Succeeds with probability ``PROCESSING_SUCCESS_RATE``; the payment ends
        ``completed`` on success and ``failed`` otherwise.

        Raises:
            NotFoundError: If there is no such payment
            BusinessRuleViolationError: If the payment is not pending
        """
        payment = await self._get(id)
        if payment.status != PaymentStatus.PENDING:
            raise BusinessRuleViolationError(f"Payment with ID {id} is not in pending status")

        success = self._rng.random() < PROCESSING_SUCCESS_RATE
        status = PaymentStatus.COMPLETED if success else PaymentStatus.FAILED
        logger.info(f"Processed payment {id}: {status}")
        updated = await self.update(id, {"status": status})
        if updated is None:
            raise NotFoundError("Payment", id)
        return updated

    async def refund_payment(self, id: int) -> Payment:
        """
        Refund a completed payment.

        Raises:
            NotFoundError: If there is no such payment
            BusinessRuleViolationError: If the payment is not completed
        """
        payment = await self._get(id)
        if payment.status != PaymentStatus.COMPLETED:
            raise BusinessRuleViolationError("Can only refund completed payments")

        logger.info(f"Refunded payment {id}")
        updated = await self.update(id, {"status": PaymentStatus.REFUNDED})
        if updated is None:
            raise NotFoundError("Payment", id)
        return updated
