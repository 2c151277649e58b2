"""Payment enumerations."""

from enum import StrEnum


class PaymentStatus(StrEnum):
    """Lifecycle status of a payment."""

    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"
