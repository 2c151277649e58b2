"""Payment entity."""

from __future__ import annotations

from mapcrud.resources.payment.enums import PaymentStatus
from mapcrud.runtime.entity import auto_entity
from mapcrud.runtime.shapes import BaseEntity


@auto_entity
class Payment(BaseEntity):
    """
    A stored payment.

    ``description`` and ``transaction_id`` may be unset.
    """

    amount: float
    currency: str
    status: PaymentStatus
    customer_email: str
    customer_name: str
    description: str | None
    transaction_id: str | None
