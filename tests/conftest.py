"""Shared pytest fixtures for mapcrud tests."""

from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest


@pytest.fixture(autouse=True)
def reset_mapcrud_logging() -> Iterator[None]:
    """Drop handlers installed by setup_logging so tests don't share streams."""
    yield
    logger = logging.getLogger("mapcrud")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def payment_payload() -> dict:
    """A valid create-payment request body."""
    return {
        "amount": 99.99,
        "currency": "USD",
        "customer_email": "a@b.com",
        "customer_name": "A B",
    }
