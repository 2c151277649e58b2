"""
Registered resources.

Each resource contributes a router factory and the shapes it documents.
Routers are built fresh on every call so each application gets its own
in-memory stores.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fastapi import APIRouter


def load_routers() -> list[APIRouter]:
    """Build the routers of every registered resource."""
    from mapcrud.resources.payment import create_payment_router

    return [create_payment_router()]


def documented_shapes() -> list[type]:
    """All input and response shapes of the registered resources."""
    from mapcrud.resources.payment import PAYMENT_SHAPES

    return list(PAYMENT_SHAPES)
