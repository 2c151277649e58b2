"""Fixtures for mapcrud unit tests."""

from __future__ import annotations

import pytest
from support import (
    CreateNoteDto,
    FixedRandom,
    Note,
    NoteListResponseDto,
    NoteResponseDto,
    UpdateNoteDto,
)

from mapcrud.resources.payment import CreatePaymentDto, PaymentController, PaymentService
from mapcrud.runtime.controller import CRUDController
from mapcrud.runtime.store import InMemoryStore


@pytest.fixture
def note_store() -> InMemoryStore[Note]:
    return InMemoryStore(Note, "Note")


@pytest.fixture
def note_controller(note_store: InMemoryStore[Note]) -> CRUDController:
    return CRUDController(
        "Note",
        note_store,
        response_class=NoteResponseDto,
        list_response_class=NoteListResponseDto,
        create_schema=CreateNoteDto,
        update_schema=UpdateNoteDto,
    )


@pytest.fixture
def create_dto(payment_payload: dict) -> CreatePaymentDto:
    return CreatePaymentDto(payment_payload)


@pytest.fixture
def payment_service() -> PaymentService:
    """Payment service whose simulated processing always succeeds."""
    return PaymentService(rng=FixedRandom(0.0))


@pytest.fixture
def payment_controller(payment_service: PaymentService) -> PaymentController:
    return PaymentController(payment_service)
