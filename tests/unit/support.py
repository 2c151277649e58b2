"""
Test support: a minimal "Note" resource and a deterministic random source.

The Note shapes exercise the generic runtime without any payment rules.
"""

from __future__ import annotations

import random

from mapcrud.runtime.entity import auto_entity
from mapcrud.runtime.field_registry import number_field, string_field
from mapcrud.runtime.input_decoration import auto_apply
from mapcrud.runtime.response_decoration import auto_response
from mapcrud.runtime.shapes import (
    BaseCreateDto,
    BaseEntity,
    BaseListResponseDto,
    BaseResponseDto,
    BaseUpdateDto,
)
from mapcrud.specs.field import ResponseFieldConfig


class FixedRandom(random.Random):
    """Random source whose ``random()`` always returns the same value."""

    def __init__(self, value: float):
        super().__init__(0)
        self.value = value

    def random(self) -> float:
        return self.value


NOTE_CREATE_MAPPING = {
    "title": lambda: string_field("Note title", "Groceries", min_length=1, max_length=50),
    "priority": lambda: number_field("Priority", 1, required=False, min=0, max=5),
}

NOTE_UPDATE_MAPPING = {
    "title": lambda: string_field("Note title", "Groceries", required=False, max_length=50),
    "priority": lambda: number_field("Priority", 1, required=False, min=0, max=5),
}

NOTE_RESPONSE_MAPPING = {
    "title": ResponseFieldConfig(description="Note title", example="Groceries"),
    "priority": ResponseFieldConfig(description="Priority", example=1, required=False),
}


@auto_entity
class Note(BaseEntity):
    title: str
    priority: int | None


@auto_apply(NOTE_CREATE_MAPPING)
class CreateNoteDto(BaseCreateDto):
    title: str
    priority: int | None


@auto_apply(NOTE_UPDATE_MAPPING)
class UpdateNoteDto(BaseUpdateDto):
    title: str | None
    priority: int | None


@auto_response(NOTE_RESPONSE_MAPPING)
class NoteResponseDto(BaseResponseDto):
    title: str
    priority: int | None


class NoteListResponseDto(BaseListResponseDto):
    item_class = NoteResponseDto
