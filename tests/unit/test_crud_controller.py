"""
Tests for the generic CRUD controller.
"""

import pytest
from support import CreateNoteDto, NoteListResponseDto, NoteResponseDto, UpdateNoteDto

from mapcrud.runtime.controller import CRUDController
from mapcrud.runtime.errors import NotFoundError
from mapcrud.runtime.response_decoration import auto_response
from mapcrud.runtime.shapes import BaseResponseDto
from mapcrud.specs.field import ResponseFieldConfig


@auto_response({"title": ResponseFieldConfig(description="Note title", example="Groceries")})
class NoteCreatedDto(BaseResponseDto):
    title: str


class TestCreate:
    """Tests for create_entity."""

    @pytest.mark.asyncio
    async def test_returns_response_shape(self, note_controller: CRUDController) -> None:
        response = await note_controller.create_entity(CreateNoteDto({"title": "Milk"}))
        assert isinstance(response, NoteResponseDto)
        assert response.id == 1
        assert response.title == "Milk"

    @pytest.mark.asyncio
    async def test_uses_created_response_class(self, note_store) -> None:
        controller = CRUDController(
            "Note",
            note_store,
            response_class=NoteResponseDto,
            list_response_class=NoteListResponseDto,
            create_schema=CreateNoteDto,
            update_schema=UpdateNoteDto,
            created_response_class=NoteCreatedDto,
        )
        response = await controller.create_entity(CreateNoteDto({"title": "Milk"}))
        assert type(response) is NoteCreatedDto
        assert response.title == "Milk"


class TestRead:
    """Tests for find_all_entities and find_one_entity."""

    @pytest.mark.asyncio
    async def test_list_total_matches_items(self, note_controller: CRUDController) -> None:
        for title in ("a", "b", "c"):
            await note_controller.create_entity(CreateNoteDto({"title": title}))

        result = await note_controller.find_all_entities()
        assert isinstance(result, NoteListResponseDto)
        assert result.total == len(result.items) == 3
        assert all(isinstance(item, NoteResponseDto) for item in result.items)

    @pytest.mark.asyncio
    async def test_empty_list(self, note_controller: CRUDController) -> None:
        result = await note_controller.find_all_entities()
        assert result.items == []
        assert result.total == 0

    @pytest.mark.asyncio
    async def test_find_one_missing(self, note_controller: CRUDController) -> None:
        with pytest.raises(NotFoundError) as exc_info:
            await note_controller.find_one_entity(999)
        assert exc_info.value.id == 999
        assert exc_info.value.message == "Note with ID 999 not found"
        assert exc_info.value.status_code == 404


class TestUpdateAndRemove:
    """Tests for update_entity and remove_entity."""

    @pytest.mark.asyncio
    async def test_update(self, note_controller: CRUDController) -> None:
        await note_controller.create_entity(CreateNoteDto({"title": "a"}))
        response = await note_controller.update_entity(1, UpdateNoteDto({"priority": 2}))
        assert response.title == "a"
        assert response.priority == 2

    @pytest.mark.asyncio
    async def test_update_missing(self, note_controller: CRUDController) -> None:
        with pytest.raises(NotFoundError, match="Note with ID 4 not found"):
            await note_controller.update_entity(4, UpdateNoteDto({"title": "x"}))

    @pytest.mark.asyncio
    async def test_remove_acknowledgement(self, note_controller: CRUDController) -> None:
        await note_controller.create_entity(CreateNoteDto({"title": "a"}))
        result = await note_controller.remove_entity(1)
        assert result == {"message": "Note with ID 1 deleted successfully"}
        with pytest.raises(NotFoundError):
            await note_controller.find_one_entity(1)

    @pytest.mark.asyncio
    async def test_remove_missing(self, note_controller: CRUDController) -> None:
        with pytest.raises(NotFoundError):
            await note_controller.remove_entity(1)
