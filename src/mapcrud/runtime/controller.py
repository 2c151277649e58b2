"""
Generic CRUD controller.

A stateless facade parameterized once per resource with its store and its
five shape bindings (entity, create input, update input, single response,
list response). Each operation delegates to the store and wraps the result in
the declared response shape. Resources subclass it to add business rules or
extra operations; the defaults are only the standard wiring.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any, Generic, TypeVar

from mapcrud.runtime.entity import build_from
from mapcrud.runtime.errors import NotFoundError
from mapcrud.runtime.shapes import (
    BaseCreateDto,
    BaseEntity,
    BaseListResponseDto,
    BaseResponseDto,
    BaseUpdateDto,
)
from mapcrud.runtime.store import BaseStore

logger = logging.getLogger(__name__)

# =============================================================================
# Type Variables
# =============================================================================

EntityT = TypeVar("EntityT", bound=BaseEntity)
CreateT = TypeVar("CreateT", bound=BaseCreateDto)
UpdateT = TypeVar("UpdateT", bound=BaseUpdateDto)
ResponseT = TypeVar("ResponseT", bound=BaseResponseDto)
ListResponseT = TypeVar("ListResponseT", bound=BaseListResponseDto)


class CRUDController(Generic[EntityT, CreateT, UpdateT, ResponseT, ListResponseT]):
    """
    Default create/read/update/delete wiring for one resource.

    Args:
        entity_name: Resource name used in not-found and delete messages
        store: Backing store for the resource
        response_class: Single-item response shape
        list_response_class: List response shape
        create_schema: Input shape for create
        update_schema: Input shape for update
        created_response_class: Response shape for create (defaults to
            ``response_class``)
    """

    def __init__(
        self,
        entity_name: str,
        store: BaseStore[EntityT],
        *,
        response_class: type[ResponseT],
        list_response_class: type[ListResponseT],
        create_schema: type[CreateT],
        update_schema: type[UpdateT],
        created_response_class: type[BaseResponseDto] | None = None,
    ):
        self.entity_name = entity_name
        self.store = store
        self.response_class = response_class
        self.list_response_class = list_response_class
        self.create_schema = create_schema
        self.update_schema = update_schema
        self.created_response_class = created_response_class or response_class

    # -------------------------------------------------------------------------
    # Response building
    # -------------------------------------------------------------------------

    def build_response(self, entity: EntityT) -> ResponseT:
        return build_from(self.response_class, entity)

    def build_list_response(self, entities: Iterable[EntityT]) -> ListResponseT:
        """Wrap entities in the list response; ``total`` is the item count."""
        items = [self.build_response(entity) for entity in entities]
        return self.list_response_class(items, len(items))

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    async def create_entity(self, data: CreateT) -> Any:
        entity = await self.store.create(data)
        logger.debug(f"{self.entity_name} {entity.id} created")
        return build_from(self.created_response_class, entity)

    async def find_all_entities(self) -> ListResponseT:
        entities = await self.store.find_all()
        return self.build_list_response(entities)

    async def find_one_entity(self, id: int) -> ResponseT:
        """
        Fetch a single record.

        Raises:
            NotFoundError: If the store has no record with this id
        """
        entity = await self.store.find_one(id)
        if entity is None:
            raise NotFoundError(self.entity_name, id)
        return self.build_response(entity)

    async def update_entity(self, id: int, data: UpdateT) -> ResponseT:
        """
        Merge the fields set on ``data`` into a record.

        Raises:
            NotFoundError: If the store has no record with this id
        """
        entity = await self.store.update(id, data)
        if entity is None:
            raise NotFoundError(self.entity_name, id)
        logger.debug(f"{self.entity_name} {id} updated")
        return self.build_response(entity)

    async def remove_entity(self, id: int) -> dict[str, str]:
        """
        Delete a record and return an acknowledgement.

        Raises:
            NotFoundError: If the store has no record with this id
        """
        removed = await self.store.remove(id)
        if not removed:
            raise NotFoundError(self.entity_name, id)
        logger.debug(f"{self.entity_name} {id} removed")
        return {"message": f"{self.entity_name} with ID {id} deleted successfully"}
