"""
Backing stores.

``BaseStore`` is the persistence interface the CRUD controller depends on.
Stores signal "not found" by returning ``None`` from ``find_one``/``update``
and ``False`` from ``remove``; turning that into an error is the
controller's job.

``InMemoryStore`` keeps records in a list with a monotonically increasing
integer id. It is the sole owner of that state: id allocation and list
mutation happen under a single ``asyncio.Lock``.
"""

from __future__ import annotations

import asyncio
import builtins
import logging
from abc import ABC, abstractmethod
from datetime import UTC, datetime
from typing import Any, Generic, TypeVar

from mapcrud.runtime.entity import build_from, plain_fields, to_plain
from mapcrud.runtime.field_registry import is_present
from mapcrud.runtime.shapes import BaseEntity
from mapcrud.runtime.state_machine import validate_status_update
from mapcrud.specs.state_machine import StateMachineSpec

logger = logging.getLogger(__name__)

EntityT = TypeVar("EntityT", bound=BaseEntity)

# Fields owned by the store; never copied from caller input
STORE_MANAGED_FIELDS = frozenset({"id", "created_at", "updated_at"})


# =============================================================================
# Store Interface
# =============================================================================


class BaseStore(ABC, Generic[EntityT]):
    """Abstract persistence collaborator for one resource."""

    @abstractmethod
    async def create(self, data: Any) -> EntityT:
        """Persist a new record built from ``data`` and return it."""
        ...

    @abstractmethod
    async def find_all(self) -> builtins.list[EntityT]:
        ...

    @abstractmethod
    async def find_one(self, id: int) -> EntityT | None:
        ...

    @abstractmethod
    async def update(self, id: int, data: Any) -> EntityT | None:
        """Merge the fields set on ``data`` into the record, or return None."""
        ...

    @abstractmethod
    async def remove(self, id: int) -> bool:
        """Delete the record; False when no record has this id."""
        ...


# =============================================================================
# In-Memory Store
# =============================================================================


class InMemoryStore(BaseStore[EntityT]):
    """
    List-backed store.

    Subclasses enrich records through the ``prepare_*`` hooks, which run
    before any mutation and may raise to reject the operation.

    Args:
        entity_class: Shape every stored record is built as
        entity_name: Resource name used in log messages
        state_machine: Optional status transitions enforced on update
    """

    def __init__(
        self,
        entity_class: type[EntityT],
        entity_name: str | None = None,
        state_machine: StateMachineSpec | None = None,
    ):
        self.entity_class = entity_class
        self.entity_name = entity_name or entity_class.__name__
        self.state_machine = state_machine

        self._items: builtins.list[EntityT] = []
        self._next_id = 1
        self._lock = asyncio.Lock()

    # -------------------------------------------------------------------------
    # Hooks
    # -------------------------------------------------------------------------

    def prepare_create(self, values: dict[str, Any]) -> dict[str, Any]:
        """Check and enrich the values of a record about to be created."""
        return values

    def prepare_update(self, current: EntityT, changes: dict[str, Any]) -> dict[str, Any]:
        """Check and enrich the changes about to be merged into ``current``."""
        return changes

    def prepare_remove(self, current: EntityT) -> None:
        """Check that ``current`` may be removed."""

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    async def create(self, data: Any) -> EntityT:
        values = {
            k: v for k, v in plain_fields(data).items() if k not in STORE_MANAGED_FIELDS
        }
        values = self.prepare_create(values)

        async with self._lock:
            now = datetime.now(UTC)
            record = {"id": self._next_id, **values, "created_at": now, "updated_at": now}
            entity = build_from(self.entity_class, record)
            self._next_id += 1
            self._items.append(entity)

        logger.debug(f"Created {self.entity_name} {entity.id}")
        return entity

    async def find_all(self) -> builtins.list[EntityT]:
        return list(self._items)

    async def find_one(self, id: int) -> EntityT | None:
        return next((item for item in self._items if item.id == id), None)

    async def update(self, id: int, data: Any) -> EntityT | None:
        current = await self.find_one(id)
        if current is None:
            return None

        # None means "not sent", as in input validation; it never clears a field
        changes = {
            k: v
            for k, v in plain_fields(data).items()
            if k not in STORE_MANAGED_FIELDS and is_present(v, required=False)
        }
        current_data = to_plain(current)

        result = validate_status_update(self.state_machine, current_data, changes)
        if result is not None and not result.is_valid:
            raise result.error  # type: ignore[misc]

        changes = self.prepare_update(current, changes)

        async with self._lock:
            index = self._index_of(id)
            if index is None:
                return None
            merged = {**current_data, **changes, "updated_at": datetime.now(UTC)}
            updated = build_from(self.entity_class, merged)
            self._items[index] = updated

        logger.debug(f"Updated {self.entity_name} {id}: {sorted(changes)}")
        return updated

    async def remove(self, id: int) -> bool:
        current = await self.find_one(id)
        if current is None:
            return False

        self.prepare_remove(current)

        async with self._lock:
            index = self._index_of(id)
            if index is None:
                return False
            del self._items[index]

        logger.debug(f"Removed {self.entity_name} {id}")
        return True

    def _index_of(self, id: int) -> int | None:
        for index, item in enumerate(self._items):
            if item.id == id:
                return index
        return None
