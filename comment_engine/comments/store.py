"""Boundary of the generic record store.

The engine never talks to a database driver directly. The surrounding
application hands it a ``RecordStoreRegistry`` that returns one
``RecordStore`` per collection uid (the comment collection and every
relation target collection).

Criteria semantics expected from implementations:
- ``where`` values are equality filters; a list, tuple or set value means
  "field in set"
- ``order_by`` is a nested mapping of field path to ``"asc"``/``"desc"``
- ``offset``/``limit`` slice the ordered result
"""

from dataclasses import dataclass, field, replace
from typing import Any, Protocol

from .models import Record


@dataclass
class StoreQuery:
    """Criteria for a single store call."""

    where: dict[str, Any] = field(default_factory=dict)
    populate: dict[str, Any] = field(default_factory=dict)
    order_by: dict[str, Any] | None = None
    offset: int | None = None
    limit: int | None = None

    def only_where(self) -> "StoreQuery":
        """Same filters, without ordering, slicing or population (for counts)."""
        return replace(self, populate={}, order_by=None, offset=None, limit=None)


class RecordStore(Protocol):
    """Find/count/update operations over one collection."""

    async def find_one(self, query: StoreQuery) -> Record | None: ...

    async def find_many(self, query: StoreQuery) -> list[Record]: ...

    async def find_with_count(self, query: StoreQuery) -> tuple[list[Record], int]: ...

    async def count(self, query: StoreQuery) -> int: ...

    async def update_many(self, query: StoreQuery, data: dict[str, Any]) -> list[Record]: ...


class RecordStoreRegistry(Protocol):
    """Hands out the record store of a collection uid."""

    def query(self, uid: str) -> RecordStore: ...


class ConfigStore(Protocol):
    """Remote plugin configuration store."""

    async def get(self, key: str) -> dict[str, Any] | None: ...
