"""Pydantic schemas for comment queries.

Controllers build these from their own request models; the service also
accepts plain mappings with the same (camelCase) keys.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .models import RecordId
from .pagination import PaginationParams


class FindAllParams(BaseModel):
    """Flat comment query."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    query: dict[str, Any] = Field(default_factory=dict)
    populate: dict[str, Any] = Field(default_factory=dict)
    sort: str | list[str] | None = None
    pagination: PaginationParams | None = None


class FindAllInHierarchyParams(BaseModel):
    """Tree comment query. Pagination does not apply to trees."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    query: dict[str, Any] = Field(default_factory=dict)
    populate: dict[str, Any] = Field(default_factory=dict)
    sort: str | list[str] | None = None
    starting_from_id: RecordId | None = Field(default=None, alias="startingFromId")
    drop_blocked_threads: bool = Field(default=False, alias="dropBlockedThreads")
