"""Sort and pagination compiler.

Turns user-facing ``sort``/``pagination`` parameters into store criteria
and response metadata.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from comment_engine.utils.paths import path_segments, set_path

from .constants import (
    DEFAULT_LIMIT,
    DEFAULT_PAGE,
    DEFAULT_PAGE_SIZE,
    DEFAULT_SORT_DIRECTION,
    DEFAULT_START,
    SORTING_PATTERN,
)


SortInput = str | Sequence[str] | None


def compile_sort(sort: SortInput) -> dict[str, Any] | None:
    """Compile sort strings into a nested ``order_by`` mapping.

    ``"createdAt"`` and ``"createdAt:asc"`` are equivalent.
    ``["author.name:desc"]`` gives ``{"author": {"name": "desc"}}``.
    Blank items are ignored.
    """
    if not sort:
        return None
    items = [sort] if isinstance(sort, str) else list(sort)

    order_by: dict[str, Any] = {}
    for item in items:
        item = item.strip() if isinstance(item, str) else ""
        if not item:
            continue
        if not SORTING_PATTERN.match(item):
            item = f"{item}:{DEFAULT_SORT_DIRECTION}"
        *parts, direction = item.split(":")
        segments = path_segments(".".join(parts))
        if segments:
            set_path(order_by, segments, direction)
    return order_by or None


class PaginationParams(BaseModel):
    """Pagination input, either page/pageSize or start/limit."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    page: int | None = Field(default=None, ge=1)
    page_size: int | None = Field(default=None, ge=1, alias="pageSize")
    start: int | None = Field(default=None, ge=0)
    limit: int | None = Field(default=None, ge=0)
    with_count: bool = Field(default=False, alias="withCount")

    @field_validator("with_count", mode="before")
    @classmethod
    def parse_with_count(cls, v: Any) -> bool:
        """Only ``True`` and the literal ``"true"`` request a count."""
        return v is True or v == "true"

    @property
    def by_page(self) -> bool:
        return self.page is not None or self.page_size is not None


@dataclass
class CompiledPagination:
    """Store slice plus the metadata echoed back to the caller."""

    offset: int
    limit: int
    by_page: bool
    with_count: bool = False
    meta: dict[str, Any] = field(default_factory=dict)


def compile_pagination(
    pagination: PaginationParams | Mapping[str, Any] | None,
) -> CompiledPagination | None:
    """Compile pagination parameters into offset/limit and metadata."""
    if pagination is None:
        return None
    if not isinstance(pagination, PaginationParams):
        pagination = PaginationParams.model_validate(dict(pagination))

    if pagination.by_page:
        page = pagination.page or DEFAULT_PAGE
        page_size = pagination.page_size or DEFAULT_PAGE_SIZE
        return CompiledPagination(
            offset=(page - 1) * page_size,
            limit=page_size,
            by_page=True,
            with_count=pagination.with_count,
            meta={"pagination": {"page": page, "pageSize": page_size}},
        )

    start = DEFAULT_START if pagination.start is None else pagination.start
    limit = DEFAULT_LIMIT if pagination.limit is None else pagination.limit
    return CompiledPagination(
        offset=start,
        limit=limit,
        by_page=False,
        with_count=pagination.with_count,
        meta={"pagination": {"start": start, "limit": limit}},
    )


def page_count(total: int, page_size: int) -> int:
    """Number of pages needed for ``total`` records."""
    pages = total // page_size
    return pages if total % page_size == 0 else pages + 1


def with_total(compiled: CompiledPagination, total: int) -> dict[str, Any]:
    """Metadata extended with ``total`` (and ``pageCount`` in page mode)."""
    meta_pagination = dict(compiled.meta["pagination"])
    if compiled.by_page:
        meta_pagination["pageCount"] = page_count(total, meta_pagination["pageSize"])
    meta_pagination["total"] = total
    return {**compiled.meta, "pagination": meta_pagination}
