"""Shared fixtures: in-memory record stores and a wired comment service."""

from collections.abc import Iterable
from typing import Any

import pytest

from comment_engine.comments.config import ConfigResolver, StaticConfigStore
from comment_engine.comments.service import CommentService
from comment_engine.comments.store import StoreQuery
from comment_engine.config.settings import DEFAULT_PLUGIN_CONFIG, Settings


COMMENT_UID = "plugin::comments.comment"
ARTICLE_UID = "api::article.article"
PAGE_UID = "api::page.page"


def _matches(record: dict[str, Any], where: dict[str, Any]) -> bool:
    for key, expected in where.items():
        actual = record.get(key)
        if isinstance(actual, dict):
            actual = actual.get("id")
        if isinstance(expected, list | tuple | set):
            if actual not in expected:
                return False
        elif actual != expected:
            return False
    return True


def _order_fields(order_by: dict[str, Any], prefix: str = "") -> list[tuple[str, str]]:
    fields = []
    for key, value in order_by.items():
        path = f"{prefix}{key}"
        if isinstance(value, dict):
            fields.extend(_order_fields(value, f"{path}."))
        else:
            fields.append((path, value))
    return fields


def _resolve(record: dict[str, Any], path: str) -> Any:
    value: Any = record
    for part in path.split("."):
        value = value.get(part) if isinstance(value, dict) else None
    return value


class InMemoryRecordStore:
    """Record store over a list of dicts, honouring the store criteria."""

    def __init__(self, records: Iterable[dict[str, Any]] = ()):
        self.records = [dict(record) for record in records]
        self.calls: list[tuple[str, StoreQuery]] = []

    def _select(self, query: StoreQuery) -> list[dict[str, Any]]:
        selected = [record for record in self.records if _matches(record, query.where)]
        for path, direction in reversed(_order_fields(query.order_by or {})):
            selected.sort(key=lambda r, p=path: _resolve(r, p), reverse=direction == "desc")
        if query.offset:
            selected = selected[query.offset :]
        if query.limit is not None:
            selected = selected[: query.limit]
        return [dict(record) for record in selected]

    async def find_one(self, query: StoreQuery) -> dict[str, Any] | None:
        self.calls.append(("find_one", query))
        found = self._select(query)
        return found[0] if found else None

    async def find_many(self, query: StoreQuery) -> list[dict[str, Any]]:
        self.calls.append(("find_many", query))
        return self._select(query)

    async def find_with_count(self, query: StoreQuery) -> tuple[list[dict[str, Any]], int]:
        self.calls.append(("find_with_count", query))
        found = self._select(query)
        return found, len(found)

    async def count(self, query: StoreQuery) -> int:
        self.calls.append(("count", query))
        return len(self._select(query))

    async def update_many(self, query: StoreQuery, data: dict[str, Any]) -> list[dict[str, Any]]:
        self.calls.append(("update_many", query))
        updated = []
        for record in self.records:
            if _matches(record, query.where):
                record.update(data)
                updated.append(dict(record))
        return updated

    def get(self, record_id: Any) -> dict[str, Any] | None:
        return next((record for record in self.records if record["id"] == record_id), None)


class InMemoryRegistry:
    """Registry of in-memory stores keyed by collection uid."""

    def __init__(self, stores: dict[str, InMemoryRecordStore] | None = None):
        self.stores = stores or {}

    def query(self, uid: str) -> InMemoryRecordStore:
        return self.stores.setdefault(uid, InMemoryRecordStore())


@pytest.fixture
def plugin_config() -> dict[str, Any]:
    """Local static plugin configuration."""
    return {
        **DEFAULT_PLUGIN_CONFIG,
        "enabledCollections": [ARTICLE_UID, PAGE_UID],
    }


@pytest.fixture
def settings(plugin_config: dict[str, Any]) -> Settings:
    """Test settings (no .env, no Redis)."""
    return Settings(
        _env_file=None,
        environment="testing",
        redis_url=None,
        plugin={"comments": plugin_config},
    )


@pytest.fixture
def config_store() -> StaticConfigStore:
    """Empty remote config store."""
    return StaticConfigStore()


@pytest.fixture
def config_resolver(config_store: StaticConfigStore, settings: Settings) -> ConfigResolver:
    return ConfigResolver(config_store, settings)


@pytest.fixture
def comment_store() -> InMemoryRecordStore:
    """Comment collection, empty by default."""
    return InMemoryRecordStore()


@pytest.fixture
def registry(comment_store: InMemoryRecordStore) -> InMemoryRegistry:
    return InMemoryRegistry({COMMENT_UID: comment_store})


@pytest.fixture
def comment_service(
    registry: InMemoryRegistry,
    config_resolver: ConfigResolver,
    settings: Settings,
) -> CommentService:
    """Comment service over in-memory stores."""
    return CommentService(registry, config_resolver, settings)
