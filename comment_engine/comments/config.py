"""Two-tier plugin configuration.

Precedence, decided per call and never merged:
1. The remote plugin document (``ConfigStore.get("config")``), unless the
   caller asks for the local tier or no document is stored.
2. The local static tree of the application settings, under
   ``plugin.comments``.

A value that resolves to ``None`` falls back to the caller's default.
"""

import json
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

import structlog

from comment_engine.utils.paths import get_path, join_path, path_segments

from .constants import LOCAL_CONFIG_NAMESPACE, REMOTE_CONFIG_KEY


if TYPE_CHECKING:
    from redis.asyncio import Redis

    from comment_engine.config.settings import Settings

    from .store import ConfigStore


logger = structlog.get_logger(__name__)

ConfigPath = str | Sequence[str] | None


class RedisConfigStore:
    """Plugin configuration documents stored as JSON strings in Redis."""

    def __init__(self, redis: "Redis", namespace: str = "plugin:comments"):
        self.redis = redis
        self.namespace = namespace

    def _key(self, key: str) -> str:
        return f"{self.namespace}:{key}"

    async def get(self, key: str) -> dict[str, Any] | None:
        raw = await self.redis.get(self._key(key))
        if raw is None:
            return None
        return json.loads(raw)

    async def set(self, key: str, document: dict[str, Any]) -> None:
        await self.redis.set(self._key(key), json.dumps(document))

    async def delete(self, key: str) -> None:
        await self.redis.delete(self._key(key))


class StaticConfigStore:
    """In-process config store, used when no Redis is configured."""

    def __init__(self, documents: dict[str, dict[str, Any]] | None = None):
        self.documents = documents or {}

    async def get(self, key: str) -> dict[str, Any] | None:
        return self.documents.get(key)

    async def set(self, key: str, document: dict[str, Any]) -> None:
        self.documents[key] = document

    async def delete(self, key: str) -> None:
        self.documents.pop(key, None)


class ConfigResolver:
    """Resolve plugin configuration values remote-first, local second."""

    def __init__(self, config_store: "ConfigStore", settings: "Settings"):
        self.config_store = config_store
        self.settings = settings

    async def get_plugin_store(self) -> "ConfigStore":
        return self.config_store

    def get_local_config(self, path: ConfigPath = None, default: Any = None) -> Any:
        """Resolve ``path`` in the local static tree."""
        tree = {"plugin": self.settings.plugin}
        result = get_path(tree, [*path_segments(LOCAL_CONFIG_NAMESPACE), *path_segments(path)])
        return default if result is None else result

    async def get_config(
        self,
        path: ConfigPath = None,
        default: Any = None,
        use_local: bool = False,
    ) -> Any:
        """Resolve ``path`` in the remote document, or locally.

        Args:
            path: Dotted path (``"badWords"``, ``"blockedAuthorProps"``)
                or sequence of path segments. Empty means the whole document.
            default: Returned when the value is absent.
            use_local: Skip the remote document.
        """
        config = None
        if not use_local:
            plugin_store = await self.get_plugin_store()
            config = await plugin_store.get(REMOTE_CONFIG_KEY)

        if config is not None:
            result = get_path(config, path)
            source = "remote"
        else:
            result = self.get_local_config(path)
            source = "local"

        logger.debug("config_resolved", path=join_path(path), source=source)
        return default if result is None else result
