"""Wiring helpers for the controller layer.

Provides:
- Comment service construction (Redis-backed or static config store)
- Conversion of comment errors to FastAPI HTTP exceptions
"""

from typing import TYPE_CHECKING

from fastapi import HTTPException, status

from comment_engine.config import Settings, get_settings
from comment_engine.core.redis import get_redis

from .config import ConfigResolver, RedisConfigStore, StaticConfigStore
from .exceptions import CommentError
from .service import CommentService


if TYPE_CHECKING:
    from redis.asyncio import Redis

    from .store import RecordStoreRegistry


def create_comment_service(
    registry: "RecordStoreRegistry",
    settings: Settings | None = None,
    redis: "Redis | None" = None,
) -> CommentService:
    """Build a comment service over the application's record stores.

    The remote config tier is Redis when a client is given or initialized,
    otherwise an empty in-process store (local settings always apply).
    """
    settings = settings or get_settings()
    redis = redis or get_redis()
    if redis is not None:
        config_store = RedisConfigStore(redis, namespace=settings.config_store_namespace)
    else:
        config_store = StaticConfigStore()
    return CommentService(registry, ConfigResolver(config_store, settings), settings)


def handle_comment_error(error: CommentError) -> HTTPException:
    """Convert comment errors to HTTP exceptions.

    Args:
        error: Comment error

    Returns:
        HTTPException with the error's status code and structured detail
    """
    status_code = error.status_code or status.HTTP_500_INTERNAL_SERVER_ERROR
    return HTTPException(
        status_code=status_code,
        detail={"message": error.message, "code": error.code, **error.details},
    )
