# Core infrastructure
from comment_engine.core.context import (
    RequestContext,
    clear_context,
    get_context,
    get_request_id,
    get_user_id,
    set_related,
    set_request_id,
    set_user_id,
)
from comment_engine.core.logging import configure_structlog, get_logger
from comment_engine.core.redis import get_redis, init_redis, shutdown_redis


__all__ = [
    "RequestContext",
    "clear_context",
    "configure_structlog",
    "get_context",
    "get_logger",
    "get_redis",
    "get_request_id",
    "get_user_id",
    "init_redis",
    "set_related",
    "set_request_id",
    "set_user_id",
    "shutdown_redis",
]
