"""Request context management using contextvars.

Each request handled by the surrounding application can bind a request id
and the acting user. Every log entry emitted by this package picks them up
through the structlog context processor, so the comment engine never has to
thread them through its call signatures.
"""

from contextvars import ContextVar, Token
from typing import Any
from uuid import UUID, uuid4


request_id_var: ContextVar[str] = ContextVar("request_id", default="")
user_id_var: ContextVar[str | None] = ContextVar("user_id", default=None)
related_var: ContextVar[str | None] = ContextVar("related", default=None)


def generate_request_id() -> str:
    """Generate a new unique request ID."""
    return str(uuid4())


def get_request_id() -> str:
    """Get the current request ID."""
    return request_id_var.get()


def set_request_id(request_id: str | None = None) -> str:
    """Set the request ID for the current context.

    Args:
        request_id: Optional request ID. If not provided, generates a new one.

    Returns:
        The request ID that was set.
    """
    rid = request_id or generate_request_id()
    request_id_var.set(rid)
    return rid


def get_user_id() -> str | None:
    """Get the current user ID."""
    return user_id_var.get()


def set_user_id(user_id: str | int | UUID | None) -> None:
    """Set the acting user for the current context."""
    user_id_var.set(str(user_id) if user_id is not None else None)


def set_related(related: str | None) -> None:
    """Set the relation token the current request works on."""
    related_var.set(related)


def get_context() -> dict[str, Any]:
    """Get all non-empty context variables as a dictionary."""
    context: dict[str, Any] = {}

    request_id = get_request_id()
    if request_id:
        context["request_id"] = request_id

    user_id = get_user_id()
    if user_id:
        context["user_id"] = user_id

    related = related_var.get()
    if related:
        context["related"] = related

    return context


def clear_context() -> None:
    """Clear all context variables."""
    request_id_var.set("")
    user_id_var.set(None)
    related_var.set(None)


class RequestContext:
    """Context manager for request scope.

    Usage:
        with RequestContext(user_id=user.id, related="api::article.article:1"):
            await service.find_all_flat(params)  # logs carry user_id, related
    """

    def __init__(
        self,
        request_id: str | None = None,
        user_id: str | int | UUID | None = None,
        related: str | None = None,
    ) -> None:
        self.request_id = request_id
        self.user_id = user_id
        self.related = related
        self._tokens: list[tuple[ContextVar[Any], Token[Any]]] = []

    def __enter__(self) -> "RequestContext":
        """Enter context and set variables."""
        self._tokens.append(
            (request_id_var, request_id_var.set(self.request_id or generate_request_id()))
        )
        if self.user_id is not None:
            self._tokens.append((user_id_var, user_id_var.set(str(self.user_id))))
        if self.related is not None:
            self._tokens.append((related_var, related_var.set(self.related)))
        return self

    def __exit__(self, *_: object) -> None:
        """Exit context and restore previous values."""
        for var, token in reversed(self._tokens):
            var.reset(token)
        self._tokens.clear()
