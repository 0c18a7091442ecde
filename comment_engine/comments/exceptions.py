"""Comment engine errors.

Every error carries an HTTP-style status code, a machine readable code and
an optional structured payload. They are raised to the controller layer and
never retried inside the engine.
"""

from typing import Any


class CommentError(Exception):
    """Base comment error."""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: str = "comment_error",
        details: dict[str, Any] | None = None,
        status_code: int | None = None,
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class NotFoundError(CommentError):
    """Comment not found."""

    status_code = 404

    def __init__(self, message: str = "Comment does not exist. Check your payload please."):
        super().__init__(message, "comment_not_found")


class ForbiddenError(CommentError):
    """Relation targets a collection outside the allow-list."""

    status_code = 403

    def __init__(self, collection_id: str, allowed: list[str]):
        self.collection_id = collection_id
        self.allowed = list(allowed)
        super().__init__(
            f"Action not allowed for collection '{collection_id}'. "
            f"Use one of: {', '.join(self.allowed)}",
            "forbidden",
        )


class PolicyViolationError(CommentError):
    """Content rejected by the moderation filter."""

    status_code = 400

    def __init__(self, original: str, filtered: str):
        super().__init__(
            "Bad language used! Please polite your comment...",
            "bad_language",
            details={"content": {"original": original, "filtered": filtered}},
        )


class InvalidRelationError(CommentError):
    """Relation token is not of the form ``collectionId:recordId``."""

    status_code = 400

    def __init__(self, token: object):
        super().__init__(
            f"Invalid relation '{token}'. Expected '<collection>:<id>'.",
            "invalid_relation",
        )
