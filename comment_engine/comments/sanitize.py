"""Outgoing comment shaping.

Folds the two author representations into one ``author`` mapping, strips
internal author fields, and hides resolved moderation reports.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from .models import Record


ANONYMOUS_AUTHOR_FIELDS = ("authorId", "authorName", "authorEmail", "authorAvatar")


def build_author_model(entity: Record, blocked_props: Iterable[str] = ()) -> Record:
    """Replace ``authorUser``/``author*`` fields with a single ``author``.

    A registered user wins over anonymous author fields. ``blocked_props``
    are dropped from the resulting author.
    """
    rest = {
        key: value
        for key, value in entity.items()
        if key != "authorUser" and key not in ANONYMOUS_AUTHOR_FIELDS
    }
    author_user = entity.get("authorUser")

    author: dict[str, Any] = {}
    if isinstance(author_user, Mapping):
        avatar = author_user.get("avatar")
        author = {
            "id": author_user.get("id"),
            "name": author_user.get("username"),
            "email": author_user.get("email"),
            "avatar": avatar if isinstance(avatar, (str, Mapping)) else None,
        }
    elif entity.get("authorId") is not None:
        author = {
            "id": entity.get("authorId"),
            "name": entity.get("authorName"),
            "email": entity.get("authorEmail"),
            "avatar": entity.get("authorAvatar"),
        }

    for prop in blocked_props:
        author.pop(prop, None)
    return {**rest, "author": author}


def sanitize_comment_entity(entity: Record, blocked_props: Iterable[str] = ()) -> Record:
    """Shape a comment, and its populated parent, for external use."""
    blocked_props = tuple(blocked_props)
    thread_of = entity.get("threadOf")
    if isinstance(thread_of, Mapping):
        thread_of = build_author_model(dict(thread_of), blocked_props)
    return build_author_model({**entity, "threadOf": thread_of}, blocked_props)


def filter_out_resolved_reports(entity: Record | None) -> Record | None:
    """Keep only unresolved reports in the comment's ``reports``."""
    if not entity:
        return entity
    reports = entity.get("reports") or []
    return {**entity, "reports": [report for report in reports if not report.get("resolved")]}
