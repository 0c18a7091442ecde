"""Value types of the comment engine.

Comments themselves travel as plain store records (``dict[str, Any]``);
the types here are the derived, request-scoped values computed from them:
- RelationRef: decoded polymorphic relation
- ThreadSummary: immediate-children summary of one comment
- CascadeOutcome: detailed result of a cascading field update
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from .constants import RELATION_SEPARATOR


RecordId = int | str
Record = dict[str, Any]


@dataclass(frozen=True)
class RelationRef:
    """Decoded ``collectionId:recordId`` relation."""

    collection_id: str
    record_id: RecordId

    @property
    def token(self) -> str:
        return f"{self.collection_id}{RELATION_SEPARATOR}{self.record_id}"

    def __iter__(self):
        # Allows ``uid, record_id = ref``
        yield self.collection_id
        yield self.record_id


@dataclass(frozen=True)
class ThreadSummary:
    """Immediate children summary of a comment. Never persisted."""

    comment_id: RecordId
    immediate_child_count: int = 0
    first_child_id: RecordId | None = None

    @property
    def has_children(self) -> bool:
        return self.immediate_child_count > 0


class CascadeStatus(str, Enum):
    """How a cascading field update ended for a branch."""

    NOTHING_TO_DO = "nothing_to_do"
    COMPLETED = "completed"
    PARTIAL = "partial"
    FAILED = "failed"


@dataclass
class CascadeOutcome:
    """Result of a cascading field update over a subtree.

    ``matched`` and ``updated`` are summed over every level that was
    reached. ``succeeded`` is the legacy boolean signal, which reports
    ``True`` for nothing-to-do and partial outcomes alike.
    """

    status: CascadeStatus
    matched: int = 0
    updated: int = 0
    visited: int = 0

    @property
    def succeeded(self) -> bool:
        return self.status is not CascadeStatus.FAILED

    def merge(self, other: "CascadeOutcome") -> None:
        """Fold a child branch outcome into this one."""
        self.matched += other.matched
        self.updated += other.updated
        self.visited += other.visited
        if other.status is CascadeStatus.FAILED:
            self.status = CascadeStatus.FAILED
        elif other.status is CascadeStatus.PARTIAL and self.status is not CascadeStatus.FAILED:
            self.status = CascadeStatus.PARTIAL
