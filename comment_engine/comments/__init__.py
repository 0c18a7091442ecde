"""Comment engine module.

Provides hierarchical comment retrieval and moderation with:
- Flat, paginated reads annotated with thread summaries
- Reply tree reconstruction
- Polymorphic related entity resolution
- Cascading moderation flag updates
- Bad words filtering and relation allow-listing
"""

from .cascade import CascadingFieldUpdater
from .config import ConfigResolver, RedisConfigStore, StaticConfigStore
from .exceptions import (
    CommentError,
    ForbiddenError,
    InvalidRelationError,
    NotFoundError,
    PolicyViolationError,
)
from .models import CascadeOutcome, CascadeStatus, RelationRef, ThreadSummary
from .moderation import BadWordsOptions, ContentFilter, ProfanityFilter
from .schemas import FindAllInHierarchyParams, FindAllParams
from .service import CommentService
from .store import ConfigStore, RecordStore, RecordStoreRegistry, StoreQuery


__all__ = [
    "BadWordsOptions",
    "CascadeOutcome",
    "CascadeStatus",
    "CascadingFieldUpdater",
    "CommentError",
    "CommentService",
    "ConfigResolver",
    "ConfigStore",
    "ContentFilter",
    "FindAllInHierarchyParams",
    "FindAllParams",
    "ForbiddenError",
    "InvalidRelationError",
    "NotFoundError",
    "PolicyViolationError",
    "ProfanityFilter",
    "RecordStore",
    "RecordStoreRegistry",
    "RedisConfigStore",
    "RelationRef",
    "StaticConfigStore",
    "StoreQuery",
    "ThreadSummary",
]
