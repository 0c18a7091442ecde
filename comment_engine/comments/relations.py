"""Polymorphic relation tokens.

A comment points at its target record with ``"<collectionId>:<recordId>"``.
Collection ids may themselves contain colons (``api::article.article``), so
the record id is whatever follows the last separator.
"""

import re
from collections.abc import Iterable
from typing import TYPE_CHECKING

from .constants import RELATION_SEPARATOR, ConfigParam
from .exceptions import ForbiddenError, InvalidRelationError
from .models import RecordId, RelationRef


if TYPE_CHECKING:
    from .config import ConfigResolver


_INTEGER_PATTERN = re.compile(r"^[+-]?\d+$")


def parse_record_id(raw: str) -> RecordId:
    """Coerce an integer literal to ``int``; keep anything else as text."""
    return int(raw) if _INTEGER_PATTERN.match(raw) else raw


def encode(collection_id: str, record_id: RecordId) -> str:
    """Build the relation token of a record."""
    return f"{collection_id}{RELATION_SEPARATOR}{record_id}"


def decode(token: str) -> RelationRef:
    """Split a relation token into collection id and record id.

    Raises:
        InvalidRelationError: If the token has no separator or an empty side.
    """
    if not isinstance(token, str):
        raise InvalidRelationError(token)
    collection_id, separator, raw_id = token.rpartition(RELATION_SEPARATOR)
    if not separator or not collection_id or not raw_id:
        raise InvalidRelationError(token)
    return RelationRef(collection_id, parse_record_id(raw_id))


def validate_collection(collection_id: str, enabled_collections: Iterable[str]) -> str:
    """Check a collection id against the allow-list.

    Raises:
        ForbiddenError: Listing the allowed collections.
    """
    allowed = list(enabled_collections or [])
    if collection_id not in allowed:
        raise ForbiddenError(collection_id, allowed)
    return collection_id


async def parse_relation(token: str, resolver: "ConfigResolver") -> RelationRef:
    """Decode a relation token and validate its collection."""
    ref = decode(token)
    enabled = await resolver.get_config(ConfigParam.ENABLED_COLLECTIONS.value, [])
    validate_collection(ref.collection_id, enabled)
    return ref
