"""Batched resolution of polymorphic related entities."""

import asyncio
from collections.abc import Iterable, Sequence

import structlog

from .exceptions import InvalidRelationError
from .models import Record, RecordId
from .relations import decode, encode
from .store import RecordStoreRegistry, StoreQuery


logger = structlog.get_logger(__name__)


def group_relations(comments: Iterable[Record]) -> dict[str, list[RecordId]]:
    """Group the related record ids of ``comments`` by collection.

    Ids are deduplicated per collection, keeping first-seen order.
    Comments without a relation token are skipped, and so are comments
    whose stored token does not decode.
    """
    groups: dict[str, list[RecordId]] = {}
    for comment in comments:
        token = comment.get("related")
        if not isinstance(token, str):
            continue
        try:
            uid, record_id = decode(token)
        except InvalidRelationError:
            logger.warning(
                "related_token_invalid",
                comment_id=comment.get("id"),
                related=token,
            )
            continue
        ids = groups.setdefault(uid, [])
        if record_id not in ids:
            ids.append(record_id)
    return groups


def merge_related_entity_to(comment: Record, related_entities: Sequence[Record]) -> Record:
    """Replace the comment's relation token with the matching entity.

    An unresolved token is kept as is rather than cleared, even when
    entities were supplied.
    """
    token = comment.get("related")
    match = next(
        (
            entity
            for entity in related_entities
            if entity and encode(entity.get("uid", ""), entity.get("id")) == token
        ),
        None,
    )
    if match is None:
        return dict(comment)
    return {**comment, "related": match}


class RelatedEntityResolver:
    """Fetch the related entities of a comment batch, one query per collection."""

    def __init__(self, registry: RecordStoreRegistry):
        self.registry = registry

    async def _fetch_collection(self, uid: str, ids: list[RecordId]) -> list[Record]:
        records = await self.registry.query(uid).find_many(StoreQuery(where={"id": ids}))
        return [{**record, "uid": uid} for record in records]

    async def find_related_entities_for(self, comments: Iterable[Record]) -> list[Record]:
        """Resolve every relation token of ``comments``.

        Returns:
            Fetched records, each tagged with its collection as ``uid``.
        """
        groups = group_relations(comments)
        if not groups:
            return []

        results = await asyncio.gather(
            *(self._fetch_collection(uid, ids) for uid, ids in groups.items())
        )
        entities = [entity for batch in results for entity in batch]
        logger.debug(
            "related_entities_resolved",
            collections=len(groups),
            entities=len(entities),
        )
        return entities

    def merge_related_entity_to(self, comment: Record, related_entities: Sequence[Record]) -> Record:
        return merge_related_entity_to(comment, related_entities)
