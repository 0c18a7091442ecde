"""Cascading field updates over a reply subtree.

A moderation action on one comment (blocking a thread, for instance) is
propagated level by level: the direct replies are updated in one batch,
and only once that batch is verified does the update descend into each
reply's own subtree. Sibling subtrees are processed concurrently.

Failures are recovered locally. A store error on a level ends that branch
with ``CascadeStatus.FAILED``; a mismatch between matched and updated
records stops descending below that level but keeps what was applied
(``CascadeStatus.PARTIAL``). Nothing is raised to the caller.
"""

import asyncio
from typing import Any

import structlog

from .models import CascadeOutcome, CascadeStatus, RecordId
from .store import RecordStore, StoreQuery


logger = structlog.get_logger(__name__)

DEFAULT_MAX_DEPTH = 64


class CascadingFieldUpdater:
    """Propagate ``field_name = value`` to every descendant of a comment."""

    def __init__(self, store: RecordStore, max_depth: int = DEFAULT_MAX_DEPTH):
        self.store = store
        self.max_depth = max_depth

    async def cascade(self, root_id: RecordId, field_name: str, value: Any) -> CascadeOutcome:
        """Update all descendants of ``root_id`` and report how it went."""
        outcome = await self._cascade_level(root_id, field_name, value, depth=1, visited={root_id})
        log = logger.warning if outcome.status is CascadeStatus.FAILED else logger.info
        log(
            "cascade_update_finished",
            root_id=root_id,
            field=field_name,
            status=outcome.status.value,
            matched=outcome.matched,
            updated=outcome.updated,
        )
        return outcome

    async def cascade_field_update(self, root_id: RecordId, field_name: str, value: Any) -> bool:
        """Boolean form of ``cascade``.

        ``True`` covers "no replies", "fully applied" and "stopped after a
        count mismatch" alike; use ``cascade`` to tell them apart.
        """
        outcome = await self.cascade(root_id, field_name, value)
        return outcome.succeeded

    async def _cascade_level(
        self,
        parent_id: RecordId,
        field_name: str,
        value: Any,
        depth: int,
        visited: set[RecordId],
    ) -> CascadeOutcome:
        if depth > self.max_depth:
            logger.warning("cascade_depth_limit_reached", parent_id=parent_id, max_depth=self.max_depth)
            return CascadeOutcome(CascadeStatus.PARTIAL)

        try:
            children = await self.store.find_many(StoreQuery(where={"threadOf": parent_id}))
            child_ids = [child["id"] for child in children if child["id"] not in visited]
            if len(child_ids) != len(children):
                logger.warning("cascade_cycle_detected", parent_id=parent_id)
            if not child_ids:
                return CascadeOutcome(CascadeStatus.NOTHING_TO_DO, visited=1)

            updated = await self.store.update_many(
                StoreQuery(where={"id": child_ids}),
                {field_name: value},
            )
        except Exception as e:
            logger.warning(
                "cascade_update_failed",
                parent_id=parent_id,
                field=field_name,
                depth=depth,
                error=str(e),
            )
            return CascadeOutcome(CascadeStatus.FAILED, visited=1)

        outcome = CascadeOutcome(
            CascadeStatus.COMPLETED,
            matched=len(child_ids),
            updated=len(updated),
            visited=1,
        )
        if len(updated) != len(child_ids):
            logger.warning(
                "cascade_count_mismatch",
                parent_id=parent_id,
                matched=len(child_ids),
                updated=len(updated),
            )
            outcome.status = CascadeStatus.PARTIAL
            return outcome

        updated_ids = [record["id"] for record in updated]
        visited.update(updated_ids)
        branches = await asyncio.gather(
            *(
                self._cascade_level(child_id, field_name, value, depth + 1, visited)
                for child_id in updated_ids
            )
        )
        for branch in branches:
            outcome.merge(branch)
        return outcome
