"""Immediate-children annotation of a comment batch."""

import asyncio
from collections.abc import Iterable

import structlog

from .models import Record, RecordId, ThreadSummary
from .store import RecordStore, StoreQuery


logger = structlog.get_logger(__name__)


async def summarize_thread(store: RecordStore, comment_id: RecordId) -> ThreadSummary:
    """Count the direct replies of one comment and find the first of them."""
    children, count = await store.find_with_count(StoreQuery(where={"threadOf": comment_id}))
    first_child_id = children[0]["id"] if children else None
    return ThreadSummary(
        comment_id=comment_id,
        immediate_child_count=count,
        first_child_id=first_child_id,
    )


async def annotate_threads(
    store: RecordStore,
    comments: Iterable[Record],
) -> dict[RecordId, ThreadSummary]:
    """Summarize the direct replies of every comment, concurrently.

    Issues one query per comment. Only immediate children are considered.
    """
    ids = [comment["id"] for comment in comments]
    summaries = await asyncio.gather(*(summarize_thread(store, comment_id) for comment_id in ids))
    logger.debug("threads_annotated", comments=len(ids))
    return {summary.comment_id: summary for summary in summaries}
