"""Reply tree reconstruction from a flat comment list."""

from collections import defaultdict
from collections.abc import Mapping, Sequence
from typing import Any

from .models import Record, RecordId


_MISSING = object()


def _parent_key(value: Any) -> Any:
    if isinstance(value, Mapping):
        value = value.get("id", _MISSING)
        return _MISSING if value is None else value
    return value


def build_nested_structure(
    entities: Sequence[Record] | None,
    parent_id: RecordId | None = None,
    field: str = "threadOf",
    drop_blocked_threads: bool = False,
    block_nested_threads: bool = False,
) -> list[Record]:
    """Nest ``entities`` under ``parent_id`` (roots when ``None``).

    Children are grouped by parent in one pass and the tree is assembled
    with an explicit stack, so reply depth is not limited by recursion.

    Args:
        entities: Flat, already annotated comments.
        parent_id: Id whose direct replies form the top level.
        field: Name of the parent reference field.
        drop_blocked_threads: Exclude comments flagged ``blockedThread``
            together with their whole subtree.
        block_nested_threads: Mark every returned node as ``blockedThread``
            (set while descending below a blocked comment).

    Returns:
        Copies of the matching comments, without ``field`` and ``related``,
        each with a ``children`` list. Siblings keep their flat order.
    """
    if not entities:
        return []

    by_parent: dict[Any, list[Record]] = defaultdict(list)
    by_text: dict[str, list[Record]] = defaultdict(list)
    for entity in entities:
        key = _parent_key(entity.get(field))
        if key is _MISSING:
            continue
        by_parent[key].append(entity)
        if key is not None:
            by_text[str(key)].append(entity)

    def children_of(record_id: Any) -> list[Record]:
        # A textual id also matches numeric parent references
        if isinstance(record_id, str):
            return by_text.get(record_id, [])
        return by_parent.get(record_id, [])

    placed: set[int] = set()

    def make_nodes(record_id: Any, blocked: bool) -> list[tuple[Record, Record]]:
        pairs = []
        for entity in children_of(record_id):
            blocked_thread = bool(entity.get("blockedThread"))
            if drop_blocked_threads and blocked_thread:
                continue
            # Guards against parent references that loop back
            if id(entity) in placed:
                continue
            placed.add(id(entity))
            node = {key: value for key, value in entity.items() if key not in (field, "related")}
            node["blockedThread"] = blocked or blocked_thread
            node["children"] = []
            pairs.append((node, entity))
        return pairs

    top = make_nodes(parent_id, block_nested_threads)
    stack = list(top)
    while stack:
        node, entity = stack.pop()
        pairs = make_nodes(entity["id"], node["blockedThread"])
        node["children"].extend(child for child, _ in pairs)
        stack.extend(pairs)
    return [node for node, _ in top]
