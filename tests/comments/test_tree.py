"""Tests for thread annotation and reply tree reconstruction."""

import pytest

from comment_engine.comments.models import ThreadSummary
from comment_engine.comments.threads import annotate_threads
from comment_engine.comments.tree import build_nested_structure


@pytest.fixture
def chain() -> list[dict]:
    """1 <- 2 <- 3."""
    return [
        {"id": 1, "threadOf": None, "related": "api::article.article:1"},
        {"id": 2, "threadOf": 1, "related": "api::article.article:1"},
        {"id": 3, "threadOf": 2, "related": "api::article.article:1"},
    ]


class TestBuildNestedStructure:
    """Tests for build_nested_structure."""

    def test_depth_is_preserved(self, chain):
        tree = build_nested_structure(chain)

        assert [node["id"] for node in tree] == [1]
        assert [node["id"] for node in tree[0]["children"]] == [2]
        assert [node["id"] for node in tree[0]["children"][0]["children"]] == [3]
        assert tree[0]["children"][0]["children"][0]["children"] == []

    def test_drop_blocked_threads_prunes_subtree(self, chain):
        chain[1]["blockedThread"] = True

        tree = build_nested_structure(chain, drop_blocked_threads=True)

        assert [node["id"] for node in tree] == [1]
        assert tree[0]["children"] == []

    def test_blocked_flag_inherited_when_kept(self, chain):
        chain[1]["blockedThread"] = True

        tree = build_nested_structure(chain)

        child = tree[0]["children"][0]
        grandchild = child["children"][0]
        assert tree[0]["blockedThread"] is False
        assert child["blockedThread"] is True
        assert grandchild["blockedThread"] is True

    def test_nodes_drop_parent_and_related(self, chain):
        tree = build_nested_structure(chain)

        assert "threadOf" not in tree[0]
        assert "related" not in tree[0]
        assert "threadOf" in chain[0]

    def test_starting_from_id(self, chain):
        tree = build_nested_structure(chain, 2)

        assert [node["id"] for node in tree] == [3]

    def test_string_starting_id_matches_numeric_parent(self, chain):
        tree = build_nested_structure(chain, "1")

        assert [node["id"] for node in tree] == [2]

    def test_populated_parent_mapping(self):
        entities = [
            {"id": 1, "threadOf": None},
            {"id": 2, "threadOf": {"id": 1, "content": "parent"}},
        ]

        tree = build_nested_structure(entities)

        assert [node["id"] for node in tree[0]["children"]] == [2]

    def test_siblings_keep_flat_order(self):
        entities = [
            {"id": 1, "threadOf": None},
            {"id": 5, "threadOf": 1},
            {"id": 3, "threadOf": 1},
            {"id": 4, "threadOf": None},
            {"id": 2, "threadOf": 1},
        ]

        tree = build_nested_structure(entities)

        assert [node["id"] for node in tree] == [1, 4]
        assert [node["id"] for node in tree[0]["children"]] == [5, 3, 2]

    def test_deep_reply_chain(self):
        depth = 1500
        entities = [{"id": 1, "threadOf": None}] + [
            {"id": i, "threadOf": i - 1} for i in range(2, depth + 1)
        ]

        tree = build_nested_structure(entities)

        node, levels = tree[0], 1
        while node["children"]:
            assert len(node["children"]) == 1
            node = node["children"][0]
            levels += 1
        assert levels == depth
        assert node["id"] == depth

    def test_deep_chain_inherits_blocked_flag(self):
        entities = [{"id": 1, "threadOf": None, "blockedThread": True}] + [
            {"id": i, "threadOf": i - 1} for i in range(2, 1201)
        ]

        node = build_nested_structure(entities)[0]
        while node["children"]:
            node = node["children"][0]

        assert node["id"] == 1200
        assert node["blockedThread"] is True

    def test_looping_parent_references_terminate(self):
        entities = [
            {"id": 1, "threadOf": 2},
            {"id": 2, "threadOf": 1},
        ]

        tree = build_nested_structure(entities, 1)

        assert [node["id"] for node in tree] == [2]
        assert [node["id"] for node in tree[0]["children"]] == [1]
        assert tree[0]["children"][0]["children"] == []

    def test_parent_mapping_without_id_is_ignored(self):
        entities = [{"id": 1, "threadOf": None}, {"id": 2, "threadOf": {"content": "x"}}]

        tree = build_nested_structure(entities)

        assert [node["id"] for node in tree] == [1]
        assert tree[0]["children"] == []

    @pytest.mark.parametrize("entities", [None, []])
    def test_empty(self, entities):
        assert build_nested_structure(entities) == []


class TestAnnotateThreads:
    """Tests for annotate_threads."""

    @pytest.mark.asyncio
    async def test_immediate_children_only(self, comment_store, chain):
        comment_store.records = [dict(c) for c in chain] + [{"id": 4, "threadOf": 1}]

        summaries = await annotate_threads(comment_store, comment_store.records)

        assert summaries[1] == ThreadSummary(1, immediate_child_count=2, first_child_id=2)
        assert summaries[2] == ThreadSummary(2, immediate_child_count=1, first_child_id=3)
        assert summaries[3].has_children is False
        assert summaries[3].first_child_id is None

    @pytest.mark.asyncio
    async def test_one_query_per_comment(self, comment_store, chain):
        comment_store.records = [dict(c) for c in chain]

        await annotate_threads(comment_store, comment_store.records)

        assert [name for name, _ in comment_store.calls] == ["find_with_count"] * 3
        assert sorted(query.where["threadOf"] for _, query in comment_store.calls) == [1, 2, 3]
