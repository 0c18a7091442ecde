"""Tests for request context and log processors."""

from comment_engine.core.context import (
    RequestContext,
    clear_context,
    get_context,
    get_request_id,
    set_related,
    set_request_id,
    set_user_id,
)
from comment_engine.core.logging import add_context_processor, filter_sensitive_data


class TestRequestContext:
    """Tests for contextvars handling."""

    def setup_method(self):
        clear_context()

    def test_set_and_get(self):
        set_request_id("req-1")
        set_user_id(42)
        set_related("api::article.article:1")

        assert get_context() == {
            "request_id": "req-1",
            "user_id": "42",
            "related": "api::article.article:1",
        }

    def test_generated_request_id(self):
        rid = set_request_id()

        assert rid
        assert get_request_id() == rid

    def test_context_manager_restores(self):
        set_request_id("outer")

        with RequestContext(request_id="inner", user_id=7):
            assert get_context() == {"request_id": "inner", "user_id": "7"}

        assert get_context() == {"request_id": "outer"}

    def test_empty_context(self):
        assert get_context() == {}


class TestLogProcessors:
    """Tests for the structlog processors."""

    def setup_method(self):
        clear_context()

    def test_context_added_without_overriding(self):
        set_request_id("req-9")

        event = add_context_processor(None, "info", {"event": "x", "request_id": "explicit"})

        assert event["request_id"] == "explicit"

    def test_context_added(self):
        set_user_id(5)

        assert add_context_processor(None, "info", {"event": "x"})["user_id"] == "5"

    def test_sensitive_values_masked(self):
        event = filter_sensitive_data(
            None,
            "info",
            {"event": "x", "authorEmail": "guest@example.com", "nested": {"token": "abc"}, "count": 3},
        )

        assert event["authorEmail"] == "gu*************om"
        assert event["nested"]["token"] == "***"
        assert event["count"] == 3
