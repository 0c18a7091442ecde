"""Tests for relation tokens and collection allow-listing."""

import pytest

from comment_engine.comments.config import ConfigResolver
from comment_engine.comments.exceptions import ForbiddenError, InvalidRelationError
from comment_engine.comments.models import RelationRef
from comment_engine.comments.relations import (
    decode,
    encode,
    parse_record_id,
    parse_relation,
    validate_collection,
)


class TestCodec:
    """Tests for encode/decode."""

    def test_round_trip_keeps_numeric_id(self):
        """Integer ids come back as int, not str."""
        ref = decode(encode("article", 42))

        assert ref == RelationRef("article", 42)
        assert isinstance(ref.record_id, int)

    def test_collection_with_colons(self):
        """Record id is taken after the last separator."""
        collection_id, record_id = decode("api::article.article:7")

        assert collection_id == "api::article.article"
        assert record_id == 7

    def test_non_numeric_id_stays_text(self):
        ref = decode("api::page.page:home-page")

        assert ref.record_id == "home-page"
        assert ref.token == "api::page.page:home-page"

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("12", 12),
            ("-3", -3),
            ("12abc", "12abc"),
            ("5f1e2d", "5f1e2d"),
        ],
    )
    def test_parse_record_id(self, raw, expected):
        assert parse_record_id(raw) == expected

    @pytest.mark.parametrize("token", ["article", ":1", "article:", None, 42])
    def test_malformed_token(self, token):
        with pytest.raises(InvalidRelationError) as exc_info:
            decode(token)

        assert exc_info.value.status_code == 400


class TestValidation:
    """Tests for the enabled collections allow-list."""

    def test_allowed_collection(self):
        assert validate_collection("api::page.page", ["api::page.page"]) == "api::page.page"

    def test_forbidden_collection_lists_allowed(self):
        with pytest.raises(ForbiddenError) as exc_info:
            validate_collection("api::secret.secret", ["api::article.article", "api::page.page"])

        error = exc_info.value
        assert error.status_code == 403
        assert "api::secret.secret" in error.message
        assert "api::article.article, api::page.page" in error.message

    @pytest.mark.asyncio
    async def test_parse_relation_uses_config(self, config_resolver: ConfigResolver):
        ref = await parse_relation("api::article.article:3", config_resolver)

        assert ref == RelationRef("api::article.article", 3)

    @pytest.mark.asyncio
    async def test_parse_relation_rejects_disabled(self, config_resolver: ConfigResolver):
        with pytest.raises(ForbiddenError):
            await parse_relation("api::user.user:3", config_resolver)
