"""Content moderation (bad words filter).

The profanity check is gated by the ``badWords`` plugin setting:
- ``False``/``None``: disabled
- ``True``: default word list
- mapping: custom ``BadWordsOptions``
"""

from collections.abc import Callable
from functools import lru_cache
from typing import Any, Protocol

import structlog
from better_profanity import Profanity
from pydantic import BaseModel, ConfigDict, Field

from .exceptions import PolicyViolationError


logger = structlog.get_logger(__name__)


class ContentFilter(Protocol):
    """Pluggable profanity capability."""

    def is_profane(self, text: str) -> bool: ...

    def clean(self, text: str) -> str: ...


class BadWordsOptions(BaseModel):
    """Custom word-list configuration of the ``badWords`` setting."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    words: list[str] = Field(default_factory=list, alias="list")
    empty_list: bool = Field(default=False, alias="emptyList")
    exclude: list[str] = Field(default_factory=list)
    placeholder: str = Field(default="*", alias="placeHolder", min_length=1, max_length=1)


class ProfanityFilter:
    """``ContentFilter`` backed by better-profanity."""

    def __init__(self, options: BadWordsOptions | None = None):
        self.options = options or BadWordsOptions()
        self._disabled = self.options.empty_list and not self.options.words
        # None loads the library's default word list
        custom_words = self.options.words if self.options.empty_list and self.options.words else None
        self._profanity = Profanity(words=custom_words)
        if self.options.exclude:
            self._profanity.load_censor_words(
                custom_words=custom_words,
                whitelist_words=self.options.exclude,
            )
        if self.options.words and not self.options.empty_list:
            self._profanity.add_censor_words(self.options.words)

    def is_profane(self, text: str) -> bool:
        if self._disabled:
            return False
        return self._profanity.contains_profanity(text)

    def clean(self, text: str) -> str:
        if self._disabled:
            return text
        return self._profanity.censor(text, censor_char=self.options.placeholder)


ContentFilterFactory = Callable[[Any], ContentFilter | None]


@lru_cache
def default_content_filter() -> ProfanityFilter:
    """Shared filter over the default word list (building one is costly)."""
    return ProfanityFilter()


def build_content_filter(config: Any) -> ContentFilter | None:
    """Build the filter described by a ``badWords`` setting value."""
    if not config:
        return None
    if isinstance(config, dict):
        return ProfanityFilter(BadWordsOptions.model_validate(config))
    return default_content_filter()


def check_content(content: str | None, content_filter: ContentFilter | None) -> str | None:
    """Reject profane content.

    Returns:
        ``content`` unchanged when it passes or no filter is active.

    Raises:
        PolicyViolationError: Carrying the original and the cleaned text.
    """
    if content_filter is None or not content:
        return content
    if content_filter.is_profane(content):
        filtered = content_filter.clean(content)
        logger.info("bad_words_rejected", length=len(content))
        raise PolicyViolationError(original=content, filtered=filtered)
    return content
