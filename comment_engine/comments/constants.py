"""Constants shared by the comment engine."""

import re
from enum import Enum


class ConfigParam(str, Enum):
    """Known keys of the plugin configuration document."""

    ENABLED_COLLECTIONS = "enabledCollections"
    BAD_WORDS = "badWords"
    BLOCKED_AUTHOR_PROPS = "blockedAuthorProps"


# Namespace of the local static configuration tree
LOCAL_CONFIG_NAMESPACE = "plugin.comments"

# Key of the whole plugin document in the remote config store
REMOTE_CONFIG_KEY = "config"

# Separator between collection id and record id in relation tokens
RELATION_SEPARATOR = ":"

# "field:asc", "author.name:desc", ...
SORTING_PATTERN = re.compile(r"^.+:(asc|desc)$")

DEFAULT_SORT_DIRECTION = "asc"

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10
DEFAULT_START = 0
DEFAULT_LIMIT = 10

DEFAULT_POPULATE = {"authorUser": True}
