"""Utility modules for the comment engine."""

from comment_engine.utils.paths import get_path, join_path, path_segments, set_path


__all__ = ["get_path", "join_path", "path_segments", "set_path"]
