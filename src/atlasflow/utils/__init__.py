"""Utility functions."""

from .datetime import now_utc
from .ids import create_id
from .tags import dedupe_tags, normalize_tag, toggle_tag

__all__ = [
    "create_id",
    "dedupe_tags",
    "normalize_tag",
    "now_utc",
    "toggle_tag",
]
