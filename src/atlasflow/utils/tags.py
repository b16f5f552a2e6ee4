"""Helpers for callers that compute tag sets before calling the store."""

from collections.abc import Iterable


def normalize_tag(text: str) -> str:
    """
    Normalize free text into a tag.

    Example: "  Low-Priority " -> "low-priority"
    """
    return text.strip().lower()


def dedupe_tags(tags: Iterable[str]) -> tuple[str, ...]:
    """Drop repeated tags, keeping the first occurrence order."""
    return tuple(dict.fromkeys(tags))


def toggle_tag(tags: Iterable[str], tag: str) -> tuple[str, ...]:
    """Return ``tags`` with ``tag`` removed if present, appended otherwise."""
    current = dedupe_tags(tags)
    if tag in current:
        return tuple(t for t in current if t != tag)
    return (*current, tag)
