"""Identifier generation for columns and cards."""

import uuid


def create_id() -> str:
    """
    Generate a new opaque identifier.

    Random 128-bit tokens; collisions within a board are not a practical
    concern and ids are never recycled after deletion.
    """
    return uuid.uuid4().hex
