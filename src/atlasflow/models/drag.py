"""Drag-and-drop payload exchanged by the presentation layer."""

from __future__ import annotations

import logging
from typing import ClassVar

from pydantic import Field, ValidationError

from .base import SnapshotModel

logger = logging.getLogger(__name__)


class DragPayload(SnapshotModel):
    """
    Identifies the card being dragged and where it came from.

    The presentation layer serializes this as ``{"cardId", "fromColumnId"}``
    under ``MEDIA_TYPE`` when a drag starts and hands the decoded value, with
    an insertion index it computed from pointer geometry, to ``move_card``.
    """

    MEDIA_TYPE: ClassVar[str] = "application/atlasflow-card"

    card_id: str = Field(..., min_length=1)
    from_column_id: str = Field(..., min_length=1)

    @classmethod
    def parse(cls, raw: str | bytes | None) -> DragPayload | None:
        """
        Decode a serialized payload.

        Returns None for empty, malformed or incomplete payloads; a bad drop
        is ignored rather than raised to the caller.
        """
        if not raw:
            return None
        try:
            return cls.model_validate_json(raw)
        except ValidationError as e:
            logger.warning("Failed to parse drag payload: %s", e)
            return None

    def to_json(self) -> str:
        """Serialize for the drag data transfer."""
        return self.model_dump_json(by_alias=True)
