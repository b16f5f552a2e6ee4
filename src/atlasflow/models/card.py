"""Card domain model."""

from datetime import datetime

from pydantic import Field, field_validator

from ..utils import dedupe_tags, now_utc
from .base import SnapshotModel


class Card(SnapshotModel):
    """A single task on the board, owned by exactly one column."""

    id: str = Field(..., min_length=1)
    title: str
    description: str | None = None
    tags: tuple[str, ...] = ()
    created_at: datetime = Field(default_factory=now_utc)

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        """Tags on a card form a set; keep first-seen order."""
        return dedupe_tags(v)

    def has_tag(self, tag: str) -> bool:
        """Check whether the card carries ``tag``."""
        return tag in self.tags
