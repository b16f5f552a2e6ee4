"""Board state model."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from datetime import datetime
from typing import Any

from pydantic import Field, model_validator

from ..utils import create_id, dedupe_tags, now_utc
from .base import SnapshotModel
from .card import Card
from .column import Column, ColumnTheme

DEFAULT_BOARD_TITLE = "My Todo Board"

DEFAULT_TAGS = ("work", "personal", "health", "urgent", "low-priority", "shopping")


class Board(SnapshotModel):
    """
    Full board state: title, ordered columns and the tag vocabulary.

    A Board is an immutable snapshot. The store produces a new instance for
    every command that changes something, so a snapshot handed out earlier
    never changes underneath its holder.
    """

    title: str = Field(default=DEFAULT_BOARD_TITLE, alias="boardTitle")
    columns: tuple[Column, ...] = ()
    available_tags: tuple[str, ...] = ()

    @model_validator(mode="after")
    def validate_unique_ids(self) -> Board:
        """Column ids and card ids must each be unique across the board."""
        column_ids = [column.id for column in self.columns]
        if len(column_ids) != len(set(column_ids)):
            raise ValueError("Duplicate column id on board")
        card_ids = self.card_ids()
        if len(card_ids) != len(set(card_ids)):
            raise ValueError("Duplicate card id on board")
        if len(self.available_tags) != len(set(self.available_tags)):
            raise ValueError("Duplicate tag in available tags")
        return self

    @classmethod
    def default(
        cls,
        id_factory: Callable[[], str] = create_id,
        now: datetime | None = None,
    ) -> Board:
        """Create the starter board shown on first launch."""
        created = now or now_utc()
        return cls(
            title=DEFAULT_BOARD_TITLE,
            columns=(
                Column(
                    id=id_factory(),
                    title="To Do",
                    theme=ColumnTheme.SKY,
                    cards=(
                        Card(
                            id=id_factory(),
                            title="Buy groceries",
                            description="Milk, bread, eggs, and vegetables for the week.",
                            tags=("personal",),
                            created_at=created,
                        ),
                        Card(
                            id=id_factory(),
                            title="Call dentist",
                            description="Schedule annual checkup appointment.",
                            tags=("health",),
                            created_at=created,
                        ),
                    ),
                ),
                Column(
                    id=id_factory(),
                    title="In Progress",
                    theme=ColumnTheme.VIOLET,
                    cards=(
                        Card(
                            id=id_factory(),
                            title="Finish project report",
                            description="Complete the quarterly project summary for the team.",
                            tags=("work",),
                            created_at=created,
                        ),
                    ),
                ),
                Column(id=id_factory(), title="Done", theme=ColumnTheme.EMERALD),
            ),
            available_tags=DEFAULT_TAGS,
        )

    # --- Snapshot document ---

    @classmethod
    def from_snapshot(cls, data: dict[str, Any]) -> Board:
        """Build a board from a ``{boardTitle, columns, availableTags}`` document."""
        return cls.model_validate(data)

    def to_snapshot(self) -> dict[str, Any]:
        """Convert to a plain document suitable for YAML or JSON."""
        return self.model_dump(mode="json", by_alias=True)

    # --- Queries ---

    @property
    def column_ids(self) -> list[str]:
        """Column ids in display order."""
        return [column.id for column in self.columns]

    def get_column(self, column_id: str) -> Column | None:
        """Get a column by id."""
        for column in self.columns:
            if column.id == column_id:
                return column
        return None

    def iter_cards(self) -> Iterator[tuple[Column, Card]]:
        """Yield every card with its owning column, in board order."""
        for column in self.columns:
            for card in column.cards:
                yield column, card

    def card_ids(self) -> list[str]:
        """All card ids on the board, column by column."""
        return [card.id for _, card in self.iter_cards()]

    def find_card(self, card_id: str) -> tuple[Column, Card] | None:
        """Locate a card anywhere on the board."""
        for column, card in self.iter_cards():
            if card.id == card_id:
                return column, card
        return None

    def tags_in_use(self) -> tuple[str, ...]:
        """Tags referenced by at least one card, in first-seen order."""
        return dedupe_tags(tag for _, card in self.iter_cards() for tag in card.tags)

    def unknown_tags(self) -> tuple[str, ...]:
        """Tags used on cards but missing from the vocabulary."""
        return tuple(tag for tag in self.tags_in_use() if tag not in self.available_tags)
