"""Column domain model."""

from enum import Enum

from pydantic import Field

from .base import SnapshotModel
from .card import Card


class ColumnTheme(str, Enum):
    """Visual category of a column. Opaque to the store."""

    SKY = "sky"
    AMBER = "amber"
    VIOLET = "violet"
    EMERALD = "emerald"
    ROSE = "rose"
    SLATE = "slate"


class Column(SnapshotModel):
    """A named, themed, ordered list of cards."""

    id: str = Field(..., min_length=1)
    title: str
    theme: ColumnTheme
    cards: tuple[Card, ...] = ()

    @property
    def card_ids(self) -> list[str]:
        """Card ids in display order."""
        return [card.id for card in self.cards]

    def index_of(self, card_id: str) -> int:
        """Get position of a card in this column, or -1 if not found."""
        for index, card in enumerate(self.cards):
            if card.id == card_id:
                return index
        return -1

    def get_card(self, card_id: str) -> Card | None:
        """Get a card by id."""
        index = self.index_of(card_id)
        return self.cards[index] if index >= 0 else None
