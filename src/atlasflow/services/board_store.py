"""Board store: the single authority for board state."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from datetime import datetime

from ..models import Board, Card, CardPatch, Column, ColumnPatch, ColumnTheme
from ..utils import create_id, dedupe_tags, now_utc

logger = logging.getLogger(__name__)


def _clamp(value: int, lower: int, upper: int) -> int:
    return max(lower, min(value, upper))


def _replace_column(columns: Iterable[Column], updated: Column) -> tuple[Column, ...]:
    return tuple(updated if column.id == updated.id else column for column in columns)


def _with_known_tags(board: Board) -> Board:
    """Add tags used on cards but missing from the vocabulary."""
    unknown = board.unknown_tags()
    if not unknown:
        return board
    logger.debug("Adding card tags to vocabulary: %s", ", ".join(unknown))
    return board.model_copy(update={"available_tags": board.available_tags + unknown})


class BoardStore:
    """
    Owns the board snapshot and applies mutation commands to it.

    Every command runs to completion synchronously and returns the resulting
    snapshot. A command that changes nothing (unknown id, empty patch, tag
    already present) returns the current snapshot object unchanged, so
    callers can detect a no-op with an identity check. Otherwise a new Board
    is built; previously returned snapshots are never modified.

    The store does no I/O. Persisting the returned snapshot is up to the
    host (see BoardService).
    """

    def __init__(
        self,
        board: Board | None = None,
        id_factory: Callable[[], str] = create_id,
        clock: Callable[[], datetime] = now_utc,
    ) -> None:
        self._id_factory = id_factory
        self._clock = clock
        self._board = _with_known_tags(board if board is not None else Board())

    @property
    def snapshot(self) -> Board:
        """The current board state."""
        return self._board

    def load(self, board: Board) -> Board:
        """Replace the whole state, e.g. with a snapshot read from storage."""
        self._board = _with_known_tags(board)
        logger.info(
            "Board loaded: %d columns, %d cards",
            len(self._board.columns),
            len(self._board.card_ids()),
        )
        return self._board

    def _commit(self, board: Board) -> Board:
        self._board = board
        return board

    # --- Board-level commands ---

    def set_board_title(self, title: str) -> Board:
        """Replace the board title."""
        logger.info("Board title set: %s", title)
        return self._commit(self._board.model_copy(update={"title": title}))

    def add_column(self, title: str, theme: ColumnTheme | str) -> Board:
        """Append a new, empty column. The new column is always last."""
        column = Column(id=self._id_factory(), title=title, theme=theme)
        logger.info("Column added: %s (%s)", column.id, title)
        return self._commit(
            self._board.model_copy(update={"columns": (*self._board.columns, column)})
        )

    def update_column(self, column_id: str, patch: ColumnPatch) -> Board:
        """Merge the fields set on ``patch`` into a column."""
        column = self._board.get_column(column_id)
        if column is None:
            logger.debug("update_column: column not found: %s", column_id)
            return self._board
        if patch.is_empty():
            return self._board

        updated = column.model_copy(update=patch.changes())
        logger.info("Column updated: %s (%s)", column_id, ", ".join(sorted(patch.model_fields_set)))
        return self._commit(
            self._board.model_copy(
                update={"columns": _replace_column(self._board.columns, updated)}
            )
        )

    def delete_column(self, column_id: str) -> Board:
        """Remove a column together with all of its cards."""
        column = self._board.get_column(column_id)
        if column is None:
            logger.debug("delete_column: column not found: %s", column_id)
            return self._board

        logger.info("Column deleted: %s (%d cards)", column_id, len(column.cards))
        remaining = tuple(c for c in self._board.columns if c.id != column_id)
        return self._commit(self._board.model_copy(update={"columns": remaining}))

    # --- Card commands ---

    def add_card(
        self,
        column_id: str,
        title: str,
        description: str | None = None,
        tags: Iterable[str] = (),
    ) -> Board:
        """Append a new card to the end of a column."""
        column = self._board.get_column(column_id)
        if column is None:
            logger.debug("add_card: column not found: %s", column_id)
            return self._board

        card = Card(
            id=self._id_factory(),
            title=title,
            description=description,
            tags=dedupe_tags(tags),
            created_at=self._clock(),
        )
        updated = column.model_copy(update={"cards": (*column.cards, card)})
        logger.info("Card added: %s to %s", card.id, column_id)
        return self._commit(
            _with_known_tags(
                self._board.model_copy(
                    update={"columns": _replace_column(self._board.columns, updated)}
                )
            )
        )

    def update_card(self, column_id: str, card_id: str, patch: CardPatch) -> Board:
        """Merge the fields set on ``patch`` into a card of the given column."""
        column = self._board.get_column(column_id)
        card = column.get_card(card_id) if column is not None else None
        if column is None or card is None:
            logger.debug("update_card: card not found: %s in %s", card_id, column_id)
            return self._board
        if patch.is_empty():
            return self._board

        updated_card = card.model_copy(update=patch.changes())
        updated = column.model_copy(
            update={"cards": tuple(updated_card if c.id == card_id else c for c in column.cards)}
        )
        logger.info("Card updated: %s (%s)", card_id, ", ".join(sorted(patch.model_fields_set)))
        return self._commit(
            _with_known_tags(
                self._board.model_copy(
                    update={"columns": _replace_column(self._board.columns, updated)}
                )
            )
        )

    def delete_card(self, column_id: str, card_id: str) -> Board:
        """Remove a card, keeping the order of the remaining cards."""
        column = self._board.get_column(column_id)
        if column is None or column.index_of(card_id) < 0:
            logger.debug("delete_card: card not found: %s in %s", card_id, column_id)
            return self._board

        updated = column.model_copy(
            update={"cards": tuple(c for c in column.cards if c.id != card_id)}
        )
        logger.info("Card deleted: %s from %s", card_id, column_id)
        return self._commit(
            self._board.model_copy(
                update={"columns": _replace_column(self._board.columns, updated)}
            )
        )

    def move_card(
        self,
        from_column_id: str,
        to_column_id: str,
        card_id: str,
        position: int | None = None,
    ) -> Board:
        """
        Relocate a card within a column or to another column.

        Args:
            from_column_id: Column currently holding the card
            to_column_id: Destination column (may equal from_column_id)
            card_id: Card to move
            position: Zero-based insertion index in the destination, clamped
                to the valid range. None appends to the end.

        For a reorder within one column, ``position`` is measured against the
        list as it was before the card was lifted out: when it lies after the
        card's current index, the target is shifted down by one to account
        for the vacated slot.
        """
        if from_column_id == to_column_id:
            return self._reorder_card(from_column_id, card_id, position)

        source = self._board.get_column(from_column_id)
        target = self._board.get_column(to_column_id)
        card = source.get_card(card_id) if source is not None else None
        if source is None or target is None or card is None:
            logger.debug(
                "move_card: not found: %s (%s -> %s)", card_id, from_column_id, to_column_id
            )
            return self._board

        # Take from source, insert into destination (append when no position)
        remaining = tuple(c for c in source.cards if c.id != card_id)
        dest_cards = list(target.cards)
        index = len(dest_cards) if position is None else _clamp(position, 0, len(dest_cards))
        dest_cards.insert(index, card)

        # Both columns swap in a single new snapshot
        updated_source = source.model_copy(update={"cards": remaining})
        updated_target = target.model_copy(update={"cards": tuple(dest_cards)})
        columns = _replace_column(
            _replace_column(self._board.columns, updated_source), updated_target
        )
        logger.info("Card moved: %s (%s -> %s @ %d)", card_id, from_column_id, to_column_id, index)
        return self._commit(self._board.model_copy(update={"columns": columns}))

    def _reorder_card(self, column_id: str, card_id: str, position: int | None) -> Board:
        """Move a card to a new index inside its own column."""
        column = self._board.get_column(column_id)
        current = column.index_of(card_id) if column is not None else -1
        if column is None or current < 0:
            logger.debug("move_card: card not found: %s in %s", card_id, column_id)
            return self._board

        # Lift the card out; indices after it shift down by one
        cards = list(column.cards)
        card = cards.pop(current)

        max_index = len(cards)
        # None appends; otherwise clamp against the list without the card
        if position is None:
            index = max_index
        else:
            index = _clamp(position, 0, max_index)
            # Position was measured before removal
            if position > current:
                index = max(index - 1, 0)

        # Same slot: keep the existing snapshot
        if index == current:
            return self._board

        cards.insert(index, card)
        updated = column.model_copy(update={"cards": tuple(cards)})
        logger.info("Card reordered: %s in %s (pos %d -> %d)", card_id, column_id, current, index)
        return self._commit(
            self._board.model_copy(
                update={"columns": _replace_column(self._board.columns, updated)}
            )
        )

    # --- Tag vocabulary ---

    def add_tag(self, tag: str) -> Board:
        """Add a tag to the vocabulary. Adding an existing tag does nothing."""
        if tag in self._board.available_tags:
            return self._board

        logger.info("Tag added: %s", tag)
        return self._commit(
            self._board.model_copy(
                update={"available_tags": (*self._board.available_tags, tag)}
            )
        )

    def remove_tag(self, tag: str) -> Board:
        """Remove a tag from the vocabulary and from every card that carries it."""
        if tag not in self._board.available_tags and tag not in self._board.tags_in_use():
            logger.debug("remove_tag: tag not found: %s", tag)
            return self._board

        # Strip the tag from every card that carries it
        columns = tuple(
            column.model_copy(
                update={
                    "cards": tuple(
                        card.model_copy(update={"tags": tuple(t for t in card.tags if t != tag)})
                        if card.has_tag(tag)
                        else card
                        for card in column.cards
                    )
                }
            )
            for column in self._board.columns
        )
        available = tuple(t for t in self._board.available_tags if t != tag)
        logger.info("Tag removed: %s", tag)
        return self._commit(
            self._board.model_copy(update={"columns": columns, "available_tags": available})
        )

    def create_card_tag(self, column_id: str, card_id: str, tag: str) -> Board:
        """
        Add ``tag`` to the vocabulary and attach it to a card in one step.

        The card's resulting tag set is de-duplicated, so attaching a tag the
        card already has leaves it unchanged.
        """
        column = self._board.get_column(column_id)
        card = column.get_card(card_id) if column is not None else None
        if column is None or card is None:
            logger.debug("create_card_tag: card not found: %s in %s", card_id, column_id)
            return self._board

        tags = dedupe_tags((*card.tags, tag))
        available = dedupe_tags((*self._board.available_tags, tag))
        if tags == card.tags and available == self._board.available_tags:
            return self._board

        updated_card = card.model_copy(update={"tags": tags})
        updated = column.model_copy(
            update={"cards": tuple(updated_card if c.id == card_id else c for c in column.cards)}
        )
        logger.info("Tag created on card: %s -> %s", tag, card_id)
        return self._commit(
            self._board.model_copy(
                update={
                    "columns": _replace_column(self._board.columns, updated),
                    "available_tags": available,
                }
            )
        )
