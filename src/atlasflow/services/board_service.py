"""Host service tying the board store to a repository."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from ..models import Board, CardPatch, ColumnPatch, ColumnTheme, DragPayload
from ..repositories import RepositoryProtocol, SnapshotError
from ..utils import toggle_tag
from .board_store import BoardStore

logger = logging.getLogger(__name__)


class BoardService:
    """
    Owns a BoardStore and persists its snapshot after each change.

    Commands are forwarded to the store unchanged. When a command returns a
    different snapshot than before, that snapshot is saved through the
    repository. A failed save is logged and remembered in ``persist_error``;
    the in-memory board keeps the change and the save is not retried.

    If the stored board could not be read, the default board is used in
    memory only: nothing is saved until a successful ``reload``, so the
    unreadable document is left for the user to repair.
    """

    def __init__(
        self,
        repository: RepositoryProtocol,
        store: BoardStore | None = None,
    ) -> None:
        self.repository = repository
        self._store = store
        self._load_error: str | None = None
        self._persist_error: str | None = None

    @property
    def has_load_error(self) -> bool:
        """Check if the stored board could not be read."""
        return self._load_error is not None

    @property
    def load_error(self) -> str | None:
        """Get the load error message if any."""
        return self._load_error

    @property
    def persist_error(self) -> str | None:
        """Get the message of the most recent failed save, if any."""
        return self._persist_error

    @property
    def store(self) -> BoardStore:
        """The store, loading it from the repository on first access."""
        if self._store is None:
            self.load()
        assert self._store is not None
        return self._store

    @property
    def board(self) -> Board:
        """The current board snapshot."""
        return self.store.snapshot

    def load(self) -> Board:
        """Load the stored board, falling back to the starter board."""
        self._load_error = None
        try:
            board = self.repository.load()
        except SnapshotError as e:
            self._load_error = str(e)
            logger.warning(self._load_error)
            board = None

        if board is None:
            logger.info("Starting from default board")
            board = Board.default()

        if self._store is None:
            self._store = BoardStore(board)
            return self._store.snapshot
        return self._store.load(board)

    def reload(self) -> Board:
        """Discard in-memory state and read the board from storage again."""
        self._persist_error = None
        return self.load()

    def _after_command(self, before: Board, after: Board) -> Board:
        """Persist ``after`` if the command changed anything."""
        if after is before:
            return after
        # The stored document could not be read; never replace it with the fallback board
        if self.has_load_error:
            self._persist_error = "Board file unreadable; not overwriting it"
            logger.warning(self._persist_error)
            return after
        try:
            self.repository.save(after)
            self._persist_error = None
        except OSError as e:
            self._persist_error = f"Failed to save board: {e}"
            logger.warning(self._persist_error)
        return after

    # --- Board-level commands ---

    def set_board_title(self, title: str) -> Board:
        before = self.board
        return self._after_command(before, self.store.set_board_title(title))

    def add_column(self, title: str, theme: ColumnTheme | str) -> Board:
        before = self.board
        return self._after_command(before, self.store.add_column(title, theme))

    def update_column(self, column_id: str, patch: ColumnPatch) -> Board:
        before = self.board
        return self._after_command(before, self.store.update_column(column_id, patch))

    def delete_column(self, column_id: str) -> Board:
        before = self.board
        return self._after_command(before, self.store.delete_column(column_id))

    # --- Card commands ---

    def add_card(
        self,
        column_id: str,
        title: str,
        description: str | None = None,
        tags: Iterable[str] = (),
    ) -> Board:
        before = self.board
        return self._after_command(
            before, self.store.add_card(column_id, title, description, tags)
        )

    def update_card(self, column_id: str, card_id: str, patch: CardPatch) -> Board:
        before = self.board
        return self._after_command(before, self.store.update_card(column_id, card_id, patch))

    def delete_card(self, column_id: str, card_id: str) -> Board:
        before = self.board
        return self._after_command(before, self.store.delete_card(column_id, card_id))

    def move_card(
        self,
        from_column_id: str,
        to_column_id: str,
        card_id: str,
        position: int | None = None,
    ) -> Board:
        before = self.board
        return self._after_command(
            before, self.store.move_card(from_column_id, to_column_id, card_id, position)
        )

    def drop_card(
        self,
        raw_payload: str | bytes | None,
        to_column_id: str,
        position: int | None = None,
    ) -> Board:
        """
        Apply a drag-and-drop onto a column.

        ``raw_payload`` is the serialized DragPayload from the drag source;
        ``position`` is the insertion index the presentation computed from
        the pointer. Malformed payloads are ignored.
        """
        payload = DragPayload.parse(raw_payload)
        if payload is None:
            return self.board
        return self.move_card(payload.from_column_id, to_column_id, payload.card_id, position)

    # --- Tags ---

    def add_tag(self, tag: str) -> Board:
        before = self.board
        return self._after_command(before, self.store.add_tag(tag))

    def remove_tag(self, tag: str) -> Board:
        before = self.board
        return self._after_command(before, self.store.remove_tag(tag))

    def create_card_tag(self, column_id: str, card_id: str, tag: str) -> Board:
        before = self.board
        return self._after_command(before, self.store.create_card_tag(column_id, card_id, tag))

    def toggle_card_tag(self, column_id: str, card_id: str, tag: str) -> Board:
        """Flip ``tag`` on a card by sending its recomputed tag set as a patch."""
        column = self.board.get_column(column_id)
        card = column.get_card(card_id) if column is not None else None
        if card is None:
            logger.debug("toggle_card_tag: card not found: %s in %s", card_id, column_id)
            return self.board
        return self.update_card(column_id, card_id, CardPatch(tags=toggle_tag(card.tags, tag)))
