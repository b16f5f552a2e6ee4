"""In-memory repository, for tests and throwaway sessions."""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from ..models import Board
from .protocol import SnapshotError


class MemoryRepository:
    """Keeps the last saved snapshot document in memory."""

    def __init__(self, document: dict[str, Any] | None = None) -> None:
        self.document = document
        self.save_count = 0

    def load(self) -> Board | None:
        """Rebuild the board from the stored document."""
        if self.document is None:
            return None
        try:
            return Board.from_snapshot(self.document)
        except ValidationError as e:
            raise SnapshotError(f"Invalid board snapshot: {e}") from e

    def save(self, board: Board) -> None:
        """Store the snapshot document."""
        self.document = board.to_snapshot()
        self.save_count += 1
