"""Filesystem-based repository for board snapshots."""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from ..models import Board
from .protocol import SnapshotError

logger = logging.getLogger(__name__)


class FilesystemRepository:
    """
    Repository for a board stored as a single YAML document.

    The document holds ``boardTitle``, ``columns`` and ``availableTags``.
    Key order is preserved on write so a load followed by a save produces
    the same file.
    """

    HEADER = "# Auto-generated by atlasflow - edit with care\n"

    def __init__(self, board_file: Path) -> None:
        """
        Initialize repository.

        Args:
            board_file: Path to the board document (e.g., board.yaml)
        """
        self.board_file = board_file

    def ensure_directory(self) -> None:
        """Create the parent directory of the board file if it doesn't exist."""
        self.board_file.parent.mkdir(parents=True, exist_ok=True)

    def load(self) -> Board | None:
        """Read and validate the board document."""
        # Nothing saved yet - caller decides on a starting board
        if not self.board_file.exists():
            logger.debug("No board file at %s", self.board_file)
            return None

        try:
            with self.board_file.open() as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise SnapshotError(f"Invalid YAML in {self.board_file}: {e}") from e
        except OSError as e:
            raise SnapshotError(f"Cannot read {self.board_file}: {e}") from e

        # An empty file is an error, not a blank board
        if data is None:
            raise SnapshotError(f"{self.board_file} is empty")
        if not isinstance(data, dict):
            raise SnapshotError(f"{self.board_file} does not contain a board document")

        try:
            # Schema, theme and duplicate-id checks happen in the model
            board = Board.from_snapshot(data)
        except ValidationError as e:
            raise SnapshotError(f"Invalid board in {self.board_file}: {e}") from e

        logger.debug("Loaded board from %s", self.board_file)
        return board

    def save(self, board: Board) -> None:
        """Write the board document to disk."""
        self.ensure_directory()

        # JSON-mode dump: tuples become lists, enums and datetimes become strings
        data = board.to_snapshot()
        with self.board_file.open("w") as f:
            f.write(self.HEADER)
            # sort_keys=False preserves the document key order
            yaml.safe_dump(
                data, f, default_flow_style=False, sort_keys=False, allow_unicode=True
            )
        logger.debug("Saved board to %s", self.board_file)
