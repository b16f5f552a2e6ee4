"""Repository protocol for board snapshot storage backends."""

from typing import Protocol

from ..models import Board


class SnapshotError(Exception):
    """A stored snapshot could not be read or is not a valid board."""


class RepositoryProtocol(Protocol):
    """Interface for board storage backends.

    A repository only moves whole snapshots in and out of durable storage.
    It knows nothing about commands; the host calls ``save`` after each
    command that changed the board.
    """

    def load(self) -> Board | None:
        """Read the stored board.

        Returns:
            The stored board, or None if nothing has been saved yet.

        Raises:
            SnapshotError: If stored data exists but cannot be parsed.
        """
        ...

    def save(self, board: Board) -> None:
        """Persist a board snapshot, replacing any previous one.

        Args:
            board: The snapshot to store.
        """
        ...
