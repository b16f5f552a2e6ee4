"""Service layer: the board store and its host."""

from .board_service import BoardService
from .board_store import BoardStore

__all__ = [
    "BoardService",
    "BoardStore",
]
