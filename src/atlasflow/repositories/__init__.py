"""Repository layer for board snapshot storage."""

from .filesystem import FilesystemRepository
from .memory import MemoryRepository
from .protocol import RepositoryProtocol, SnapshotError

__all__ = [
    "FilesystemRepository",
    "MemoryRepository",
    "RepositoryProtocol",
    "SnapshotError",
]
