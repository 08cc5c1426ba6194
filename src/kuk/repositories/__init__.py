"""Repository layer for data access."""

from .filesystem import FilesystemRepository
from .index import IndexStore
from .locking import file_lock
from .protocol import RepositoryProtocol

__all__ = [
    "FilesystemRepository",
    "IndexStore",
    "RepositoryProtocol",
    "file_lock",
]
