"""kuk: Kanban boards stored as JSON files next to your code."""

from .config import Settings
from .engine import RepositoryEngine
from .errors import (
    AlreadyInitialized,
    BoardAlreadyExists,
    BoardNotFound,
    CardNotFound,
    CorruptData,
    DuplicateColumn,
    InvalidName,
    InvalidOrdinal,
    IoFailure,
    KukError,
    Locked,
    RepositoryNotFound,
    UnknownColumn,
    WipLimitExceeded,
)
from .models import Board, Card, Column, Direction, GlobalIndex, IndexEntry, LabelAction, RepoConfig

__version__ = "0.1.0"

__all__ = [
    "AlreadyInitialized",
    "Board",
    "BoardAlreadyExists",
    "BoardNotFound",
    "Card",
    "CardNotFound",
    "Column",
    "CorruptData",
    "Direction",
    "DuplicateColumn",
    "GlobalIndex",
    "IndexEntry",
    "InvalidName",
    "InvalidOrdinal",
    "IoFailure",
    "KukError",
    "LabelAction",
    "Locked",
    "RepoConfig",
    "RepositoryEngine",
    "RepositoryNotFound",
    "Settings",
    "UnknownColumn",
    "WipLimitExceeded",
]
