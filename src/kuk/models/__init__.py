"""Data models."""

from .board import DEFAULT_BOARD, DEFAULT_COLUMNS, Board, Column
from .card import Card
from .config import SCHEMA_VERSION, RepoConfig
from .enums import Direction, LabelAction
from .index import GlobalIndex, IndexEntry

__all__ = [
    "DEFAULT_BOARD",
    "DEFAULT_COLUMNS",
    "SCHEMA_VERSION",
    "Board",
    "Card",
    "Column",
    "Direction",
    "GlobalIndex",
    "IndexEntry",
    "LabelAction",
    "RepoConfig",
]
