"""Utility functions."""

from .datetime import ensure_utc, from_iso, now_utc, to_iso
from .ids import ID_LENGTH, is_canonical_id, new_id

__all__ = [
    "ID_LENGTH",
    "ensure_utc",
    "from_iso",
    "is_canonical_id",
    "new_id",
    "now_utc",
    "to_iso",
]
