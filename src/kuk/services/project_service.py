"""Service for the machine-wide project index."""

from __future__ import annotations

import logging
from pathlib import Path

from ..models import IndexEntry
from ..repositories import IndexStore

logger = logging.getLogger(__name__)


class ProjectService:
    """Lists and prunes the repositories registered on this machine."""

    def __init__(self, index_store: IndexStore) -> None:
        self.index_store = index_store

    def list_projects(self) -> list[IndexEntry]:
        """Registered projects in registration order."""
        return list(self.index_store.load_index().projects)

    def forget(self, path: Path | str) -> bool:
        """Drop a project from the index. Returns False if it was not there."""
        return self.index_store.forget(path)
