"""Storage for the machine-wide project index."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from ..config import Settings
from ..errors import IoFailure
from ..models import GlobalIndex, IndexEntry
from .jsonfile import parse_model, read_json, write_json
from .locking import file_lock

logger = logging.getLogger(__name__)


class IndexStore:
    """Reads and writes ~/.kuk/index.json with the same lock discipline as boards."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or Settings()

    @property
    def path(self) -> Path:
        return self.settings.index_path

    def load_index(self) -> GlobalIndex:
        """Load the index; a missing file is an empty index."""
        try:
            data = read_json(self.path)
        except FileNotFoundError:
            return GlobalIndex()
        return parse_model(GlobalIndex, self.path, data)

    def save_index(self, index: GlobalIndex) -> None:
        self._ensure_parent()
        with self._lock():
            self._write(index)

    @contextmanager
    def edit_index(self) -> Iterator[GlobalIndex]:
        """Lock, load, yield, and save the index if the block succeeds."""
        self._ensure_parent()
        with self._lock():
            index = self.load_index()
            yield index
            self._write(index)

    @contextmanager
    def registration(self, root: Path) -> Iterator[IndexEntry]:
        """Add (or refresh) an entry for ``root``, holding the index lock for the block.

        The entry is saved only if the block succeeds, so a caller can create
        the project inside it and get both or neither.
        """
        with self.edit_index() as index:
            entry = index.add(str(root), root.name or "unknown")
            yield entry
        logger.info("Registered project %s at %s", entry.name, entry.path)

    def register(self, root: Path) -> IndexEntry:
        """Add (or refresh) a project entry for ``root``."""
        with self.registration(Path(root).resolve()) as entry:
            pass
        return entry

    def forget(self, root: Path | str) -> bool:
        """Drop the entry for ``root``; symlinks and ``..`` are resolved first."""
        with self.edit_index() as index:
            removed = index.remove(str(Path(root).resolve()))
        if removed:
            logger.info("Removed project from index: %s", root)
        return removed

    def _ensure_parent(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise IoFailure(self.path.parent, e.strerror or str(e)) from e

    def _write(self, index: GlobalIndex) -> None:
        write_json(self.path, index.to_dict())

    def _lock(self):
        return file_lock(
            self.path,
            timeout=self.settings.lock_timeout,
            poll_interval=self.settings.lock_poll_interval,
        )
