"""Repository engine: the entry point adapters build once per repository."""

from __future__ import annotations

import logging
from pathlib import Path

from .config import Settings
from .errors import RepositoryNotFound
from .models import DEFAULT_BOARD, RepoConfig
from .repositories import FilesystemRepository, IndexStore
from .services import BoardService, CardService, ProjectService

logger = logging.getLogger(__name__)


class RepositoryEngine:
    """
    Wires storage and services for one repository directory.

    The engine holds no board state. CLI, TUI and server adapters can each
    build their own engine on the same directory; the file locks in the
    repository layer keep their writes from interleaving.
    """

    def __init__(self, root: Path, settings: Settings | None = None) -> None:
        self.settings = settings or Settings()
        self.index_store = IndexStore(self.settings)
        self.repository = FilesystemRepository(root, self.settings, self.index_store)
        self.boards = BoardService(self.repository, self.index_store)
        self.cards = CardService(self.repository)
        self.projects = ProjectService(self.index_store)

    @classmethod
    def discover(cls, start: Path, settings: Settings | None = None) -> RepositoryEngine:
        """Build an engine for the nearest ancestor of ``start`` holding a repository.

        Raises:
            RepositoryNotFound: No ancestor is a kuk repository
        """
        start = Path(start).resolve()
        for candidate in (start, *start.parents):
            if FilesystemRepository.is_repository(candidate):
                logger.debug("Found kuk repository at %s", candidate)
                return cls(candidate, settings)
        raise RepositoryNotFound(start)

    @property
    def root(self) -> Path:
        return self.repository.root

    def init(self, board_name: str = DEFAULT_BOARD) -> RepoConfig:
        """Initialize the repository and register it in the global index."""
        return self.repository.init_repository(board_name)
