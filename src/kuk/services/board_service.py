"""Service for board management."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ..errors import DuplicateColumn, InvalidName, KukError
from ..models import Board, Column, RepoConfig
from ..repositories import IndexStore, RepositoryProtocol

logger = logging.getLogger(__name__)


@dataclass
class BoardHealth:
    """Doctor result for one board file."""

    name: str
    active: int = 0
    archived: int = 0
    error: str | None = None


@dataclass
class DoctorReport:
    """Health of a repository and the machine-wide index."""

    initialized: bool
    config_version: str | None = None
    config_error: str | None = None
    boards: list[BoardHealth] = field(default_factory=list)
    boards_error: str | None = None
    index_projects: int | None = None
    index_error: str | None = None

    @property
    def ok(self) -> bool:
        return (
            self.initialized
            and self.config_error is None
            and self.boards_error is None
            and self.index_error is None
            and all(b.error is None for b in self.boards)
        )


class BoardService:
    """Service for board-level operations: listing, creating, switching, columns."""

    def __init__(
        self,
        repository: RepositoryProtocol,
        index_store: IndexStore | None = None,
    ) -> None:
        self.repository = repository
        self._index_store = index_store

    def active_board_name(self) -> str:
        """Name of the board adapters use when none is given."""
        return self.repository.load_config().default_board

    def load_board(self, name: str | None = None) -> Board:
        """Load a board (the active one by default)."""
        return self.repository.load_board(name or self.active_board_name())

    def list_boards(self) -> list[str]:
        return self.repository.list_boards()

    def create_board(self, name: str, columns: list[str | Column] | None = None) -> Board:
        """Create a new board with the given columns (todo/doing/done by default)."""
        if not name or not name.strip():
            raise InvalidName("board name", name)
        if columns is None:
            board = Board.default(name)
        else:
            if not columns:
                raise InvalidName("columns", name, "a board needs at least one column")
            cols: list[Column] = []
            for col in columns:
                if not isinstance(col, Column):
                    if not col or not col.strip():
                        raise InvalidName("column name", col)
                    col = Column(name=col)
                if any(c.name == col.name for c in cols):
                    raise DuplicateColumn(name, col.name)
                cols.append(col)
            board = Board(name=name, columns=cols)
        return self.repository.create_board(board)

    def switch_board(self, name: str) -> RepoConfig:
        """Make ``name`` the active board; BoardNotFound if it does not exist."""
        self.repository.load_board(name)
        with self.repository.edit_config() as config:
            previous = config.default_board
            config.default_board = name
        logger.info("Switched active board: %s -> %s", previous, name)
        return config

    def create_column(
        self,
        name: str,
        wip_limit: int | None = None,
        board: str | None = None,
    ) -> Column:
        """Append a column to a board."""
        board_name = board or self.active_board_name()
        with self.repository.edit_board(board_name) as loaded:
            column = loaded.create_column(name, wip_limit)
        logger.info("Column created: %s on board %s (wip_limit=%s)", name, board_name, wip_limit)
        return column

    def doctor(self) -> DoctorReport:
        """
        Check that the repository, every board, and the global index load cleanly.

        Problems are collected into the report rather than raised, so one
        broken board does not hide the state of the others.
        """
        try:
            self.repository.ensure_initialized()
        except KukError:
            return DoctorReport(initialized=False)

        report = DoctorReport(initialized=True)

        try:
            report.config_version = self.repository.load_config().version
        except KukError as e:
            report.config_error = str(e)

        try:
            names = self.repository.list_boards()
        except KukError as e:
            report.boards_error = str(e)
            names = []

        for name in names:
            health = BoardHealth(name=name)
            try:
                board = self.repository.load_board(name)
            except KukError as e:
                health.error = str(e)
            else:
                health.archived = sum(1 for c in board.cards if c.archived)
                health.active = len(board.cards) - health.archived
            report.boards.append(health)

        if self._index_store is not None:
            try:
                report.index_projects = len(self._index_store.load_index().projects)
            except KukError as e:
                report.index_error = str(e)

        logger.debug("Doctor report: ok=%s boards=%d", report.ok, len(report.boards))
        return report
