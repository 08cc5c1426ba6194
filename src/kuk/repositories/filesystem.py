"""Filesystem-based repository for board storage."""

from __future__ import annotations

import logging
import os
import re
import shutil
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager, suppress
from pathlib import Path

from ..config import Settings
from ..errors import (
    AlreadyInitialized,
    BoardAlreadyExists,
    BoardNotFound,
    CorruptData,
    InvalidName,
    IoFailure,
    RepositoryNotFound,
)
from ..models import DEFAULT_BOARD, Board, RepoConfig
from .index import IndexStore
from .jsonfile import parse_model, read_json, write_json
from .locking import file_lock

logger = logging.getLogger(__name__)

_SEPARATORS = re.compile(r"[/\\\x00]")


class FilesystemRepository:
    """
    Repository for one kuk project on the local filesystem.

    Layout::

        <root>/.kuk/config.json
        <root>/.kuk/boards/<name>.json

    Plain ``load_*`` calls read without locking (writes are atomic renames, so
    a reader always sees a whole file). Every read-modify-write goes through
    an ``edit_*`` context manager, which holds the file's advisory lock from
    the load until the save.
    """

    KUK_DIR = ".kuk"
    CONFIG_FILE = "config.json"
    BOARDS_DIR = "boards"
    BOARD_SUFFIX = ".json"

    def __init__(
        self,
        root: Path,
        settings: Settings | None = None,
        index_store: IndexStore | None = None,
    ) -> None:
        """
        Initialize repository.

        Args:
            root: Project directory containing (or to contain) .kuk/
            settings: Engine settings (lock timeout, home directory)
            index_store: Machine-wide index; built from settings if omitted
        """
        self.root = Path(root).resolve()
        self.settings = settings or Settings()
        self.index_store = index_store or IndexStore(self.settings)

    # --- Paths ---

    @property
    def kuk_dir(self) -> Path:
        return self.root / self.KUK_DIR

    @property
    def boards_dir(self) -> Path:
        return self.kuk_dir / self.BOARDS_DIR

    @property
    def config_path(self) -> Path:
        return self.kuk_dir / self.CONFIG_FILE

    def board_path(self, name: str) -> Path:
        """Path of a board file; names that would escape boards/ are refused.

        Raises:
            IoFailure: The name contains a path separator or is a dot path
            InvalidName: The name is empty or hidden
        """
        if not name or not name.strip():
            raise InvalidName("board name", name)
        if _SEPARATORS.search(name) or name in (".", ".."):
            raise IoFailure(self.boards_dir / name, "board name escapes the repository")
        if name.startswith("."):
            raise InvalidName("board name", name, "cannot start with '.'")

        path = self.boards_dir / f"{name}{self.BOARD_SUFFIX}"
        if path.resolve().parent != self.boards_dir.resolve():
            raise IoFailure(path, "board name escapes the repository")
        return path

    # --- Repository lifecycle ---

    @classmethod
    def is_repository(cls, path: Path) -> bool:
        """Whether ``path`` holds a kuk repository.

        The config file is the marker. A bare .kuk/ directory, such as the one
        in the home directory that only holds the global index, is not a
        repository.
        """
        return (Path(path) / cls.KUK_DIR / cls.CONFIG_FILE).is_file()

    def is_initialized(self) -> bool:
        return self.is_repository(self.root)

    def ensure_initialized(self) -> None:
        if not self.is_initialized():
            raise RepositoryNotFound(self.root)

    def init_repository(self, board_name: str = DEFAULT_BOARD) -> RepoConfig:
        """
        Create .kuk/ with a config, one default board, and register the project.

        The global index stays locked while the files are created and is saved
        last. If saving it fails, the new files are removed again, so either
        the repository exists and is registered or nothing changed.
        """
        self.board_path(board_name)
        if self.is_initialized():
            raise AlreadyInitialized(self.kuk_dir)

        config = RepoConfig(default_board=board_name)
        board = Board.default(board_name)

        created: list[Path] = []
        try:
            with self.index_store.registration(self.root):
                created = self._create_layout(config, board)
        except BaseException:
            for path in reversed(created):
                _remove(path)
            raise

        logger.info("Initialized kuk repository: %s (board=%s)", self.root, board_name)
        return config

    def _create_layout(self, config: RepoConfig, board: Board) -> list[Path]:
        """Write the repository files and return what was created."""
        if self.kuk_dir.exists():
            return self._fill_kuk_dir(config, board)

        # Assembled under a temporary name and renamed into place, so a
        # half-initialized repository is never visible
        try:
            staging = Path(tempfile.mkdtemp(prefix=".kuk-init-", dir=self.root))
        except OSError as e:
            raise IoFailure(self.root, e.strerror or str(e)) from e

        try:
            boards = staging / self.BOARDS_DIR
            boards.mkdir()
            write_json(staging / self.CONFIG_FILE, config.to_dict())
            write_json(boards / f"{board.name}{self.BOARD_SUFFIX}", board.to_dict())
            os.chmod(staging, 0o755)
            os.rename(staging, self.kuk_dir)
        except (OSError, IoFailure) as e:
            shutil.rmtree(staging, ignore_errors=True)
            if self.is_initialized():
                raise AlreadyInitialized(self.kuk_dir) from e
            if isinstance(e, IoFailure):
                raise
            raise IoFailure(self.kuk_dir, e.strerror or str(e)) from e
        return [self.kuk_dir]

    def _fill_kuk_dir(self, config: RepoConfig, board: Board) -> list[Path]:
        """Initialize inside an existing .kuk/ that is not yet a repository.

        The config file is written last, since its presence marks the
        repository as initialized.
        """
        created: list[Path] = []
        with self._lock(self.config_path):
            if self.config_path.exists():
                raise AlreadyInitialized(self.kuk_dir)
            try:
                if not self.boards_dir.is_dir():
                    self.boards_dir.mkdir()
                    created.append(self.boards_dir)
                path = self.board_path(board.name)
                if not path.exists():
                    write_json(path, board.to_dict())
                    created.append(path)
                write_json(self.config_path, config.to_dict())
                created.append(self.config_path)
            except BaseException as e:
                for leftover in reversed(created):
                    _remove(leftover)
                if isinstance(e, OSError):
                    raise IoFailure(self.kuk_dir, e.strerror or str(e)) from e
                raise
        return created

    # --- Config ---

    def load_config(self) -> RepoConfig:
        self.ensure_initialized()
        try:
            data = read_json(self.config_path)
        except FileNotFoundError as e:
            raise CorruptData(self.config_path, "config.json is missing") from e
        return parse_model(RepoConfig, self.config_path, data)

    def save_config(self, config: RepoConfig) -> None:
        with self.edit_config() as current:
            current.version = config.version
            current.default_board = config.default_board

    @contextmanager
    def edit_config(self) -> Iterator[RepoConfig]:
        """Lock, load, yield, and save the config if the block succeeds."""
        self.ensure_initialized()
        with self._lock(self.config_path):
            config = self.load_config()
            yield config
            write_json(self.config_path, config.to_dict())

    # --- Boards ---

    def load_board(self, name: str) -> Board:
        """Load a board by name.

        Raises:
            BoardNotFound: No such board file
            CorruptData: The file is not a valid board
        """
        self.ensure_initialized()
        path = self.board_path(name)
        try:
            data = read_json(path)
        except FileNotFoundError as e:
            raise BoardNotFound(name) from e

        board = parse_model(Board, path, data)
        if board.name != name:
            raise CorruptData(path, f"file holds board {board.name!r}, expected {name!r}")
        return board

    def save_board(self, board: Board) -> None:
        """Write a board under its own lock."""
        self.ensure_initialized()
        path = self.board_path(board.name)
        with self._lock(path):
            write_json(path, board.to_dict())
        logger.debug("Board saved: %s (%d cards)", board.name, len(board.cards))

    @contextmanager
    def edit_board(self, name: str) -> Iterator[Board]:
        """
        Run one load-mutate-save cycle on a board.

        The board's lock is held for the whole block. If the block raises,
        nothing is written and the on-disk board is unchanged.
        """
        self.ensure_initialized()
        path = self.board_path(name)
        if not path.is_file():
            raise BoardNotFound(name)
        with self._lock(path):
            board = self.load_board(name)
            yield board
            write_json(path, board.to_dict())
            logger.debug("Board saved: %s (%d cards)", name, len(board.cards))

    def create_board(self, board: Board) -> Board:
        """Write a new board file; refuses to overwrite an existing one."""
        self.ensure_initialized()
        path = self.board_path(board.name)
        with self._lock(path):
            if path.exists():
                raise BoardAlreadyExists(board.name)
            write_json(path, board.to_dict())
        logger.info("Board created: %s", board.name)
        return board

    def list_boards(self) -> list[str]:
        """Names of all boards, sorted."""
        self.ensure_initialized()
        try:
            return sorted(
                p.stem for p in self.boards_dir.glob(f"*{self.BOARD_SUFFIX}")
                if not p.name.startswith(".")
            )
        except OSError as e:
            raise IoFailure(self.boards_dir, e.strerror or str(e)) from e

    # --- Private Methods ---

    def _lock(self, path: Path):
        return file_lock(
            path,
            timeout=self.settings.lock_timeout,
            poll_interval=self.settings.lock_poll_interval,
        )


def _remove(path: Path) -> None:
    """Delete a file or directory tree created by an init that is being undone."""
    if path.is_dir():
        shutil.rmtree(path, ignore_errors=True)
    else:
        with suppress(FileNotFoundError):
            path.unlink()
