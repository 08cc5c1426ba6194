"""Integration tests for BoardService."""

from pathlib import Path

import pytest

from kuk.config import Settings
from kuk.errors import BoardAlreadyExists, BoardNotFound, DuplicateColumn, InvalidName
from kuk.models import Column
from kuk.repositories import FilesystemRepository, IndexStore
from kuk.services import BoardService


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(home=tmp_path / "home", lock_timeout=2.0)


@pytest.fixture
def repo(tmp_path: Path, settings: Settings) -> FilesystemRepository:
    project = tmp_path / "project"
    project.mkdir()
    repo = FilesystemRepository(project, settings)
    repo.init_repository()
    return repo


@pytest.fixture
def board_service(repo: FilesystemRepository, settings: Settings) -> BoardService:
    return BoardService(repo, IndexStore(settings))


class TestBoardServiceBoards:
    """Tests for creating, listing and switching boards."""

    def test_active_board_defaults(self, board_service: BoardService):
        assert board_service.active_board_name() == "default"
        assert board_service.load_board().name == "default"

    def test_create_board_with_default_columns(self, board_service: BoardService):
        board = board_service.create_board("sprint-2")
        assert board.column_names == ["todo", "doing", "done"]
        assert board_service.list_boards() == ["default", "sprint-2"]

    def test_create_board_with_columns(self, board_service: BoardService):
        board = board_service.create_board(
            "support", ["new", Column(name="waiting", wip_limit=5), "closed"]
        )
        assert board.column_names == ["new", "waiting", "closed"]
        assert board_service.load_board("support").get_column("waiting").wip_limit == 5

    def test_create_board_rejects_bad_input(self, board_service: BoardService):
        with pytest.raises(InvalidName):
            board_service.create_board("")
        with pytest.raises(InvalidName):
            board_service.create_board("empty", [])
        with pytest.raises(DuplicateColumn):
            board_service.create_board("dupes", ["a", "a"])
        assert board_service.list_boards() == ["default"]

    def test_create_existing_board(self, board_service: BoardService):
        with pytest.raises(BoardAlreadyExists):
            board_service.create_board("default")

    def test_switch_board(self, board_service: BoardService):
        board_service.create_board("ops")
        config = board_service.switch_board("ops")
        assert config.default_board == "ops"
        assert board_service.active_board_name() == "ops"

    def test_switch_to_missing_board(self, board_service: BoardService):
        with pytest.raises(BoardNotFound):
            board_service.switch_board("nope")
        assert board_service.active_board_name() == "default"


class TestBoardServiceColumns:
    """Tests for column management."""

    def test_create_column(self, board_service: BoardService):
        column = board_service.create_column("review", wip_limit=3)
        assert column.wip_limit == 3
        assert board_service.load_board().column_names == ["todo", "doing", "done", "review"]

    def test_create_duplicate_column(self, board_service: BoardService, repo: FilesystemRepository):
        before = (repo.boards_dir / "default.json").read_bytes()
        with pytest.raises(DuplicateColumn):
            board_service.create_column("doing")
        assert (repo.boards_dir / "default.json").read_bytes() == before

    def test_create_column_on_named_board(self, board_service: BoardService):
        board_service.create_board("ops", ["inbox"])
        board_service.create_column("done", board="ops")
        assert board_service.load_board("ops").column_names == ["inbox", "done"]
        assert board_service.load_board().column_names == ["todo", "doing", "done"]


class TestDoctor:
    """Tests for the repository health check."""

    def test_healthy_repository(self, board_service: BoardService):
        report = board_service.doctor()
        assert report.ok
        assert report.config_version == "0.1.0"
        assert [b.name for b in report.boards] == ["default"]
        assert report.index_projects == 1

    def test_counts_cards(self, board_service: BoardService, repo: FilesystemRepository):
        with repo.edit_board("default") as board:
            board.add_card("A", "todo")
            archived = board.add_card("B", "todo")
            board.archive_card(archived.id)

        health = board_service.doctor().boards[0]
        assert (health.active, health.archived) == (1, 1)

    def test_reports_corrupt_board_without_raising(
        self, board_service: BoardService, repo: FilesystemRepository
    ):
        board_service.create_board("ops")
        (repo.boards_dir / "ops.json").write_text("{broken")

        report = board_service.doctor()

        assert not report.ok
        by_name = {b.name: b for b in report.boards}
        assert by_name["default"].error is None
        assert "ops.json" in by_name["ops"].error

    def test_reports_corrupt_index(self, board_service: BoardService, settings: Settings):
        settings.index_path.write_text("nope")
        report = board_service.doctor()
        assert not report.ok
        assert report.index_error is not None
        assert report.index_projects is None

    def test_uninitialized(self, tmp_path: Path, settings: Settings):
        empty = tmp_path / "empty"
        empty.mkdir()
        report = BoardService(FilesystemRepository(empty, settings)).doctor()
        assert not report.initialized
        assert not report.ok
