"""Tests for RepositoryEngine and ProjectService."""

from pathlib import Path

import pytest

from kuk import RepositoryEngine
from kuk.config import Settings
from kuk.errors import AlreadyInitialized, RepositoryNotFound


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(home=tmp_path / "home", lock_timeout=2.0)


@pytest.fixture
def engine(tmp_path: Path, settings: Settings) -> RepositoryEngine:
    """An engine on an initialized project directory."""
    project = tmp_path / "project"
    project.mkdir()
    engine = RepositoryEngine(project, settings)
    engine.init()
    return engine


class TestRepositoryEngine:
    """Tests for engine wiring and discovery."""

    def test_services_share_one_repository(self, engine: RepositoryEngine):
        card = engine.cards.add_card("A")
        assert engine.boards.load_board().get_card(card.id).title == "A"
        assert engine.root == engine.repository.root

    def test_init_twice(self, engine: RepositoryEngine):
        with pytest.raises(AlreadyInitialized):
            engine.init()

    def test_discover_from_subdirectory(self, engine: RepositoryEngine, settings: Settings):
        nested = engine.root / "src" / "deep"
        nested.mkdir(parents=True)

        found = RepositoryEngine.discover(nested, settings)

        assert found.root == engine.root
        assert found.boards.list_boards() == ["default"]

    def test_discover_from_root(self, engine: RepositoryEngine, settings: Settings):
        assert RepositoryEngine.discover(engine.root, settings).root == engine.root

    def test_discover_nothing(self, tmp_path: Path, settings: Settings):
        lonely = tmp_path / "lonely"
        lonely.mkdir()
        with pytest.raises(RepositoryNotFound):
            RepositoryEngine.discover(lonely, settings)

    def test_discover_skips_index_directory(self, settings: Settings):
        """The home .kuk/ holding the global index is not mistaken for a repository."""
        project = settings.home / "proj"
        project.mkdir(parents=True)
        RepositoryEngine(project, settings).init()
        notes = settings.home / "notes"
        notes.mkdir()
        assert settings.index_path.is_file()

        with pytest.raises(RepositoryNotFound):
            RepositoryEngine.discover(notes, settings)
        assert RepositoryEngine.discover(project / "src", settings).root == project.resolve()

    def test_init_home_directory_after_other_projects(self, settings: Settings):
        project = settings.home / "proj"
        project.mkdir(parents=True)
        RepositoryEngine(project, settings).init()

        home = RepositoryEngine(settings.home, settings)
        home.init()

        assert RepositoryEngine.discover(settings.home / "notes", settings).root == home.root
        assert [p.name for p in home.projects.list_projects()] == ["proj", "home"]

    def test_two_engines_see_each_others_writes(
        self, engine: RepositoryEngine, settings: Settings
    ):
        """Engines hold no board state between calls."""
        other = RepositoryEngine(engine.root, settings)
        card = other.cards.add_card("From other")
        assert engine.cards.get_card(card.id).title == "From other"


class TestProjectService:
    """Tests for the machine-wide project list."""

    def test_lists_initialized_projects(self, engine: RepositoryEngine, tmp_path: Path):
        second_dir = tmp_path / "second"
        second_dir.mkdir()
        RepositoryEngine(second_dir, engine.settings).init()

        projects = engine.projects.list_projects()

        assert [p.name for p in projects] == ["project", "second"]
        assert [p.path for p in projects] == [str(engine.root), str(second_dir.resolve())]

    def test_forget(self, engine: RepositoryEngine):
        assert engine.projects.forget(engine.root)
        assert engine.projects.list_projects() == []
        assert not engine.projects.forget(engine.root)
        # The repository itself is untouched
        assert engine.boards.list_boards() == ["default"]

    def test_empty_index(self, tmp_path: Path):
        engine = RepositoryEngine(tmp_path, Settings(home=tmp_path / "nobody"))
        assert engine.projects.list_projects() == []
