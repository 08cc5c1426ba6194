"""Repository protocol for board storage backends."""

from contextlib import AbstractContextManager
from typing import Protocol

from ..models import Board, RepoConfig


class RepositoryProtocol(Protocol):
    """Interface the services use to reach stored boards and configuration.

    Implementations must make each ``edit_*`` block one exclusive
    load-mutate-save cycle: no other writer may save the same file while the
    block runs, and nothing is saved if the block raises.
    """

    def ensure_initialized(self) -> None:
        """Raise RepositoryNotFound unless the repository exists."""
        ...

    def load_config(self) -> RepoConfig:
        """Read the repository configuration."""
        ...

    def edit_config(self) -> AbstractContextManager[RepoConfig]:
        """Locked load-mutate-save cycle on the configuration."""
        ...

    def load_board(self, name: str) -> Board:
        """Read a board by name.

        Raises:
            BoardNotFound: The board does not exist.
            CorruptData: The stored board is invalid.
        """
        ...

    def edit_board(self, name: str) -> AbstractContextManager[Board]:
        """Locked load-mutate-save cycle on one board."""
        ...

    def create_board(self, board: Board) -> Board:
        """Persist a new board; BoardAlreadyExists if the name is taken."""
        ...

    def list_boards(self) -> list[str]:
        """Names of all boards, sorted."""
        ...
