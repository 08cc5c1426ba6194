"""Error types raised by the repository engine.

Every error is recoverable by the caller. Each one keeps the identifiers it
is about as attributes so adapters can map them to exit codes, HTTP statuses
or RPC error codes without parsing the message.
"""

from __future__ import annotations

from pathlib import Path


class KukError(Exception):
    """Base class for all repository engine errors."""


class AlreadyInitialized(KukError):
    """A repository marker already exists at the requested path."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Already initialized at {path}")


class RepositoryNotFound(KukError):
    """No repository marker at (or above) the requested path."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Not a kuk repository: {path}. Run `kuk init` first.")


class BoardNotFound(KukError):
    def __init__(self, board: str) -> None:
        self.board = board
        super().__init__(f"Board not found: {board}")


class BoardAlreadyExists(KukError):
    def __init__(self, board: str) -> None:
        self.board = board
        super().__init__(f"Board already exists: {board}")


class DuplicateColumn(KukError):
    def __init__(self, board: str, column: str) -> None:
        self.board = board
        self.column = column
        super().__init__(f"Column already exists on board {board}: {column}")


class UnknownColumn(KukError):
    def __init__(self, board: str, column: str) -> None:
        self.board = board
        self.column = column
        super().__init__(f"Column not found on board {board}: {column}")


class CardNotFound(KukError):
    def __init__(self, board: str, card: str) -> None:
        self.board = board
        self.card = card
        super().__init__(f"Card not found on board {board}: {card}")


class InvalidOrdinal(KukError):
    """An ordinal token is out of range (or has no column to count in)."""

    def __init__(self, token: str, column: str | None, size: int = 0) -> None:
        self.token = token
        self.column = column
        self.size = size
        if column is None:
            message = f"Card number {token} needs a column to count in"
        else:
            message = f"Card number {token} is out of range for column {column} ({size} cards)"
        super().__init__(message)


class InvalidName(KukError):
    """A title or name is empty or not usable."""

    def __init__(self, field: str, value: str, reason: str = "cannot be empty") -> None:
        self.field = field
        self.value = value
        super().__init__(f"Invalid {field} {value!r}: {reason}")


class WipLimitExceeded(KukError):
    def __init__(self, board: str, column: str, limit: int) -> None:
        self.board = board
        self.column = column
        self.limit = limit
        super().__init__(f"Column {column} on board {board} is at its WIP limit ({limit})")


class CorruptData(KukError):
    """Stored data could not be parsed or violates a board invariant."""

    def __init__(self, path: Path, detail: str) -> None:
        self.path = path
        self.detail = detail
        super().__init__(f"Corrupt data in {path}: {detail}")


class Locked(KukError):
    """The advisory lock could not be acquired within the timeout."""

    def __init__(self, path: Path, timeout: float) -> None:
        self.path = path
        self.timeout = timeout
        super().__init__(f"Could not acquire lock on {path} within {timeout}s")


class IoFailure(KukError):
    """Filesystem failure: permissions, disk full, or a path outside the repository."""

    def __init__(self, path: Path, detail: str) -> None:
        self.path = path
        self.detail = detail
        super().__init__(f"I/O failure on {path}: {detail}")
