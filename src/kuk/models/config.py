"""Per-repository configuration model."""

from typing import Any

from pydantic import BaseModel, Field

from .board import DEFAULT_BOARD

SCHEMA_VERSION = "0.1.0"


class RepoConfig(BaseModel):
    """Contents of .kuk/config.json."""

    version: str = SCHEMA_VERSION
    default_board: str = Field(default=DEFAULT_BOARD, min_length=1)

    def to_dict(self) -> dict[str, Any]:
        return {"version": self.version, "default_board": self.default_board}
