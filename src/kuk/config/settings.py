"""Engine settings."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Engine settings, overridable through ``KUK_*`` environment variables."""

    home: Path = Field(
        default_factory=Path.home,
        description="Directory holding the machine-wide .kuk/index.json",
    )

    lock_timeout: float = Field(
        default=5.0,
        ge=0,
        description="Seconds to wait for an advisory file lock before failing",
    )

    lock_poll_interval: float = Field(
        default=0.01,
        gt=0,
        description="Initial delay between lock attempts (doubles up to 0.2s)",
    )

    verbose: int = Field(
        default=0,
        description="Verbosity level (0=off, 1=INFO, 2+=DEBUG)",
    )

    log_file: Path | None = Field(
        default=None,
        description="Optional path to write logs to file",
    )

    model_config = {
        "env_prefix": "KUK_",
    }

    @property
    def index_path(self) -> Path:
        """Location of the machine-wide project index."""
        return self.home / ".kuk" / "index.json"
