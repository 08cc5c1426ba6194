"""Machine-wide registry of known repositories."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from ..utils import from_iso, now_utc, to_iso


class IndexEntry(BaseModel):
    """One registered repository."""

    path: str = Field(..., min_length=1)
    name: str
    added_at: datetime = Field(default_factory=now_utc)

    @field_validator("added_at", mode="before")
    @classmethod
    def parse_timestamp(cls, v: Any) -> Any:
        if isinstance(v, str):
            return from_iso(v)
        return v

    def to_dict(self) -> dict[str, Any]:
        return {"path": self.path, "name": self.name, "added_at": to_iso(self.added_at)}


class GlobalIndex(BaseModel):
    """Contents of ~/.kuk/index.json, keyed by repository path."""

    projects: list[IndexEntry] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_unique_paths(self) -> GlobalIndex:
        paths = [p.path for p in self.projects]
        if len(paths) != len(set(paths)):
            raise ValueError("Project paths must be unique")
        return self

    def add(self, path: str, name: str) -> IndexEntry:
        """Register a repository; re-registering refreshes added_at and name."""
        entry = self.get(path)
        if entry is None:
            entry = IndexEntry(path=path, name=name)
            self.projects.append(entry)
        else:
            entry.name = name
            entry.added_at = now_utc()
        return entry

    def remove(self, path: str) -> bool:
        """Forget a repository. Returns False if it was not registered."""
        before = len(self.projects)
        self.projects = [p for p in self.projects if p.path != path]
        return len(self.projects) != before

    def get(self, path: str) -> IndexEntry | None:
        for entry in self.projects:
            if entry.path == path:
                return entry
        return None

    def contains(self, path: str) -> bool:
        return self.get(path) is not None

    def to_dict(self) -> dict[str, Any]:
        return {"projects": [p.to_dict() for p in self.projects]}
