"""Card domain model."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from ..utils import ensure_utc, from_iso, new_id, now_utc, to_iso


class Card(BaseModel):
    """A single unit of work on a board."""

    id: str = Field(default_factory=new_id)
    title: str = Field(..., min_length=1)
    column: str = Field(..., min_length=1)
    order: int = Field(default=0, ge=0)
    description: str | None = None
    assignee: str | None = None
    labels: list[str] = Field(default_factory=list)
    due: datetime | None = None
    created_at: datetime = Field(default_factory=now_utc)
    updated_at: datetime | None = None
    # Collaborator-owned data (git links, issue refs); stored verbatim
    metadata: dict[str, Any] = Field(default_factory=dict)
    archived: bool = False

    @field_validator("due", "created_at", "updated_at", mode="before")
    @classmethod
    def parse_timestamp(cls, v: Any) -> Any:
        """Accept RFC 3339 strings (including nanosecond precision); naive means UTC."""
        if isinstance(v, str):
            v = from_iso(v)
        if isinstance(v, datetime):
            return ensure_utc(v)
        return v

    @field_validator("labels")
    @classmethod
    def collapse_labels(cls, v: list[str]) -> list[str]:
        """Drop duplicate labels, keeping first-seen order."""
        return list(dict.fromkeys(v))

    @model_validator(mode="after")
    def check_timestamps(self) -> Card:
        if self.updated_at is None:
            self.updated_at = self.created_at
        elif self.updated_at < self.created_at:
            raise ValueError("updated_at cannot precede created_at")
        return self

    def touch(self) -> None:
        """Advance updated_at to now (never backwards)."""
        now = now_utc()
        if self.updated_at is None or now > self.updated_at:
            self.updated_at = now

    def to_dict(self) -> dict[str, Any]:
        """Convert to a dict in the fixed on-disk field order.

        Unset optional fields are omitted.
        """
        data: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "column": self.column,
            "order": self.order,
        }
        if self.description is not None:
            data["description"] = self.description
        if self.assignee is not None:
            data["assignee"] = self.assignee
        data["labels"] = list(self.labels)
        if self.due is not None:
            data["due"] = to_iso(self.due)
        data["created_at"] = to_iso(self.created_at)
        data["updated_at"] = to_iso(self.updated_at or self.created_at)
        data["metadata"] = self.metadata
        data["archived"] = self.archived
        return data
