"""Board state models."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, ValidationError, model_validator

from ..errors import CardNotFound, DuplicateColumn, InvalidName, UnknownColumn
from .card import Card
from .enums import Direction, LabelAction

DEFAULT_BOARD = "default"
DEFAULT_COLUMNS = ("todo", "doing", "done")

# Card fields that update_card may change
EDITABLE_FIELDS = frozenset({"title", "description", "due"})


class Column(BaseModel):
    """A named lane with an optional work-in-progress cap."""

    name: str = Field(..., min_length=1)
    wip_limit: int | None = Field(default=None, ge=0)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name}
        if self.wip_limit is not None:
            data["wip_limit"] = self.wip_limit
        return data


class Board(BaseModel):
    """A board: an ordered sequence of columns and the cards they hold.

    Mutation methods validate their arguments before touching any state, so
    a method that raises leaves the board exactly as it was.
    """

    name: str = Field(..., min_length=1)
    columns: list[Column] = Field(default_factory=list)
    cards: list[Card] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_invariants(self) -> Board:
        """Reject boards that break column or ordering invariants."""
        names = [col.name for col in self.columns]
        if len(names) != len(set(names)):
            raise ValueError("Column names must be unique")

        seen_ids: set[str] = set()
        slots: set[tuple[str, int]] = set()
        for card in self.cards:
            if card.id in seen_ids:
                raise ValueError(f"Duplicate card id {card.id}")
            seen_ids.add(card.id)
            if card.column not in names:
                raise ValueError(f"Card {card.id} is in unknown column {card.column!r}")
            if card.archived:
                continue
            slot = (card.column, card.order)
            if slot in slots:
                raise ValueError(
                    f"Card {card.id} shares order {card.order} in column {card.column!r}"
                )
            slots.add(slot)
        return self

    @classmethod
    def default(cls, name: str = DEFAULT_BOARD) -> Board:
        """Create a board with the standard todo/doing/done columns."""
        return cls(name=name, columns=[Column(name=col) for col in DEFAULT_COLUMNS])

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "columns": [col.to_dict() for col in self.columns],
            "cards": [card.to_dict() for card in self.cards],
        }

    # --- Queries ---

    @property
    def column_names(self) -> list[str]:
        return [col.name for col in self.columns]

    def has_column(self, name: str) -> bool:
        return any(col.name == name for col in self.columns)

    def get_column(self, name: str) -> Column:
        for col in self.columns:
            if col.name == name:
                return col
        raise UnknownColumn(self.name, name)

    def find_card(self, card_id: str) -> Card | None:
        for card in self.cards:
            if card.id == card_id:
                return card
        return None

    def get_card(self, card_id: str) -> Card:
        card = self.find_card(card_id)
        if card is None:
            raise CardNotFound(self.name, card_id)
        return card

    def column_cards(self, column: str, include_archived: bool = False) -> list[Card]:
        """Cards in a column, top to bottom."""
        cards = [
            c for c in self.cards if c.column == column and (include_archived or not c.archived)
        ]
        return sorted(cards, key=lambda c: (c.order, c.id))

    def active_count(self, column: str) -> int:
        return sum(1 for c in self.cards if c.column == column and not c.archived)

    def next_order(self, column: str) -> int:
        """One past the highest active order in a column (0 when empty)."""
        orders = [c.order for c in self.cards if c.column == column and not c.archived]
        return max(orders) + 1 if orders else 0

    def would_exceed_wip(self, column: str) -> bool:
        """Whether one more active card would push a column past its WIP limit."""
        limit = self.get_column(column).wip_limit
        if limit is None:
            return False
        return self.active_count(column) + 1 > limit

    # --- Mutations ---

    def add_card(
        self,
        title: str,
        column: str,
        labels: list[str] | None = None,
        assignee: str | None = None,
        description: str | None = None,
        due: datetime | None = None,
    ) -> Card:
        """Append a new card at the bottom of a column.

        WIP limits are not enforced here; see would_exceed_wip.
        """
        if not title or not title.strip():
            raise InvalidName("title", title)
        self.get_column(column)

        card = Card(
            title=title,
            column=column,
            order=self.next_order(column),
            labels=labels or [],
            assignee=assignee,
            description=description,
            due=due,
        )
        self.cards.append(card)
        return card

    def move_card(self, card_id: str, to_column: str) -> Card:
        """Move a card to the bottom of another column.

        The source column keeps a gap where the card was.
        """
        card = self.get_card(card_id)
        self.get_column(to_column)

        card.order = self.next_order(to_column)
        card.column = to_column
        card.touch()
        return card

    def shift_card(self, card_id: str, direction: Direction) -> Card:
        """Move a card into the neighbouring column; no-op at the board edge."""
        card = self.get_card(card_id)
        names = self.column_names
        idx = names.index(card.column) + (-1 if direction == Direction.LEFT else 1)
        if idx < 0 or idx >= len(names):
            return card
        return self.move_card(card_id, names[idx])

    def hoist_card(self, card_id: str) -> Card:
        """Make a card the first in its column."""
        card = self.get_card(card_id)
        siblings = self._siblings(card)

        if not siblings:
            card.order = 0
        else:
            top = min(c.order for c in siblings)
            if top > 0:
                card.order = top - 1
            else:
                # No room above order 0: push everything else down one slot
                for sibling in siblings:
                    sibling.order += 1
                    sibling.touch()
                card.order = 0
        card.touch()
        return card

    def demote_card(self, card_id: str) -> Card:
        """Make a card the last in its column."""
        card = self.get_card(card_id)
        siblings = self._siblings(card)
        card.order = max(c.order for c in siblings) + 1 if siblings else 0
        card.touch()
        return card

    def archive_card(self, card_id: str) -> Card:
        card = self.get_card(card_id)
        card.archived = True
        card.touch()
        return card

    def unarchive_card(self, card_id: str) -> Card:
        """Bring an archived card back; it goes to the bottom if its slot was taken."""
        card = self.get_card(card_id)
        if card.archived:
            if any(c.order == card.order for c in self._siblings(card)):
                card.order = self.next_order(card.column)
            card.archived = False
        card.touch()
        return card

    def delete_card(self, card_id: str) -> Card:
        card = self.get_card(card_id)
        self.cards = [c for c in self.cards if c.id != card_id]
        return card

    def label_card(self, card_id: str, action: LabelAction | str, tag: str) -> Card:
        """Add or remove a label. Adding a present or removing an absent label is a no-op."""
        card = self.get_card(card_id)
        try:
            action = LabelAction(action)
        except ValueError:
            raise InvalidName("label action", str(action), "use add or remove") from None
        if not tag:
            raise InvalidName("label", tag)

        if action == LabelAction.ADD and tag not in card.labels:
            card.labels = [*card.labels, tag]
            card.touch()
        elif action == LabelAction.REMOVE and tag in card.labels:
            card.labels = [label for label in card.labels if label != tag]
            card.touch()
        return card

    def assign_card(self, card_id: str, user: str | None) -> Card:
        card = self.get_card(card_id)
        card.assignee = user or None
        card.touch()
        return card

    def update_card(self, card_id: str, changes: dict[str, Any]) -> Card:
        """Change title, description or due date of a card."""
        card = self.get_card(card_id)
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise InvalidName("field", ", ".join(sorted(unknown)), "not editable")
        if "title" in changes:
            title = changes["title"]
            if not title or not title.strip():
                raise InvalidName("title", title)

        try:
            updated = Card.model_validate({**card.model_dump(), **changes})
        except ValidationError as e:
            raise InvalidName("field", ", ".join(sorted(changes)), str(e)) from e
        for field in changes:
            setattr(card, field, getattr(updated, field))
        card.touch()
        return card

    def update_metadata(self, card_id: str, updates: dict[str, Any]) -> Card:
        """Merge collaborator metadata into a card; a None value removes the key."""
        card = self.get_card(card_id)
        metadata = dict(card.metadata)
        for key, value in updates.items():
            if value is None:
                metadata.pop(key, None)
            else:
                metadata[key] = value
        card.metadata = metadata
        card.touch()
        return card

    def create_column(self, name: str, wip_limit: int | None = None) -> Column:
        if not name or not name.strip():
            raise InvalidName("column name", name)
        if self.has_column(name):
            raise DuplicateColumn(self.name, name)
        if wip_limit is not None and wip_limit < 0:
            raise InvalidName("wip_limit", str(wip_limit), "must be non-negative")

        column = Column(name=name, wip_limit=wip_limit)
        self.columns.append(column)
        return column

    def _siblings(self, card: Card) -> list[Card]:
        """Other active cards sharing a card's column."""
        return [
            c for c in self.cards if c.column == card.column and not c.archived and c.id != card.id
        ]
