"""Service for card operations."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any

from ..errors import InvalidName, WipLimitExceeded
from ..models import Board, Card, Direction, LabelAction
from ..repositories import RepositoryProtocol
from .reference import CardId, resolve_reference

logger = logging.getLogger(__name__)

# Sentinel for update_card arguments the caller did not pass
_UNSET: Any = object()


class CardService:
    """
    Card operations, each one a full load-resolve-mutate-save cycle.

    Every public method re-reads the board under its lock, so no state is
    cached between calls. Card references may be canonical ids or 1-based
    ordinals; ordinals need ``in_column``, the column whose listing the user
    is looking at.
    """

    def __init__(self, repository: RepositoryProtocol) -> None:
        self.repository = repository

    def _board_name(self, board: str | None) -> str:
        if board is not None:
            return board
        return self.repository.load_config().default_board

    def _mutate(
        self,
        ref: str,
        in_column: str | None,
        board: str | None,
        action: str,
        op: Callable[[Board, str], Card],
    ) -> Card:
        """Resolve ``ref`` and apply ``op`` inside one locked board cycle."""
        name = self._board_name(board)
        with self.repository.edit_board(name) as loaded:
            card_id = resolve_reference(loaded, ref, in_column)
            card = op(loaded, card_id)
        logger.info("Card %s: %s on board %s", action, card.id, name)
        return card

    # --- Queries ---

    def resolve(self, ref: str, in_column: str | None = None, board: str | None = None) -> CardId:
        """Turn a user token into a canonical card id."""
        loaded = self.repository.load_board(self._board_name(board))
        return resolve_reference(loaded, ref, in_column)

    def get_card(self, ref: str, in_column: str | None = None, board: str | None = None) -> Card:
        loaded = self.repository.load_board(self._board_name(board))
        return loaded.get_card(resolve_reference(loaded, ref, in_column))

    def list_cards(
        self,
        column: str | None = None,
        include_archived: bool = False,
        board: str | None = None,
    ) -> list[Card]:
        """Cards in display order: column by column, top to bottom.

        The position of a card within its column in this listing (counting
        from 1, archived cards excluded) is its ordinal.
        """
        loaded = self.repository.load_board(self._board_name(board))
        columns = [loaded.get_column(column).name] if column is not None else loaded.column_names
        cards: list[Card] = []
        for name in columns:
            cards.extend(loaded.column_cards(name, include_archived=include_archived))
        return cards

    # --- Mutations ---

    def add_card(
        self,
        title: str,
        column: str | None = None,
        labels: list[str] | None = None,
        assignee: str | None = None,
        description: str | None = None,
        due: datetime | None = None,
        board: str | None = None,
        enforce_wip: bool = False,
    ) -> Card:
        """
        Create a card at the bottom of a column (the first column by default).

        With ``enforce_wip`` the call fails instead of overfilling a column
        that has a WIP limit.
        """
        name = self._board_name(board)
        with self.repository.edit_board(name) as loaded:
            if column is not None:
                target = column
            else:
                target = loaded.column_names[0] if loaded.columns else ""
            if enforce_wip and loaded.would_exceed_wip(target):
                limit = loaded.get_column(target).wip_limit or 0
                raise WipLimitExceeded(name, target, limit)
            card = loaded.add_card(
                title,
                target,
                labels=labels,
                assignee=assignee,
                description=description,
                due=due,
            )
        logger.info("Card created: %s (%s -> %s/%s)", card.id, title, name, target)
        return card

    def move_card(
        self,
        ref: str,
        to_column: str,
        in_column: str | None = None,
        board: str | None = None,
        enforce_wip: bool = False,
    ) -> Card:
        def op(loaded: Board, card_id: str) -> Card:
            current = loaded.get_card(card_id)
            if (
                enforce_wip
                and current.column != to_column
                and loaded.would_exceed_wip(to_column)
            ):
                limit = loaded.get_column(to_column).wip_limit or 0
                raise WipLimitExceeded(loaded.name, to_column, limit)
            return loaded.move_card(card_id, to_column)

        return self._mutate(ref, in_column, board, f"moved to {to_column}", op)

    def shift_card(
        self,
        ref: str,
        direction: Direction | str,
        in_column: str | None = None,
        board: str | None = None,
    ) -> Card:
        """Move a card one column left or right."""
        try:
            step = Direction(direction)
        except ValueError:
            raise InvalidName("direction", str(direction), "use left or right") from None
        return self._mutate(
            ref, in_column, board, f"shifted {step.value}",
            lambda b, card_id: b.shift_card(card_id, step),
        )

    def hoist_card(self, ref: str, in_column: str | None = None, board: str | None = None) -> Card:
        return self._mutate(ref, in_column, board, "hoisted", Board.hoist_card)

    def demote_card(self, ref: str, in_column: str | None = None, board: str | None = None) -> Card:
        return self._mutate(ref, in_column, board, "demoted", Board.demote_card)

    def archive_card(
        self, ref: str, in_column: str | None = None, board: str | None = None
    ) -> Card:
        return self._mutate(ref, in_column, board, "archived", Board.archive_card)

    def unarchive_card(
        self, ref: str, in_column: str | None = None, board: str | None = None
    ) -> Card:
        return self._mutate(ref, in_column, board, "unarchived", Board.unarchive_card)

    def delete_card(self, ref: str, in_column: str | None = None, board: str | None = None) -> Card:
        """Remove a card permanently; returns the card as it was."""
        return self._mutate(ref, in_column, board, "deleted", Board.delete_card)

    def label_card(
        self,
        ref: str,
        action: LabelAction | str,
        tag: str,
        in_column: str | None = None,
        board: str | None = None,
    ) -> Card:
        return self._mutate(
            ref, in_column, board, f"labelled {tag!r}",
            lambda b, card_id: b.label_card(card_id, action, tag),
        )

    def assign_card(
        self,
        ref: str,
        user: str | None,
        in_column: str | None = None,
        board: str | None = None,
    ) -> Card:
        """Set the assignee, or clear it with ``None``."""
        return self._mutate(
            ref, in_column, board, f"assigned to {user}",
            lambda b, card_id: b.assign_card(card_id, user),
        )

    def update_card(
        self,
        ref: str,
        title: str = _UNSET,
        description: str | None = _UNSET,
        due: datetime | None = _UNSET,
        in_column: str | None = None,
        board: str | None = None,
    ) -> Card:
        """Edit title, description or due date. Passing ``None`` clears an optional field."""
        changes = {
            key: value
            for key, value in (("title", title), ("description", description), ("due", due))
            if value is not _UNSET
        }
        return self._mutate(
            ref, in_column, board, "updated",
            lambda b, card_id: b.update_card(card_id, changes),
        )

    def update_metadata(
        self,
        ref: str,
        updates: dict[str, Any],
        in_column: str | None = None,
        board: str | None = None,
    ) -> Card:
        """Merge collaborator metadata into a card (``None`` values delete keys)."""
        return self._mutate(
            ref, in_column, board, "metadata updated",
            lambda b, card_id: b.update_metadata(card_id, updates),
        )
