"""Resolve user-supplied card references to canonical identifiers.

A reference is either a canonical card id or a 1-based ordinal. Ordinals
count the non-archived cards of one column, top to bottom, as shown by the
listing the user is looking at. They change whenever the board changes, so
they are resolved immediately and never stored.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import NewType

from ..errors import CardNotFound, InvalidOrdinal
from ..models import Board
from ..utils import is_canonical_id

CardId = NewType("CardId", str)


@dataclass(frozen=True)
class Ordinal:
    """A 1-based position within a column listing."""

    position: int
    token: str


def parse_reference(token: str) -> CardId | Ordinal | None:
    """Classify a token without looking at any board."""
    token = token.strip()
    if is_canonical_id(token):
        return CardId(token)
    if token.isascii() and token.isdigit():
        return Ordinal(position=int(token), token=token)
    return None


def resolve_reference(board: Board, token: str, column: str | None = None) -> CardId:
    """Resolve a token against a loaded board.

    Args:
        board: The board the token refers into
        token: A canonical card id or a 1-based ordinal
        column: The column whose listing gives ordinals their meaning

    Raises:
        CardNotFound: The id is not on the board, or the token is neither form
        InvalidOrdinal: The ordinal is out of range or no column was given
        UnknownColumn: The column is not on the board
    """
    ref = parse_reference(token)
    if ref is None:
        raise CardNotFound(board.name, token)

    if isinstance(ref, Ordinal):
        if column is None:
            raise InvalidOrdinal(ref.token, None)
        cards = board.column_cards(board.get_column(column).name)
        if not 1 <= ref.position <= len(cards):
            raise InvalidOrdinal(ref.token, column, len(cards))
        return CardId(cards[ref.position - 1].id)

    board.get_card(ref)
    return ref
