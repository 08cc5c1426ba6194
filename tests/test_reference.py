"""Tests for card reference parsing and resolution."""

import pytest

from kuk.errors import CardNotFound, InvalidOrdinal, UnknownColumn
from kuk.models import Board
from kuk.services import CardId, Ordinal, parse_reference, resolve_reference


@pytest.fixture
def board() -> Board:
    """A default board with three todo cards and one in doing."""
    board = Board.default()
    for title in ("A", "B", "C"):
        board.add_card(title, "todo")
    board.add_card("D", "doing")
    return board


class TestParseReference:
    """Tests for parse_reference."""

    def test_canonical_id(self):
        assert parse_reference("01HXYZ1234567890ABCDEFGHJK") == CardId("01HXYZ1234567890ABCDEFGHJK")

    def test_ordinal(self):
        assert parse_reference("3") == Ordinal(position=3, token="3")

    def test_surrounding_whitespace_ignored(self):
        assert parse_reference(" 2 ") == Ordinal(position=2, token="2")

    @pytest.mark.parametrize(
        "token", ["", "abc", "-1", "1.5", "²", "٣", "01hxyz1234567890abcdefghjk"]
    )
    def test_neither_form(self, token: str):
        assert parse_reference(token) is None


class TestResolveReference:
    """Tests for resolve_reference."""

    def test_ordinals_follow_column_listing(self, board: Board):
        todo = board.column_cards("todo")
        assert resolve_reference(board, "1", "todo") == todo[0].id
        assert resolve_reference(board, "3", "todo") == todo[2].id
        assert resolve_reference(board, "1", "doing") == board.column_cards("doing")[0].id

    def test_ordinals_skip_archived_cards(self, board: Board):
        first = board.column_cards("todo")[0]
        board.archive_card(first.id)
        assert board.get_card(resolve_reference(board, "1", "todo")).title == "B"

    def test_ordinals_change_after_reorder(self, board: Board):
        """Ordinals are positions, not identities."""
        c = board.column_cards("todo")[2]
        board.hoist_card(c.id)
        assert resolve_reference(board, "1", "todo") == c.id

    def test_canonical_id(self, board: Board):
        card = board.column_cards("doing")[0]
        assert resolve_reference(board, card.id) == card.id
        # The column is only used for ordinals
        assert resolve_reference(board, card.id, "todo") == card.id

    def test_unknown_canonical_id(self, board: Board):
        with pytest.raises(CardNotFound) as exc:
            resolve_reference(board, "01HXYZ1234567890ABCDEFGHJK")
        assert exc.value.card == "01HXYZ1234567890ABCDEFGHJK"

    def test_garbage_token(self, board: Board):
        with pytest.raises(CardNotFound):
            resolve_reference(board, "not-a-card", "todo")

    def test_non_ascii_digits_are_not_ordinals(self, board: Board):
        """Superscript and other Unicode digits are rejected as unknown cards."""
        with pytest.raises(CardNotFound):
            resolve_reference(board, "²", "todo")

    @pytest.mark.parametrize("token", ["0", "4", "99"])
    def test_ordinal_out_of_range(self, board: Board, token: str):
        with pytest.raises(InvalidOrdinal) as exc:
            resolve_reference(board, token, "todo")
        assert exc.value.column == "todo"
        assert exc.value.size == 3

    def test_ordinal_in_empty_column(self, board: Board):
        with pytest.raises(InvalidOrdinal) as exc:
            resolve_reference(board, "1", "done")
        assert exc.value.size == 0

    def test_ordinal_without_column(self, board: Board):
        with pytest.raises(InvalidOrdinal) as exc:
            resolve_reference(board, "1")
        assert exc.value.column is None

    def test_ordinal_in_unknown_column(self, board: Board):
        with pytest.raises(UnknownColumn):
            resolve_reference(board, "1", "blocked")
