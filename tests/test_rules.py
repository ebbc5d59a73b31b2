"""Unit tests for attack detection, legality filtering and terminal conditions."""

import pytest
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from janggi import (
    Board,
    PieceType,
    Position,
    Side,
    all_legal_moves,
    check_bikjang,
    count_material,
    has_legal_moves,
    is_attacked,
    is_checkmate,
    is_in_check,
    legal_moves,
)
from janggi.pieces import raw_moves


MATE_SETUP = {"e1": "hK", "a1": "cR", "i2": "cR", "d9": "cK"}
STALEMATE_SETUP = {"d1": "hK", "e3": "cR", "i2": "cR", "f10": "cK"}


class TestAttacks:
    """Test attack detection."""

    def test_soldier_attacks_forward(self):
        board = Board()
        assert is_attacked(board, Position(5, 0), Side.CHO)
        assert is_attacked(board, Position(4, 4), Side.HAN)

    def test_unattacked_square(self):
        board = Board()
        assert not is_attacked(board, Position(4, 1), Side.CHO)
        assert not is_attacked(board, Position(4, 1), Side.HAN)


class TestCheckDetection:
    """Test check detection."""

    def test_initial_position_no_check(self):
        board = Board()
        assert not is_in_check(board, Side.CHO)
        assert not is_in_check(board, Side.HAN)

    def test_check_by_chariot(self):
        board = Board(custom_setup={"e2": "hK", "e5": "cR", "d9": "cK"})
        assert is_in_check(board, Side.HAN)
        assert not is_in_check(board, Side.CHO)

    def test_check_by_cannon(self):
        board = Board(custom_setup={"e1": "hK", "e3": "hA", "e6": "cC", "d9": "cK"})
        assert is_in_check(board, Side.HAN)

    def test_cannon_screen_cannot_be_a_cannon(self):
        board = Board(custom_setup={"e1": "hK", "e3": "hC", "e6": "cC", "d9": "cK"})
        assert not is_in_check(board, Side.HAN)

    def test_check_by_horse(self):
        board = Board(custom_setup={"e2": "hK", "d4": "cH", "d9": "cK"})
        assert is_in_check(board, Side.HAN)

    def test_no_king_means_no_check(self):
        board = Board(custom_setup={"e9": "cK", "e8": "cR"})
        assert not is_in_check(board, Side.HAN)


class TestLegalMoves:
    """Test filtering of moves that leave the own king in check."""

    def test_pinned_chariot(self):
        """A chariot pinned on the king's file can only move along it."""
        board = Board(custom_setup={"e1": "hK", "e3": "hR", "e6": "cR", "d10": "cK"})
        assert set(legal_moves(board, Position(2, 4), Side.HAN)) == {
            Position(1, 4), Position(3, 4), Position(4, 4), Position(5, 4)
        }

    def test_king_cannot_walk_into_check(self):
        board = Board(custom_setup={"e1": "hK", "d5": "cR", "f10": "cK"})
        assert set(legal_moves(board, Position(0, 4), Side.HAN)) == {
            Position(1, 4), Position(0, 5)
        }

    def test_wrong_side_or_empty(self):
        board = Board()
        assert legal_moves(board, Position(9, 0), Side.HAN) == []
        assert legal_moves(board, Position(4, 4), Side.CHO) == []

    def test_every_legal_move_leaves_king_safe(self):
        board = Board(custom_setup={"e2": "hK", "e5": "cR", "d9": "cK", "c1": "hR"})
        moves = all_legal_moves(board, Side.HAN)
        assert moves
        for from_pos, to_pos in moves:
            assert not is_in_check(board.apply_move(from_pos, to_pos), Side.HAN)

    def test_all_moves_row_major(self):
        board = Board()
        froms = [from_pos for from_pos, _ in all_legal_moves(board, Side.CHO)]
        assert froms == sorted(froms)

    def test_initial_position_has_moves(self):
        board = Board()
        assert has_legal_moves(board, Side.CHO)
        assert has_legal_moves(board, Side.HAN)

    def test_raw_moves_may_capture_king(self):
        """Raw generation in an illegal position still reports the king square."""
        board = Board(custom_setup={"e2": "hK", "e5": "cR", "d9": "cK"})
        assert Position(1, 4) in raw_moves(board, Position(4, 4), Side.CHO, PieceType.CHARIOT)


class TestCheckmate:
    """Test checkmate detection."""

    def test_two_chariot_mate(self):
        board = Board(custom_setup=MATE_SETUP)
        assert is_in_check(board, Side.HAN)
        assert not has_legal_moves(board, Side.HAN)
        assert is_checkmate(board, Side.HAN)

    def test_check_with_escape_is_not_mate(self):
        board = Board(custom_setup={"e2": "hK", "e5": "cR", "d9": "cK"})
        assert not is_checkmate(board, Side.HAN)

    def test_no_moves_without_check_is_not_mate(self):
        board = Board(custom_setup=STALEMATE_SETUP)
        assert not is_in_check(board, Side.HAN)
        assert not has_legal_moves(board, Side.HAN)
        assert not is_checkmate(board, Side.HAN)


class TestBikjang:
    """Test facing kings (빅장)."""

    def test_facing_kings(self):
        board = Board(custom_setup={"e2": "hK", "e9": "cK"})
        assert check_bikjang(board)

    def test_blocked_kings(self):
        board = Board(custom_setup={"e2": "hK", "e9": "cK", "e5": "cP"})
        assert not check_bikjang(board)

    def test_different_files(self):
        board = Board(custom_setup={"e2": "hK", "d9": "cK"})
        assert not check_bikjang(board)

    def test_initial_position(self):
        """Kings share the e file but soldiers stand between them."""
        assert not check_bikjang(Board())

    def test_missing_king(self):
        assert not check_bikjang(Board(custom_setup={"e2": "hK"}))


class TestMaterial:
    """Test display material count."""

    def test_initial_material(self):
        board = Board()
        assert count_material(board, Side.CHO) == 72
        assert count_material(board, Side.HAN) == 72

    def test_king_excluded(self):
        board = Board(custom_setup={"e2": "hK", "e9": "cK", "a1": "hR"})
        assert count_material(board, Side.HAN) == 13
        assert count_material(board, Side.CHO) == 0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
