"""Unit tests for the game state machine."""

import pytest
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from janggi import (
    Board,
    GameOverReason,
    GameStatus,
    JanggiGame,
    Piece,
    PieceType,
    Position,
    Side,
)


def game_from(setup, turn=Side.CHO):
    return JanggiGame(board=Board(custom_setup=setup), turn=turn)


class TestNewGame:
    """Test the initial game state."""

    def test_initial_state(self):
        game = JanggiGame()
        assert game.turn is Side.CHO
        assert game.status is GameStatus.IN_PROGRESS
        assert not game.is_game_over
        assert game.result is None
        assert game.move_history == ()
        assert not game.can_undo
        assert game.last_move is None
        assert game.captured_pieces == {Side.CHO: (), Side.HAN: ()}

    def test_formations(self):
        game = JanggiGame(cho_formation="상마마상", han_formation="마상마상")
        assert game.board.get_piece(Position(9, 1)).piece_type is PieceType.ELEPHANT
        assert game.board.get_piece(Position(0, 1)).piece_type is PieceType.HORSE
        assert game.board.get_piece(Position(0, 2)).piece_type is PieceType.ELEPHANT

    def test_board_is_copied(self):
        board = Board(custom_setup={"e2": "hK", "d9": "cK"})
        game = JanggiGame(board=board)
        board.place(Position(4, 4), Piece(Side.CHO, PieceType.CHARIOT))
        assert game.board.get_piece(Position(4, 4)) is None


class TestMakeMove:
    """Test making moves."""

    def test_legal_move(self):
        game = JanggiGame()
        move = game.make_move((6, 2), (5, 2))
        assert move is not None
        assert move.piece == Piece(Side.CHO, PieceType.SOLDIER)
        assert game.turn is Side.HAN
        assert game.board.get_piece(Position(5, 2)).piece_type is PieceType.SOLDIER
        assert game.board.get_piece(Position(6, 2)) is None
        assert len(game.move_history) == 1
        assert game.move_history[0].notation == "초졸 c7→c6"
        assert game.last_move == move
        assert game.can_undo

    def test_illegal_move_rejected(self):
        game = JanggiGame()
        before = game.board
        assert game.make_move((9, 0), (5, 0)) is None  # blocked by own soldier
        assert game.board == before
        assert game.turn is Side.CHO
        assert game.move_history == ()

    def test_wrong_side_rejected(self):
        game = JanggiGame()
        assert game.make_move((3, 0), (4, 0)) is None

    def test_empty_origin_rejected(self):
        game = JanggiGame()
        assert game.make_move((4, 4), (3, 4)) is None

    def test_out_of_bounds_rejected(self):
        game = JanggiGame()
        assert game.make_move((10, 0), (9, 0)) is None
        assert game.make_move((6, 0), (6, -1)) is None

    def test_capture_recorded(self):
        game = game_from({"e2": "hK", "d9": "cK", "d5": "cR", "d3": "hP"})
        move = game.make_move((4, 3), (2, 3))
        assert move.captured == Piece(Side.HAN, PieceType.SOLDIER)
        assert game.captured_pieces[Side.HAN] == (Piece(Side.HAN, PieceType.SOLDIER),)
        assert game.captured_pieces[Side.CHO] == ()
        assert "(한병 잡음)" in game.move_history[-1].notation

    def test_published_board_not_mutated(self):
        game = JanggiGame()
        board = game.board
        game.make_move((6, 2), (5, 2))
        assert board.get_piece(Position(6, 2)) is not None
        assert game.board is not board

    def test_legal_moves_for(self):
        game = JanggiGame()
        assert set(game.legal_moves_for((9, 0))) == {Position(8, 0), Position(7, 0)}
        assert game.legal_moves_for((0, 0)) == []  # Han piece, Cho to move


class TestGameEnd:
    """Test checkmate, bikjang and resignation."""

    def test_checkmate_ends_game(self):
        game = game_from({"e1": "hK", "a5": "cR", "i2": "cR", "d9": "cK"})
        game.make_move((4, 0), (0, 0))
        assert game.is_game_over
        assert game.status is GameStatus.OVER
        assert game.result.winner is Side.CHO
        assert game.result.reason is GameOverReason.CHECKMATE
        assert game.is_checkmate()
        assert game.is_check()

    def test_no_moves_after_game_over(self):
        game = game_from({"e1": "hK", "a5": "cR", "i2": "cR", "d9": "cK"})
        game.make_move((4, 0), (0, 0))
        assert game.make_move((0, 4), (1, 4)) is None
        assert game.all_moves() == []
        assert game.legal_moves_for((0, 4)) == []
        assert not game.pass_turn()

    def test_bikjang_is_draw(self):
        game = game_from({"e2": "hK", "d9": "cK"})
        game.make_move((8, 3), (8, 4))
        assert game.is_bikjang()
        assert game.result.winner is None
        assert game.result.reason is GameOverReason.BIKJANG
        assert game.result.to_dict() == {"winner": None, "reason": "bikjang"}

    def test_resign(self):
        game = JanggiGame()
        game.resign(Side.CHO)
        assert game.result.winner is Side.HAN
        assert game.result.reason is GameOverReason.RESIGN
        assert game.make_move((6, 2), (5, 2)) is None


class TestPass:
    """Test passing (한수쉼)."""

    def test_pass(self):
        game = JanggiGame()
        board = game.board
        assert game.pass_turn()
        assert game.turn is Side.HAN
        assert game.board == board
        assert game.last_move.is_pass
        assert game.move_history[-1].notation == "초 패스"
        assert game.can_undo

    def test_pass_rejected_in_check(self):
        game = game_from({"e2": "hK", "e5": "cR", "d9": "cK"}, turn=Side.HAN)
        assert game.is_check()
        assert not game.pass_turn()
        assert game.turn is Side.HAN
        assert game.move_history == ()

    def test_pass_when_no_moves(self):
        game = game_from({"d1": "hK", "e3": "cR", "i2": "cR", "f10": "cK"}, turn=Side.HAN)
        assert game.all_moves() == []
        assert not game.is_game_over
        assert game.pass_turn()
        assert game.turn is Side.CHO


class TestUndo:
    """Test taking moves back."""

    def test_undo_empty(self):
        game = JanggiGame()
        assert not game.undo()

    def test_undo_restores_state(self):
        game = JanggiGame()
        start = game.board
        game.make_move((6, 2), (5, 2))
        assert game.undo()
        assert game.board == start
        assert game.turn is Side.CHO
        assert game.move_history == ()
        assert not game.can_undo

    def test_undo_capture(self):
        game = game_from({"e2": "hK", "d9": "cK", "d5": "cR", "d3": "hP"})
        game.make_move((4, 3), (2, 3))
        assert game.undo()
        assert game.captured_pieces[Side.HAN] == ()
        assert game.board.get_piece(Position(2, 3)) == Piece(Side.HAN, PieceType.SOLDIER)

    def test_undo_pass(self):
        game = JanggiGame()
        game.pass_turn()
        assert game.undo()
        assert game.turn is Side.CHO
        assert game.move_history == ()

    def test_undo_clears_result(self):
        game = game_from({"e1": "hK", "a5": "cR", "i2": "cR", "d9": "cK"})
        game.make_move((4, 0), (0, 0))
        assert game.is_game_over
        assert game.undo()
        assert not game.is_game_over
        assert game.turn is Side.CHO

    def test_undo_sequence(self):
        game = JanggiGame()
        start = game.board
        game.make_move((6, 2), (5, 2))
        game.make_move((3, 2), (4, 2))
        game.make_move((6, 6), (5, 6))
        assert game.undo() and game.undo() and game.undo()
        assert game.board == start
        assert not game.undo()


class TestSnapshot:
    """Test value handoff of game state."""

    def test_snapshot_is_independent(self):
        game = JanggiGame()
        snapshot = game.snapshot()
        game.make_move((6, 2), (5, 2))
        assert snapshot.turn is Side.CHO
        assert snapshot.board.get_piece(Position(6, 2)) is not None
        assert snapshot.move_history == ()

    def test_from_snapshot(self):
        game = game_from({"e2": "hK", "d9": "cK", "d5": "cR", "d3": "hP"})
        game.make_move((4, 3), (2, 3))
        restored = JanggiGame.from_snapshot(game.snapshot())
        assert restored.board == game.board
        assert restored.turn is game.turn
        assert restored.move_history == game.move_history
        assert restored.captured_pieces == game.captured_pieces
        # History before the snapshot is not replayable
        assert not restored.can_undo


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
