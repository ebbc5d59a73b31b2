"""Game state machine: turns, passing, undo, resignation and game end."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from .board import Board, Formation, Move, MoveRecord, Piece, PieceType, move_notation
from .geometry import Position, Side, in_bounds
from .rules import (
    all_legal_moves,
    check_bikjang,
    is_checkmate,
    is_in_check,
    legal_moves,
)

logger = logging.getLogger(__name__)


class GameStatus(Enum):
    IN_PROGRESS = "in_progress"
    OVER = "over"


class GameOverReason(Enum):
    CHECKMATE = "checkmate"
    RESIGN = "resign"
    BIKJANG = "bikjang"


@dataclass(frozen=True)
class GameResult:
    """How the game ended. ``winner`` is None for a bikjang draw."""

    winner: Optional[Side]
    reason: GameOverReason

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {
            "winner": self.winner.value if self.winner else None,
            "reason": self.reason.value,
        }


@dataclass(frozen=True)
class GameSnapshot:
    """Minimal state needed to resume a game or hand it to the search engine."""

    board: Board
    turn: Side
    move_history: Tuple[MoveRecord, ...]


def _as_position(value: Sequence[int]) -> Position:
    return value if isinstance(value, Position) else Position(*value)


class JanggiGame:
    """Owns the live board, turn, undo history and captured pieces of one game."""

    def __init__(
        self,
        cho_formation: Optional[str] = None,
        han_formation: Optional[str] = None,
        board: Optional[Board] = None,
        turn: Side = Side.CHO,
    ):
        """Start a game.

        Args:
            cho_formation: Formation for CHO (see ``Formation``), default 마상상마
            han_formation: Formation for HAN
            board: Optional starting board (e.g. a custom setup); overrides formations
            turn: Side to move first
        """
        if board is None:
            board = Board(
                cho_formation=Formation.parse(cho_formation),
                han_formation=Formation.parse(han_formation),
            )
        self._board = board.copy()
        self._turn = turn
        self._board_history: List[Board] = [self._board]
        self._move_history: List[MoveRecord] = []
        self._captured: Dict[Side, List[Piece]] = {Side.CHO: [], Side.HAN: []}
        self._result: Optional[GameResult] = None

    # --- read-only projections ---

    @property
    def board(self) -> Board:
        return self._board

    @property
    def turn(self) -> Side:
        return self._turn

    @property
    def move_history(self) -> Tuple[MoveRecord, ...]:
        return tuple(self._move_history)

    @property
    def captured_pieces(self) -> Dict[Side, Tuple[Piece, ...]]:
        """Captured pieces, keyed by the side that lost them."""
        return {side: tuple(pieces) for side, pieces in self._captured.items()}

    @property
    def result(self) -> Optional[GameResult]:
        return self._result

    @property
    def status(self) -> GameStatus:
        return GameStatus.IN_PROGRESS if self._result is None else GameStatus.OVER

    @property
    def is_game_over(self) -> bool:
        return self._result is not None

    @property
    def can_undo(self) -> bool:
        return len(self._board_history) > 1

    @property
    def last_move(self) -> Optional[Move]:
        if not self._move_history:
            return None
        return self._move_history[-1].move

    def is_check(self) -> bool:
        return is_in_check(self._board, self._turn)

    def is_checkmate(self) -> bool:
        return is_checkmate(self._board, self._turn)

    def is_bikjang(self) -> bool:
        return check_bikjang(self._board)

    def legal_moves_for(self, pos: Sequence[int]) -> List[Position]:
        if self.is_game_over:
            return []
        return legal_moves(self._board, _as_position(pos), self._turn)

    def all_moves(self) -> List[Tuple[Position, Position]]:
        if self.is_game_over:
            return []
        return all_legal_moves(self._board, self._turn)

    # --- state transitions ---

    def make_move(self, from_pos: Sequence[int], to_pos: Sequence[int]) -> Optional[Move]:
        """Play a move for the side to move. Returns the Move, or None if rejected."""
        if self.is_game_over:
            return None
        from_pos, to_pos = _as_position(from_pos), _as_position(to_pos)
        if not (in_bounds(from_pos) and in_bounds(to_pos)):
            return None

        piece = self._board.get_piece(from_pos)
        if piece is None or piece.side is not self._turn:
            logger.debug("Rejected %s%s: no %s piece on origin", from_pos, to_pos, self._turn.value)
            return None
        if to_pos not in legal_moves(self._board, from_pos, self._turn):
            logger.debug("Rejected %s%s: not a legal destination", from_pos, to_pos)
            return None

        captured = self._board.get_piece(to_pos)
        self._board = self._board.apply_move(from_pos, to_pos)
        self._board_history.append(self._board)
        if captured is not None:
            self._captured[captured.side].append(captured)

        move = Move(from_pos, to_pos, piece, captured)
        self._move_history.append(MoveRecord(move, move_notation(move)))
        self._turn = self._turn.opponent
        self._check_game_end()
        return move

    def pass_turn(self) -> bool:
        """Pass (한수쉼). Not allowed while in check."""
        if self.is_game_over or self.is_check():
            return False

        king_pos = self._board.find_king(self._turn) or Position(0, 0)
        move = Move(king_pos, king_pos, Piece(self._turn, PieceType.KING), is_pass=True)
        self._move_history.append(MoveRecord(move, move_notation(move)))
        self._board_history.append(self._board.copy())
        self._board = self._board_history[-1]
        self._turn = self._turn.opponent
        self._check_game_end()
        return True

    def undo(self) -> bool:
        """Take back the last move or pass. Always returns the game to progress."""
        if not self.can_undo:
            return False

        last = self._move_history.pop()
        self._board_history.pop()
        self._board = self._board_history[-1]
        if last.captured is not None:
            self._captured[last.captured.side].pop()
        self._turn = self._turn.opponent
        self._result = None
        return True

    def resign(self, side: Side) -> None:
        self._result = GameResult(side.opponent, GameOverReason.RESIGN)
        logger.info("%s resigned", side.value)

    def _check_game_end(self) -> None:
        if is_checkmate(self._board, self._turn):
            self._result = GameResult(self._turn.opponent, GameOverReason.CHECKMATE)
        elif check_bikjang(self._board):
            self._result = GameResult(None, GameOverReason.BIKJANG)
        if self._result is not None:
            logger.info("Game over: %s", self._result.to_dict())

    # --- handoff ---

    def snapshot(self) -> GameSnapshot:
        return GameSnapshot(self._board.copy(), self._turn, tuple(self._move_history))

    @classmethod
    def from_snapshot(cls, snapshot: GameSnapshot) -> "JanggiGame":
        """Resume from a snapshot. Undo history starts at the snapshot board."""
        game = cls(board=snapshot.board, turn=snapshot.turn)
        game._move_history = list(snapshot.move_history)
        for record in game._move_history:
            if record.captured is not None:
                game._captured[record.captured.side].append(record.captured)
        return game
