"""Janggi AI engine with minimax search."""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .board import Board, MoveRecord, PieceType
from .evaluate import MATE_SCORE, MATERIAL_VALUES, evaluate
from .geometry import Position, Side
from .rules import all_legal_moves, check_bikjang, is_checkmate

logger = logging.getLogger(__name__)

# The maximizing side; scores are always from Cho's point of view
REFERENCE_SIDE = Side.CHO

CHARIOT_MOVE_BONUS = 30
CANNON_MOVE_BONUS = 20


@dataclass(frozen=True)
class SearchResult:
    """A chosen move, or a pass when the side to move has no legal moves."""

    from_pos: Optional[Position]
    to_pos: Optional[Position]
    is_pass: bool = False
    score: Optional[int] = None

    @classmethod
    def pass_move(cls) -> "SearchResult":
        return cls(None, None, is_pass=True)


class Engine:
    """Depth-limited minimax with alpha-beta pruning."""

    def __init__(self, depth: int = 3, use_pruning: bool = True):
        """Initialize engine.

        Args:
            depth: Search depth in plies
            use_pruning: Whether to cut branches with alpha-beta (disable only to
                cross-check results against plain minimax)
        """
        self.depth = depth
        self.use_pruning = use_pruning
        self.nodes_searched = 0

    def search(
        self,
        board: Board,
        side: Side,
        history: Sequence[MoveRecord] = (),
    ) -> SearchResult:
        """Search for the best move for ``side`` on ``board``."""
        self.nodes_searched = 0

        moves = all_legal_moves(board, side)
        if not moves:
            logger.debug("%s has no legal moves, passing", side.value)
            return SearchResult.pass_move()

        maximizing = side is REFERENCE_SIDE
        best_move: Optional[Tuple[Position, Position]] = None
        best_value = 0

        # Each root move gets a full window so its value is exact
        for from_pos, to_pos in self.order_moves(board, moves):
            value = self._minimax(
                board.apply_move(from_pos, to_pos),
                side.opponent,
                self.depth - 1,
                float("-inf"),
                float("inf"),
                not maximizing,
            )
            if best_move is None or (value > best_value if maximizing else value < best_value):
                best_value = value
                best_move = (from_pos, to_pos)

        logger.info(
            "Search at ply %d: %s plays %s%s (score %s, %d nodes)",
            len(history),
            side.value,
            best_move[0],
            best_move[1],
            best_value,
            self.nodes_searched,
        )
        return SearchResult(best_move[0], best_move[1], score=best_value)

    def order_moves(
        self, board: Board, moves: List[Tuple[Position, Position]]
    ) -> List[Tuple[Position, Position]]:
        """Order moves for better alpha-beta pruning (strong captures first).

        Sorting is stable, so equally scored moves keep generation order.
        """
        return sorted(moves, key=lambda move: -self._move_order_score(board, move))

    @staticmethod
    def _move_order_score(board: Board, move: Tuple[Position, Position]) -> int:
        attacker = board.get_piece(move[0])
        victim = board.get_piece(move[1])
        score = 0
        if attacker is None:
            return score
        if victim is not None:
            score += MATERIAL_VALUES[victim.piece_type] * 10 - MATERIAL_VALUES[attacker.piece_type]
        if attacker.piece_type is PieceType.CHARIOT:
            score += CHARIOT_MOVE_BONUS
        elif attacker.piece_type is PieceType.CANNON:
            score += CANNON_MOVE_BONUS
        return score

    def _minimax(
        self,
        board: Board,
        side: Side,
        depth: int,
        alpha: float,
        beta: float,
        maximizing: bool,
    ) -> float:
        """Minimax algorithm with alpha-beta pruning."""
        self.nodes_searched += 1
        # Mates closer to the root score higher for the mating side
        ply = self.depth - depth

        if depth <= 0:
            score = evaluate(board, side)
            if score >= MATE_SCORE:
                return MATE_SCORE - ply
            if score <= -MATE_SCORE:
                return -MATE_SCORE + ply
            return score

        if is_checkmate(board, side):
            return -MATE_SCORE + ply if maximizing else MATE_SCORE - ply
        if check_bikjang(board):
            return 0

        moves = all_legal_moves(board, side)
        if not moves:
            # Forced pass: same board, other side, one ply used
            return self._minimax(board, side.opponent, depth - 1, alpha, beta, not maximizing)

        if maximizing:
            max_eval = float("-inf")
            for from_pos, to_pos in self.order_moves(board, moves):
                eval_score = self._minimax(
                    board.apply_move(from_pos, to_pos), side.opponent, depth - 1, alpha, beta, False
                )
                max_eval = max(max_eval, eval_score)
                alpha = max(alpha, eval_score)
                if self.use_pruning and beta <= alpha:
                    break
            return max_eval
        else:
            min_eval = float("inf")
            for from_pos, to_pos in self.order_moves(board, moves):
                eval_score = self._minimax(
                    board.apply_move(from_pos, to_pos), side.opponent, depth - 1, alpha, beta, True
                )
                min_eval = min(min_eval, eval_score)
                beta = min(beta, eval_score)
                if self.use_pruning and beta <= alpha:
                    break
            return min_eval


def find_best_move(
    board: Board,
    side: Side,
    depth: int,
    history: Sequence[MoveRecord] = (),
) -> SearchResult:
    """Pick a move for ``side`` with a fresh engine of the given depth."""
    return Engine(depth=depth).search(board, side, history)
