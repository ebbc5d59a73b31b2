"""Static evaluation: material, piece-square tables and a few king terms."""

import numpy as np

from .board import Board, PieceType
from .geometry import ROWS, Position, Side
from .rules import check_bikjang, is_checkmate, is_in_check


MATE_SCORE = 99999
CHECK_BONUS = 50
KING_CENTER_BONUS = 20

MATERIAL_VALUES = {
    PieceType.KING: 20000,
    PieceType.CHARIOT: 1300,
    PieceType.CANNON: 700,
    PieceType.HORSE: 500,
    PieceType.ELEPHANT: 300,
    PieceType.ADVISOR: 300,
    PieceType.SOLDIER: 200,
}

# Piece-square tables, 10 rows x 9 cols, from Cho's side of the board
# (row 0 is Han's back rank). Han reads the row-mirrored cell.
PIECE_SQUARE_TABLES = {
    PieceType.KING: np.array([
        [0, 0, 0, 0, 0, 0, 0, 0, 0],
        [0, 0, 0, 0, 0, 0, 0, 0, 0],
        [0, 0, 0, 0, 0, 0, 0, 0, 0],
        [0, 0, 0, 0, 0, 0, 0, 0, 0],
        [0, 0, 0, 0, 0, 0, 0, 0, 0],
        [0, 0, 0, 0, 0, 0, 0, 0, 0],
        [0, 0, 0, 0, 0, 0, 0, 0, 0],
        [0, 0, 0, -5, -5, -5, 0, 0, 0],
        [0, 0, 0, -5, 10, -5, 0, 0, 0],
        [0, 0, 0, 0, -5, 0, 0, 0, 0],
    ]),
    PieceType.ADVISOR: np.array([
        [0, 0, 0, 0, 0, 0, 0, 0, 0],
        [0, 0, 0, 0, 0, 0, 0, 0, 0],
        [0, 0, 0, 0, 0, 0, 0, 0, 0],
        [0, 0, 0, 0, 0, 0, 0, 0, 0],
        [0, 0, 0, 0, 0, 0, 0, 0, 0],
        [0, 0, 0, 0, 0, 0, 0, 0, 0],
        [0, 0, 0, 0, 0, 0, 0, 0, 0],
        [0, 0, 0, 5, 0, 5, 0, 0, 0],
        [0, 0, 0, 0, 10, 0, 0, 0, 0],
        [0, 0, 0, 5, 0, 5, 0, 0, 0],
    ]),
    PieceType.ELEPHANT: np.array([
        [0, 0, 0, 0, 0, 0, 0, 0, 0],
        [0, 0, 0, 0, 0, 0, 0, 0, 0],
        [0, 0, 0, 0, 0, 0, 0, 0, 0],
        [0, 0, 5, 0, 0, 0, 5, 0, 0],
        [0, 0, 0, 0, 0, 0, 0, 0, 0],
        [0, 0, 0, 0, 0, 0, 0, 0, 0],
        [0, 0, 10, 0, 0, 0, 10, 0, 0],
        [0, 0, 0, 0, 0, 0, 0, 0, 0],
        [0, 0, 0, 0, 0, 0, 0, 0, 0],
        [0, 5, 0, 0, 0, 0, 0, 5, 0],
    ]),
    PieceType.HORSE: np.array([
        [0, 0, 0, 0, 0, 0, 0, 0, 0],
        [0, 5, 0, 5, 0, 5, 0, 5, 0],
        [0, 0, 10, 0, 10, 0, 10, 0, 0],
        [5, 0, 10, 15, 10, 15, 10, 0, 5],
        [0, 10, 15, 15, 15, 15, 15, 10, 0],
        [0, 10, 15, 15, 15, 15, 15, 10, 0],
        [5, 0, 10, 15, 10, 15, 10, 0, 5],
        [0, 0, 10, 0, 0, 0, 10, 0, 0],
        [0, 5, 0, 0, 0, 0, 0, 5, 0],
        [0, 0, 0, 0, 0, 0, 0, 0, 0],
    ]),
    PieceType.CHARIOT: np.array([
        [5, 10, 10, 10, 15, 10, 10, 10, 5],
        [5, 10, 10, 10, 15, 10, 10, 10, 5],
        [5, 10, 10, 10, 15, 10, 10, 10, 5],
        [5, 10, 10, 10, 15, 10, 10, 10, 5],
        [5, 10, 10, 15, 20, 15, 10, 10, 5],
        [5, 10, 10, 15, 20, 15, 10, 10, 5],
        [5, 10, 10, 10, 15, 10, 10, 10, 5],
        [0, 5, 5, 5, 10, 5, 5, 5, 0],
        [0, 0, 0, 0, 0, 0, 0, 0, 0],
        [5, 0, 5, 0, 10, 0, 5, 0, 5],
    ]),
    PieceType.CANNON: np.array([
        [0, 5, 0, 10, 15, 10, 0, 5, 0],
        [5, 10, 10, 5, 10, 5, 10, 10, 5],
        [0, 5, 0, 5, 0, 5, 0, 5, 0],
        [0, 0, 5, 0, 10, 0, 5, 0, 0],
        [5, 5, 10, 10, 15, 10, 10, 5, 5],
        [5, 5, 10, 10, 15, 10, 10, 5, 5],
        [0, 0, 5, 0, 10, 0, 5, 0, 0],
        [0, 0, 0, 0, 0, 0, 0, 0, 0],
        [0, 0, 0, 0, 0, 0, 0, 0, 0],
        [0, 0, 0, 0, 0, 0, 0, 0, 0],
    ]),
    # Soldiers are pushed forward and into the enemy palace
    PieceType.SOLDIER: np.array([
        [0, 0, 0, 20, 25, 20, 0, 0, 0],
        [0, 0, 0, 20, 25, 20, 0, 0, 0],
        [0, 0, 0, 15, 20, 15, 0, 0, 0],
        [5, 0, 10, 10, 15, 10, 10, 0, 5],
        [10, 0, 15, 15, 20, 15, 15, 0, 10],
        [10, 0, 15, 15, 20, 15, 15, 0, 10],
        [5, 0, 10, 10, 10, 10, 10, 0, 5],
        [0, 0, 0, 0, 0, 0, 0, 0, 0],
        [0, 0, 0, 0, 0, 0, 0, 0, 0],
        [0, 0, 0, 0, 0, 0, 0, 0, 0],
    ]),
}

PALACE_CENTERS = {Side.CHO: Position(8, 4), Side.HAN: Position(1, 4)}


def pst_value(piece_type: PieceType, side: Side, row: int, col: int) -> int:
    """Positional bonus for a piece; Han's value comes from the mirrored row."""
    table = PIECE_SQUARE_TABLES[piece_type]
    if side is Side.HAN:
        row = ROWS - 1 - row
    return int(table[row, col])


def evaluate(board: Board, side_to_move: Side) -> int:
    """Evaluate the position from Cho's perspective (positive favors Cho)."""
    sign = 1 if side_to_move is Side.CHO else -1
    if is_checkmate(board, side_to_move):
        return -sign * MATE_SCORE
    if is_checkmate(board, side_to_move.opponent):
        return sign * MATE_SCORE
    if check_bikjang(board):
        return 0

    score = 0
    for pos, piece in board.pieces():
        value = MATERIAL_VALUES[piece.piece_type] + pst_value(
            piece.piece_type, piece.side, pos.row, pos.col
        )
        score += value if piece.side is Side.CHO else -value

    if is_in_check(board, Side.HAN):
        score += CHECK_BONUS
    if is_in_check(board, Side.CHO):
        score -= CHECK_BONUS

    for side, center in PALACE_CENTERS.items():
        if board.find_king(side) == center:
            score += KING_CENTER_BONUS if side is Side.CHO else -KING_CENTER_BONUS

    return score
