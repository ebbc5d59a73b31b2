"""Attack detection, legal move filtering and terminal conditions."""

from typing import List, Tuple

from .board import Board, PieceType
from .geometry import Position, Side
from .pieces import raw_moves


def is_attacked(board: Board, pos: Position, by_side: Side) -> bool:
    """Check if any piece of ``by_side`` has ``pos`` among its raw moves."""
    for piece_pos, piece in board.pieces(by_side):
        if pos in raw_moves(board, piece_pos, by_side, piece.piece_type):
            return True
    return False


def is_in_check(board: Board, side: Side) -> bool:
    """Check if the given side's king is attacked. A side without a king is never in check."""
    king_pos = board.find_king(side)
    if king_pos is None:
        return False
    return is_attacked(board, king_pos, side.opponent)


def legal_moves(board: Board, pos: Position, side: Side) -> List[Position]:
    """Destinations for the piece on ``pos`` that do not leave ``side`` in check."""
    piece = board.get_piece(pos)
    if piece is None or piece.side is not side:
        return []
    return [
        target
        for target in raw_moves(board, pos, side, piece.piece_type)
        if not is_in_check(board.apply_move(pos, target), side)
    ]


def all_legal_moves(board: Board, side: Side) -> List[Tuple[Position, Position]]:
    """All (from, to) pairs for a side, in row-major piece order."""
    moves = []
    for pos, _ in board.pieces(side):
        for target in legal_moves(board, pos, side):
            moves.append((pos, target))
    return moves


def has_legal_moves(board: Board, side: Side) -> bool:
    for pos, _ in board.pieces(side):
        if legal_moves(board, pos, side):
            return True
    return False


def is_checkmate(board: Board, side: Side) -> bool:
    """In check with no legal moves."""
    if not is_in_check(board, side):
        return False
    return not has_legal_moves(board, side)


def check_bikjang(board: Board) -> bool:
    """Both kings on the same column with nothing between them (빅장, a draw)."""
    cho_king = board.find_king(Side.CHO)
    han_king = board.find_king(Side.HAN)
    if cho_king is None or han_king is None:
        return False
    if cho_king.col != han_king.col:
        return False

    low, high = sorted((cho_king.row, han_king.row))
    for row in range(low + 1, high):
        if board.get_piece(Position(row, cho_king.col)) is not None:
            return False
    return True


MATERIAL_POINTS = {
    PieceType.KING: 0,
    PieceType.CHARIOT: 13,
    PieceType.CANNON: 7,
    PieceType.HORSE: 5,
    PieceType.ELEPHANT: 3,
    PieceType.ADVISOR: 3,
    PieceType.SOLDIER: 2,
}


def count_material(board: Board, side: Side) -> int:
    """Material points for score display (king excluded)."""
    return sum(MATERIAL_POINTS[piece.piece_type] for _, piece in board.pieces(side))
