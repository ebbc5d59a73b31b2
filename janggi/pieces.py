"""Raw move generation for each piece type.

Generators are pure functions of (board, position, side). They return
candidate destinations without checking whether the mover's own king is
left in check; ``rules.legal_moves`` filters those out.
"""

from typing import Iterator, List

from .board import Board, PieceType
from .geometry import (
    Position,
    Side,
    in_any_palace,
    in_bounds,
    in_palace,
    palace_diagonals,
)


ORTHOGONAL = [(-1, 0), (1, 0), (0, -1), (0, 1)]

# Orthogonal first step -> the two diagonal continuations leading away from the start
OUTWARD_DIAGONALS = {
    (-1, 0): [(-1, -1), (-1, 1)],  # up
    (1, 0): [(1, -1), (1, 1)],     # down
    (0, -1): [(-1, -1), (1, -1)],  # left
    (0, 1): [(-1, 1), (1, 1)],     # right
}


def _can_land(board: Board, pos: Position, side: Side) -> bool:
    """Empty or holding an enemy piece."""
    piece = board.get_piece(pos)
    return piece is None or piece.side is not side


def _ray(pos: Position, dr: int, dc: int) -> Iterator[Position]:
    """Positions along a straight line until the board edge."""
    current = pos.offset(dr, dc)
    while in_bounds(current):
        yield current
        current = current.offset(dr, dc)


def _palace_ray(pos: Position, first: Position) -> Iterator[Position]:
    """Positions along a palace diagonal starting with ``first``, never turning back."""
    dr, dc = first.row - pos.row, first.col - pos.col
    current, step = pos, first
    while step in palace_diagonals(current):
        yield step
        current, step = step, step.offset(dr, dc)


def _palace_rays(pos: Position) -> List[Iterator[Position]]:
    if not in_any_palace(pos):
        return []
    return [_palace_ray(pos, first) for first in palace_diagonals(pos)]


def _slide(board: Board, side: Side, ray: Iterator[Position], moves: List[Position]) -> None:
    """Chariot-style slide: empty squares, then the first piece if it is an enemy."""
    for target in ray:
        piece = board.get_piece(target)
        if piece is not None:
            if piece.side is not side:
                moves.append(target)
            return
        moves.append(target)


def _jump(board: Board, side: Side, ray: Iterator[Position], moves: List[Position]) -> None:
    """Cannon-style jump over exactly one non-cannon mount."""
    mount_found = False
    for target in ray:
        piece = board.get_piece(target)
        if not mount_found:
            if piece is not None:
                if piece.piece_type is PieceType.CANNON:
                    return
                mount_found = True
            continue
        if piece is not None:
            if piece.piece_type is not PieceType.CANNON and piece.side is not side:
                moves.append(target)
            return
        moves.append(target)


def _palace_steps(board: Board, pos: Position, side: Side) -> List[Position]:
    """One orthogonal or palace-diagonal step that stays inside the own palace."""
    moves = []
    targets = [pos.offset(dr, dc) for dr, dc in ORTHOGONAL]
    targets.extend(palace_diagonals(pos))
    for target in targets:
        if in_palace(target, side) and _can_land(board, target, side):
            moves.append(target)
    return moves


def king_moves(board: Board, pos: Position, side: Side) -> List[Position]:
    """King moves: one step orthogonally or along a palace diagonal, inside the palace."""
    return _palace_steps(board, pos, side)


def advisor_moves(board: Board, pos: Position, side: Side) -> List[Position]:
    """Advisor moves: same envelope as the king."""
    return _palace_steps(board, pos, side)


def elephant_moves(board: Board, pos: Position, side: Side) -> List[Position]:
    """Elephant moves: 1 orthogonal + 2 diagonal steps outward, both midpoints empty."""
    moves = []
    for (dr, dc), diagonals in OUTWARD_DIAGONALS.items():
        first = pos.offset(dr, dc)
        if not in_bounds(first) or board.get_piece(first) is not None:
            continue
        for ddr, ddc in diagonals:
            second = first.offset(ddr, ddc)
            if not in_bounds(second) or board.get_piece(second) is not None:
                continue
            target = second.offset(ddr, ddc)
            if in_bounds(target) and _can_land(board, target, side):
                moves.append(target)
    return moves


def horse_moves(board: Board, pos: Position, side: Side) -> List[Position]:
    """Horse moves: 1 orthogonal + 1 diagonal outward; only the first step can block."""
    moves = []
    for (dr, dc), diagonals in OUTWARD_DIAGONALS.items():
        first = pos.offset(dr, dc)
        if not in_bounds(first) or board.get_piece(first) is not None:
            continue
        for ddr, ddc in diagonals:
            target = first.offset(ddr, ddc)
            if in_bounds(target) and _can_land(board, target, side):
                moves.append(target)
    return moves


def chariot_moves(board: Board, pos: Position, side: Side) -> List[Position]:
    """Chariot moves: orthogonal slides, plus palace-diagonal slides inside a palace."""
    moves: List[Position] = []
    for dr, dc in ORTHOGONAL:
        _slide(board, side, _ray(pos, dr, dc), moves)
    for ray in _palace_rays(pos):
        _slide(board, side, ray, moves)
    return moves


def cannon_moves(board: Board, pos: Position, side: Side) -> List[Position]:
    """Cannon moves.

    Cannon rules:
    - Must jump over exactly one non-Cannon piece (mount)
    - Lands on any empty square past the mount
    - Captures the first enemy piece past the mount, unless it is a Cannon
    - Can jump along palace diagonals while inside a palace
    """
    moves: List[Position] = []
    for dr, dc in ORTHOGONAL:
        _jump(board, side, _ray(pos, dr, dc), moves)
    for ray in _palace_rays(pos):
        _jump(board, side, ray, moves)
    return moves


def soldier_moves(board: Board, pos: Position, side: Side) -> List[Position]:
    """Soldier moves: forward or sideways; forward diagonals inside the enemy palace."""
    moves = []
    forward = side.forward
    for target in (pos.offset(forward, 0), pos.offset(0, -1), pos.offset(0, 1)):
        if in_bounds(target) and _can_land(board, target, side):
            moves.append(target)

    if in_palace(pos, side.opponent):
        for target in palace_diagonals(pos):
            if target.row - pos.row != forward:
                continue
            if _can_land(board, target, side) and target not in moves:
                moves.append(target)
    return moves


def raw_moves(board: Board, pos: Position, side: Side, piece_type: PieceType) -> List[Position]:
    """Candidate destinations for a piece, before check filtering."""
    if piece_type is PieceType.KING:
        return king_moves(board, pos, side)
    elif piece_type is PieceType.ADVISOR:
        return advisor_moves(board, pos, side)
    elif piece_type is PieceType.ELEPHANT:
        return elephant_moves(board, pos, side)
    elif piece_type is PieceType.HORSE:
        return horse_moves(board, pos, side)
    elif piece_type is PieceType.CHARIOT:
        return chariot_moves(board, pos, side)
    elif piece_type is PieceType.CANNON:
        return cannon_moves(board, pos, side)
    elif piece_type is PieceType.SOLDIER:
        return soldier_moves(board, pos, side)
    return []
