"""Janggi board representation, pieces, formations and move records."""

from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple
from dataclasses import dataclass

from .geometry import COLS, ROWS, Position, Side, in_bounds


class PieceType(Enum):
    """Piece types."""

    KING = "KING"
    ADVISOR = "ADVISOR"
    ELEPHANT = "ELEPHANT"
    HORSE = "HORSE"
    CHARIOT = "CHARIOT"
    CANNON = "CANNON"
    SOLDIER = "SOLDIER"


# Letters used by custom setups and FEN-like strings
PIECE_CODES: Dict[str, PieceType] = {
    "K": PieceType.KING,
    "A": PieceType.ADVISOR,
    "E": PieceType.ELEPHANT,
    "H": PieceType.HORSE,
    "R": PieceType.CHARIOT,
    "C": PieceType.CANNON,
    "P": PieceType.SOLDIER,
}
PIECE_LETTERS: Dict[PieceType, str] = {kind: code for code, kind in PIECE_CODES.items()}

SIDE_NAMES = {Side.CHO: "초", Side.HAN: "한"}


@dataclass(frozen=True)
class Piece:
    """A piece on the board."""

    side: Side
    piece_type: PieceType

    def __str__(self) -> str:
        return f"{self.side.value}_{self.piece_type.value}"

    @property
    def code(self) -> str:
        """Two-letter code, e.g. "cR" for a Cho chariot."""
        return ("c" if self.side is Side.CHO else "h") + PIECE_LETTERS[self.piece_type]

    @property
    def korean_name(self) -> str:
        if self.piece_type is PieceType.SOLDIER:
            return "졸" if self.side is Side.CHO else "병"
        return KOREAN_NAMES[self.piece_type]


KOREAN_NAMES = {
    PieceType.KING: "왕",
    PieceType.ADVISOR: "사",
    PieceType.ELEPHANT: "상",
    PieceType.HORSE: "마",
    PieceType.CHARIOT: "차",
    PieceType.CANNON: "포",
    PieceType.SOLDIER: "졸",
}


class Formation(Enum):
    """Back-rank elephant/horse arrangements, read left to right on cols b, c, g, h."""

    INNER = "마상상마"
    OUTER = "상마마상"
    LEFT = "상마상마"
    RIGHT = "마상마상"

    @classmethod
    def _lookup(cls, value: str) -> Optional["Formation"]:
        for formation in cls:
            if value in (formation.value, formation.name.lower()):
                return formation
        return None

    @classmethod
    def from_name(cls, value: str) -> "Formation":
        """Strict lookup by Korean name or English alias."""
        formation = cls._lookup(value)
        if formation is None:
            raise ValueError(f"Unknown formation: {value}")
        return formation

    @classmethod
    def parse(cls, value: Optional[str]) -> "Formation":
        """Accept a Korean name or an English alias; default to 마상상마 if unknown."""
        if isinstance(value, Formation):
            return value
        return (cls._lookup(value) if value else None) or cls.INNER

    @property
    def back_rank(self) -> Tuple[PieceType, PieceType, PieceType, PieceType]:
        """Piece types for cols b, c, g, h."""
        return tuple(
            PieceType.ELEPHANT if ch == "상" else PieceType.HORSE for ch in self.value
        )


FORMATION_COLS = (1, 2, 6, 7)


class Board:
    """A 10x9 Janggi board.

    Boards are treated as values: ``apply_move`` returns a new board and
    leaves the original untouched. ``place`` is only meant for building a
    position before it is handed out.
    """

    ROWS = ROWS
    COLS = COLS

    def __init__(
        self,
        custom_setup: Optional[Dict[str, str]] = None,
        cho_formation: Optional[str] = None,
        han_formation: Optional[str] = None,
    ):
        """Initialize a board.

        Args:
            custom_setup: Optional dictionary mapping squares (e.g., "a1") to piece
                codes (e.g., "hR" for a Han chariot). Kinds are K, A, E, H, R, C, P.
            cho_formation: Formation for CHO ("마상상마", "상마마상", "상마상마", "마상마상"
                or inner/outer/left/right). Ignored with a custom setup.
            han_formation: Formation for HAN, same values.
        """
        self.grid: List[List[Optional[Piece]]] = [
            [None for _ in range(self.COLS)] for _ in range(self.ROWS)
        ]
        if custom_setup is not None:
            self._initialize_custom_position(custom_setup)
        else:
            self._initialize_formations(
                Formation.parse(cho_formation), Formation.parse(han_formation)
            )

    def _initialize_formations(self, cho_formation: Formation, han_formation: Formation):
        """Set up the starting position for the two chosen formations."""
        for side, back_row, formation in (
            (Side.HAN, 0, han_formation),
            (Side.CHO, 9, cho_formation),
        ):
            inward = 1 if side is Side.HAN else -1
            for col in (0, 8):
                self.grid[back_row][col] = Piece(side, PieceType.CHARIOT)
            for col in (3, 5):
                self.grid[back_row][col] = Piece(side, PieceType.ADVISOR)
            for col, kind in zip(FORMATION_COLS, formation.back_rank):
                self.grid[back_row][col] = Piece(side, kind)

            self.grid[back_row + inward][4] = Piece(side, PieceType.KING)
            for col in (1, 7):
                self.grid[back_row + 2 * inward][col] = Piece(side, PieceType.CANNON)
            for col in range(0, self.COLS, 2):
                self.grid[back_row + 3 * inward][col] = Piece(side, PieceType.SOLDIER)

    def _initialize_custom_position(self, custom_setup: Dict[str, str]):
        """Place pieces from a square -> code mapping, skipping malformed entries."""
        for square, piece_code in custom_setup.items():
            try:
                pos = Position.from_square(square)
            except ValueError:
                continue
            if len(piece_code) != 2 or piece_code[0] not in "ch":
                continue
            kind = PIECE_CODES.get(piece_code[1])
            if kind is None:
                continue
            side = Side.CHO if piece_code[0] == "c" else Side.HAN
            self.grid[pos.row][pos.col] = Piece(side, kind)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self.grid == other.grid

    def __repr__(self) -> str:
        return f"Board({self.to_fen()!r})"

    def copy(self) -> "Board":
        board = Board.__new__(Board)
        board.grid = [row[:] for row in self.grid]
        return board

    def get_piece(self, pos: Position) -> Optional[Piece]:
        """Piece at the position, or None when empty or off the board."""
        if in_bounds(pos):
            return self.grid[pos.row][pos.col]
        return None

    def place(self, pos: Position, piece: Optional[Piece]) -> None:
        self.grid[pos.row][pos.col] = piece

    def apply_move(self, from_pos: Position, to_pos: Position) -> "Board":
        """Return a new board with the piece moved (capturing whatever is on to_pos)."""
        board = self.copy()
        board.grid[to_pos.row][to_pos.col] = board.grid[from_pos.row][from_pos.col]
        board.grid[from_pos.row][from_pos.col] = None
        return board

    def pieces(self, side: Optional[Side] = None) -> Iterator[Tuple[Position, Piece]]:
        """Iterate pieces in row-major order, optionally for one side only."""
        for row in range(self.ROWS):
            for col in range(self.COLS):
                piece = self.grid[row][col]
                if piece is not None and (side is None or piece.side is side):
                    yield Position(row, col), piece

    def find_king(self, side: Side) -> Optional[Position]:
        for pos, piece in self.pieces(side):
            if piece.piece_type is PieceType.KING:
                return pos
        return None

    def to_setup(self) -> Dict[str, str]:
        """Inverse of custom_setup."""
        return {pos.to_square(): piece.code for pos, piece in self.pieces()}

    def to_fen(self) -> str:
        """FEN-like string, Han's back rank first, two-letter piece codes."""
        fen_parts = []
        for row in self.grid:
            rank_str = ""
            empty_count = 0
            for piece in row:
                if piece is None:
                    empty_count += 1
                    continue
                if empty_count > 0:
                    rank_str += str(empty_count)
                    empty_count = 0
                rank_str += piece.code
            if empty_count > 0:
                rank_str += str(empty_count)
            fen_parts.append(rank_str)
        return "/".join(fen_parts)


@dataclass(frozen=True)
class Move:
    """A move or a pass. Passes keep from_pos == to_pos on the king's square."""

    from_pos: Position
    to_pos: Position
    piece: Piece
    captured: Optional[Piece] = None
    is_pass: bool = False

    def __str__(self) -> str:
        if self.is_pass:
            return "pass"
        return f"{self.from_pos.to_square()}{self.to_pos.to_square()}"


@dataclass(frozen=True)
class MoveRecord:
    """A played move with its display notation."""

    move: Move
    notation: str

    @property
    def captured(self) -> Optional[Piece]:
        return self.move.captured

    @property
    def is_pass(self) -> bool:
        return self.move.is_pass

    def to_dict(self, move_number: int) -> Dict[str, object]:
        move = self.move
        return {
            "move_number": move_number,
            "side": SIDE_NAMES[move.piece.side],
            "piece": move.piece.korean_name,
            "from": move.from_pos.to_square(),
            "to": move.to_pos.to_square(),
            "notation": self.notation,
            "captured": move.captured is not None,
            "is_pass": move.is_pass,
        }


def move_notation(move: Move) -> str:
    """Human-readable notation, e.g. "초차 a10→a6" or "한포 b3→b10 (초차 잡음)"."""
    side_name = SIDE_NAMES[move.piece.side]
    if move.is_pass:
        return f"{side_name} 패스"
    captured_info = ""
    if move.captured is not None:
        captured_info = f" ({SIDE_NAMES[move.captured.side]}{move.captured.korean_name} 잡음)"
    return (
        f"{side_name}{move.piece.korean_name} "
        f"{move.from_pos.to_square()}→{move.to_pos.to_square()}{captured_info}"
    )
