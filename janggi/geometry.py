"""Board coordinates, palaces and the palace diagonal graph."""

from enum import Enum
from typing import Dict, List, NamedTuple, Tuple


ROWS = 10
COLS = 9
FILES = "abcdefghi"


class Side(Enum):
    """Player sides."""

    CHO = "CHO"  # Bottom side, moves first
    HAN = "HAN"  # Top side

    @property
    def opponent(self) -> "Side":
        return Side.HAN if self is Side.CHO else Side.CHO

    @property
    def forward(self) -> int:
        """Row step that moves a soldier of this side toward the enemy palace."""
        return -1 if self is Side.CHO else 1


class Position(NamedTuple):
    """An intersection on the board. Row 0 is Han's back rank."""

    row: int
    col: int

    def __str__(self) -> str:
        return self.to_square()

    def offset(self, dr: int, dc: int) -> "Position":
        return Position(self.row + dr, self.col + dc)

    def to_square(self) -> str:
        """Square notation, e.g. (0, 0) -> "a1", (8, 4) -> "e9"."""
        return f"{FILES[self.col]}{self.row + 1}"

    @classmethod
    def from_square(cls, square: str) -> "Position":
        """Parse square notation. Raises ValueError when malformed or off-board."""
        if len(square) < 2 or square[0] not in FILES:
            raise ValueError(f"Invalid square: {square!r}")
        pos = cls(int(square[1:]) - 1, FILES.index(square[0]))
        if not in_bounds(pos):
            raise ValueError(f"Square off the board: {square!r}")
        return pos


# (min_row, max_row) per side; both palaces span cols 3-5
PALACE_ROWS: Dict[Side, Tuple[int, int]] = {
    Side.HAN: (0, 2),
    Side.CHO: (7, 9),
}
PALACE_COLS = (3, 5)


def in_bounds(pos: Position) -> bool:
    return 0 <= pos.row < ROWS and 0 <= pos.col < COLS


def in_palace(pos: Position, side: Side) -> bool:
    """Check if a position is inside the palace of the given side."""
    min_row, max_row = PALACE_ROWS[side]
    return min_row <= pos.row <= max_row and PALACE_COLS[0] <= pos.col <= PALACE_COLS[1]


def in_any_palace(pos: Position) -> bool:
    return in_palace(pos, Side.HAN) or in_palace(pos, Side.CHO)


def _build_palace_diagonals() -> Dict[Position, Tuple[Position, ...]]:
    """Connect each palace center with its four corners, both ways."""
    graph: Dict[Position, List[Position]] = {}
    for side in (Side.HAN, Side.CHO):
        top, bottom = PALACE_ROWS[side]
        left, right = PALACE_COLS
        center = Position(top + 1, left + 1)
        for corner in (
            Position(top, left),
            Position(top, right),
            Position(bottom, left),
            Position(bottom, right),
        ):
            graph.setdefault(corner, []).append(center)
            graph.setdefault(center, []).append(corner)
    return {pos: tuple(neighbors) for pos, neighbors in graph.items()}


PALACE_DIAGONALS: Dict[Position, Tuple[Position, ...]] = _build_palace_diagonals()


def palace_diagonals(pos: Position) -> Tuple[Position, ...]:
    """Positions one diagonal step away along a palace line (empty off the lines)."""
    return PALACE_DIAGONALS.get(pos, ())
