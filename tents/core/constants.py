"""Shared constants and enumerations for the tents-and-trees solver."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple


class CellState(str, Enum):
    """All supported cell states in the grid."""

    UNKNOWN = "UNKNOWN"
    EMPTY = "EMPTY"
    TENT = "TENT"
    TREE = "TREE"

    @classmethod
    def from_symbol(cls, symbol: str) -> "CellState":
        """Map a single puzzle-file token to a cell state."""

        try:
            return _SYMBOL_STATES[symbol.strip().lower()]
        except KeyError:
            raise ValueError(f"Unknown cell symbol: {symbol!r}") from None


_SYMBOL_STATES: Dict[str, CellState] = {
    ".": CellState.UNKNOWN,
    "_": CellState.UNKNOWN,
    "u": CellState.UNKNOWN,
    "t": CellState.TREE,
    "x": CellState.TENT,
    "e": CellState.EMPTY,
}


class Direction(str, Enum):
    """Orthogonal directions, declared in successor tie-break order."""

    WEST = "WEST"
    NORTH = "NORTH"
    EAST = "EAST"
    SOUTH = "SOUTH"

    @property
    def step(self) -> Tuple[int, int]:
        return DIRECTION_STEPS[self]


class LineKind(str, Enum):
    """A clue line is either a row or a column."""

    ROW = "ROW"
    COLUMN = "COLUMN"


class ParseErrorKind(str, Enum):
    """Reasons a puzzle definition can be rejected."""

    EMPTY_FILE = "EMPTY_FILE"
    EMPTY_COLUMN_CLUES = "EMPTY_COLUMN_CLUES"
    MISSING_ROW_CLUES = "MISSING_ROW_CLUES"
    EMPTY_ROW_CLUES = "EMPTY_ROW_CLUES"
    INVALID_CLUE_LENGTH = "INVALID_CLUE_LENGTH"
    INVALID_ROW_LENGTH = "INVALID_ROW_LENGTH"
    INVALID_BOARD_LENGTH = "INVALID_BOARD_LENGTH"
    INVALID_FORMAT = "INVALID_FORMAT"


DIRECTION_STEPS: Dict[Direction, Tuple[int, int]] = {
    Direction.WEST: (0, -1),
    Direction.NORTH: (-1, 0),
    Direction.EAST: (0, 1),
    Direction.SOUTH: (1, 0),
}

ORTHOGONAL_STEPS: Tuple[Tuple[int, int], ...] = tuple(DIRECTION_STEPS[d] for d in Direction)
SURROUNDING_STEPS: Tuple[Tuple[int, int], ...] = (
    (-1, -1), (-1, 0), (-1, 1),
    (0, -1), (0, 1),
    (1, -1), (1, 0), (1, 1),
)


@dataclass(frozen=True)
class Bounds:
    """Simple rectangle bounds helper."""

    rows: int
    cols: int

    def contains(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols
