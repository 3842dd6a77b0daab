"""Data models supporting the grid and the deduction rules."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from .constants import Direction, LineKind

Clue = Optional[int]
Coord = Tuple[int, int]


@dataclass(frozen=True)
class Line:
    """A row or column together with its clue."""

    kind: LineKind
    index: int
    clue: Clue
    cells: Tuple[Coord, ...]


@dataclass(frozen=True)
class TreeSlots:
    """Open tent slots around one tree, recomputed from the grid on demand."""

    row: int
    col: int
    directions: Tuple[Direction, ...]
