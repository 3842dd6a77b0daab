"""Search node for tent placement."""

from __future__ import annotations

from typing import List, Optional

from ..core.constants import CellState
from ..core.exceptions import ImpossibleTentPositionError, NoTreeFoundError
from ..core.models import Coord
from ..utils.logger import get_logger
from ..utils.pretty import format_grid
from .grid import TentsGrid


LOGGER = get_logger(__name__)


class TentsCandidate:
    """A grid snapshot plus the coordinates of the most recently placed tent.

    The root candidate has no last tent. Children are built by cloning the
    parent grid and turning exactly one unknown cell into a tent, so sibling
    branches never share state.
    """

    __slots__ = ("grid", "last_tent")

    def __init__(self, grid: TentsGrid, last_tent: Optional[Coord] = None) -> None:
        self.grid = grid
        self.last_tent = last_tent

    @classmethod
    def with_tent(cls, parent: "TentsCandidate", row: int, col: int) -> "TentsCandidate":
        grid = parent.grid.copy()
        grid.set_cell(row, col, CellState.TENT)
        return cls(grid, (row, col))

    def successors(self) -> List["TentsCandidate"]:
        successors: List[TentsCandidate] = []
        open_trees = set(self.grid.open_trees())
        for slots in self.grid.candidate_tent_slots():
            # Trees matched under every pairing of the current tents are served.
            if (slots.row, slots.col) not in open_trees:
                continue
            for direction in slots.directions:
                try:
                    row, col = self.grid.tent_position_for(slots.row, slots.col, direction)
                except (NoTreeFoundError, ImpossibleTentPositionError) as exc:
                    LOGGER.warning("Skipping %s slot: %s", direction.value, exc)
                    continue
                if not self.grid.has_surrounding_tent(row, col):
                    successors.append(TentsCandidate.with_tent(self, row, col))
        return successors

    def is_locally_valid(self) -> bool:
        if self.last_tent is None:
            return self.grid.is_consistent()

        row, col = self.last_tent
        if self.grid.has_surrounding_tent(row, col):
            return False
        if len(self.grid.tents()) > self.grid.tree_count:
            return False
        row_clue = self.grid.row_clues[row]
        if row_clue is not None and self.grid.row_tent_count(row) > row_clue:
            return False
        col_clue = self.grid.col_clues[col]
        if col_clue is not None and self.grid.column_tent_count(col) > col_clue:
            return False
        return True

    def is_goal(self) -> bool:
        if not self.is_locally_valid():
            return False
        return self.grid.is_complete() and self.grid.tree_pairing() is not None

    def __str__(self) -> str:
        return format_grid(self.grid)
