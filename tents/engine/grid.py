"""Grid representation and helper utilities."""

from __future__ import annotations

import copy
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Set, Tuple

from ..core.constants import (
    Bounds,
    CellState,
    Direction,
    LineKind,
    ORTHOGONAL_STEPS,
    SURROUNDING_STEPS,
)
from ..core.exceptions import (
    ImpossibleTentPositionError,
    InvalidCellUpdateError,
    NoTreeFoundError,
    ShapeError,
)
from ..core.models import Clue, Coord, Line, TreeSlots
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)


class TentsGrid:
    """Encapsulates the puzzle state with query and mutation helpers."""

    def __init__(
        self,
        cells: Sequence[Sequence[CellState]],
        row_clues: Sequence[Clue],
        col_clues: Sequence[Clue],
    ) -> None:
        if not cells or not cells[0]:
            raise ShapeError("Grid must contain at least one row and one column")
        rows, cols = len(cells), len(cells[0])
        for index, row in enumerate(cells):
            if len(row) != cols:
                raise ShapeError(f"Row {index} has {len(row)} cells, expected {cols}")
        if len(row_clues) != rows:
            raise ShapeError(f"Expected {rows} row clues, got {len(row_clues)}")
        if len(col_clues) != cols:
            raise ShapeError(f"Expected {cols} column clues, got {len(col_clues)}")
        for clue in (*row_clues, *col_clues):
            if clue is not None and clue < 0:
                raise ShapeError(f"Clues must be non-negative, got {clue}")

        self.bounds = Bounds(rows=rows, cols=cols)
        self.cells: List[List[CellState]] = [[CellState(state) for state in row] for row in cells]
        self.row_clues: Tuple[Clue, ...] = tuple(row_clues)
        self.col_clues: Tuple[Clue, ...] = tuple(col_clues)
        self.tree_count = sum(
            1 for row in self.cells for state in row if state == CellState.TREE
        )

    @classmethod
    def from_strings(
        cls,
        rows: Sequence[str],
        row_clues: Sequence[Clue],
        col_clues: Sequence[Clue],
    ) -> "TentsGrid":
        """Build a grid from compact row strings such as ``"T.x"``."""

        cells = [[CellState.from_symbol(symbol) for symbol in row] for row in rows]
        return cls(cells, row_clues, col_clues)

    # ------------------------------------------------------------------
    # Copy-on-branch
    # ------------------------------------------------------------------
    def copy(self) -> "TentsGrid":
        clone = copy.copy(self)
        clone.cells = [list(row) for row in self.cells]
        return clone

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TentsGrid):
            return NotImplemented
        return (
            self.cells == other.cells
            and self.row_clues == other.row_clues
            and self.col_clues == other.col_clues
        )

    def __repr__(self) -> str:
        return (
            f"TentsGrid({self.bounds.rows}x{self.bounds.cols}, "
            f"trees={self.tree_count}, tents={len(self.tents())})"
        )

    # ------------------------------------------------------------------
    # Cell access
    # ------------------------------------------------------------------
    def _check_bounds(self, row: int, col: int) -> None:
        if not self.bounds.contains(row, col):
            raise IndexError(
                f"Cell ({row},{col}) outside {self.bounds.rows}x{self.bounds.cols} grid"
            )

    def cell_at(self, row: int, col: int) -> CellState:
        self._check_bounds(row, col)
        return self.cells[row][col]

    def set_cell(self, row: int, col: int, state: CellState) -> None:
        """Overwrite a single cell. Trees can neither be created nor removed."""

        self._check_bounds(row, col)
        current = self.cells[row][col]
        if (current == CellState.TREE) != (state == CellState.TREE):
            raise InvalidCellUpdateError(
                f"Cannot change ({row},{col}) from {current.value} to {state.value}"
            )
        self.cells[row][col] = state

    def place_tent(self, row: int, col: int) -> None:
        """Place a tent and rule out every unknown cell touching it."""

        self.set_cell(row, col, CellState.TENT)
        for nr, nc in self.surrounding(row, col):
            if self.cells[nr][nc] == CellState.UNKNOWN:
                self.cells[nr][nc] = CellState.EMPTY

    def resolve_unknowns(self) -> int:
        """Mark every remaining unknown cell empty and return how many changed."""

        resolved = 0
        for row in self.cells:
            for index, state in enumerate(row):
                if state == CellState.UNKNOWN:
                    row[index] = CellState.EMPTY
                    resolved += 1
        if resolved:
            LOGGER.debug("Resolved %d leftover unknown cells to empty", resolved)
        return resolved

    # ------------------------------------------------------------------
    # Lines
    # ------------------------------------------------------------------
    def line(self, kind: LineKind, index: int) -> Line:
        if kind == LineKind.ROW:
            if not 0 <= index < self.bounds.rows:
                raise IndexError(f"Row {index} outside grid")
            cells = tuple((index, c) for c in range(self.bounds.cols))
            return Line(kind=kind, index=index, clue=self.row_clues[index], cells=cells)
        if not 0 <= index < self.bounds.cols:
            raise IndexError(f"Column {index} outside grid")
        cells = tuple((r, index) for r in range(self.bounds.rows))
        return Line(kind=kind, index=index, clue=self.col_clues[index], cells=cells)

    def lines(self) -> List[Line]:
        """All rows top to bottom, then all columns left to right."""

        rows = [self.line(LineKind.ROW, r) for r in range(self.bounds.rows)]
        cols = [self.line(LineKind.COLUMN, c) for c in range(self.bounds.cols)]
        return rows + cols

    def count_states(self, line: Line, *states: CellState) -> int:
        return sum(1 for row, col in line.cells if self.cells[row][col] in states)

    def row_tent_count(self, row: int) -> int:
        return self.count_states(self.line(LineKind.ROW, row), CellState.TENT)

    def column_tent_count(self, col: int) -> int:
        return self.count_states(self.line(LineKind.COLUMN, col), CellState.TENT)

    # ------------------------------------------------------------------
    # Neighbourhoods
    # ------------------------------------------------------------------
    def orthogonal_neighbors(self, row: int, col: int) -> Iterator[Tuple[Direction, Coord]]:
        """Yield in-bounds orthogonal neighbours in West, North, East, South order."""

        for direction in Direction:
            dr, dc = direction.step
            nr, nc = row + dr, col + dc
            if self.bounds.contains(nr, nc):
                yield direction, (nr, nc)

    def surrounding(self, row: int, col: int) -> Iterator[Coord]:
        """Yield the in-bounds cells of the 3x3 block around a cell, excluding it."""

        for dr, dc in SURROUNDING_STEPS:
            nr, nc = row + dr, col + dc
            if self.bounds.contains(nr, nc):
                yield nr, nc

    def _has_orthogonal(self, row: int, col: int, state: CellState) -> bool:
        self._check_bounds(row, col)
        for dr, dc in ORTHOGONAL_STEPS:
            nr, nc = row + dr, col + dc
            if self.bounds.contains(nr, nc) and self.cells[nr][nc] == state:
                return True
        return False

    def has_adjacent_tent(self, row: int, col: int) -> bool:
        return self._has_orthogonal(row, col, CellState.TENT)

    def has_adjacent_tree(self, row: int, col: int) -> bool:
        return self._has_orthogonal(row, col, CellState.TREE)

    def has_surrounding_tent(self, row: int, col: int) -> bool:
        self._check_bounds(row, col)
        return any(self.cells[nr][nc] == CellState.TENT for nr, nc in self.surrounding(row, col))

    # ------------------------------------------------------------------
    # Trees and tents
    # ------------------------------------------------------------------
    def _coords_with(self, state: CellState) -> List[Coord]:
        return [
            (r, c)
            for r in range(self.bounds.rows)
            for c in range(self.bounds.cols)
            if self.cells[r][c] == state
        ]

    def trees(self) -> List[Coord]:
        return self._coords_with(CellState.TREE)

    def tents(self) -> List[Coord]:
        return self._coords_with(CellState.TENT)

    def unknown_count(self) -> int:
        return sum(1 for row in self.cells for state in row if state == CellState.UNKNOWN)

    def tree_slots(self, row: int, col: int) -> TreeSlots:
        if self.cell_at(row, col) != CellState.TREE:
            raise NoTreeFoundError(row, col)
        directions = tuple(
            direction
            for direction, (nr, nc) in self.orthogonal_neighbors(row, col)
            if self.cells[nr][nc] == CellState.UNKNOWN
        )
        return TreeSlots(row=row, col=col, directions=directions)

    def candidate_tent_slots(self) -> List[TreeSlots]:
        """One entry per tree, scanned row-major."""

        return [self.tree_slots(r, c) for r, c in self.trees()]

    def tent_position_for(self, tree_row: int, tree_col: int, direction: Direction) -> Coord:
        if self.cell_at(tree_row, tree_col) != CellState.TREE:
            raise NoTreeFoundError(tree_row, tree_col)
        dr, dc = direction.step
        row, col = tree_row + dr, tree_col + dc
        if not self.bounds.contains(row, col):
            raise ImpossibleTentPositionError(tree_row, tree_col)
        return row, col

    # ------------------------------------------------------------------
    # Goal checks
    # ------------------------------------------------------------------
    def is_complete(self) -> bool:
        """Every specified clue matches its line's tent count.

        Unknown cells are not inspected, so a complete grid is not necessarily
        fully determined.
        """

        for line in self.lines():
            if line.clue is not None and self.count_states(line, CellState.TENT) != line.clue:
                return False
        return True

    def is_consistent(self) -> bool:
        """No two tents touch and no line holds more tents than its clue."""

        for row, col in self.tents():
            if self.has_surrounding_tent(row, col):
                return False
        for line in self.lines():
            if line.clue is not None and self.count_states(line, CellState.TENT) > line.clue:
                return False
        return True

    def tree_matching(self) -> Dict[Coord, Coord]:
        """Maximum matching of trees to orthogonally adjacent tents (tree -> tent).

        Trees are claimed in row-major order with augmenting paths, so an
        earlier tree gives up its tent when it has another one to move to.
        """

        tents: Set[Coord] = set(self.tents())
        owner: Dict[Coord, Coord] = {}

        def _claim(tree: Coord, seen: Set[Coord]) -> bool:
            for _, tent in self.orthogonal_neighbors(*tree):
                if tent not in tents or tent in seen:
                    continue
                seen.add(tent)
                if tent not in owner or _claim(owner[tent], seen):
                    owner[tent] = tree
                    return True
            return False

        for tree in self.trees():
            _claim(tree, set())
        return {tree: tent for tent, tree in owner.items()}

    def tree_pairing(self) -> Optional[Dict[Coord, Coord]]:
        """Match every tree with its own orthogonally adjacent tent.

        Returns the tree -> tent mapping, or ``None`` when tents and trees
        cannot be paired one to one.
        """

        if len(self.tents()) != self.tree_count:
            return None
        matching = self.tree_matching()
        if len(matching) != self.tree_count:
            return None
        return matching

    def open_trees(self) -> List[Coord]:
        """Trees that some maximum matching leaves without a tent, row-major.

        A tree missing from this list is matched in every maximum matching, so
        the tents already placed serve it whichever way they end up paired.
        """

        matching = self.tree_matching()
        owner = {tent: tree for tree, tent in matching.items()}
        trees = self.trees()
        frontier = [tree for tree in trees if tree not in matching]
        reached: Set[Coord] = set(frontier)
        while frontier:
            tree = frontier.pop()
            for _, cell in self.orthogonal_neighbors(*tree):
                partner = owner.get(cell)
                if partner is not None and partner not in reached:
                    reached.add(partner)
                    frontier.append(partner)
        return [tree for tree in trees if tree in reached]

    def is_solved(self) -> bool:
        return self.is_consistent() and self.is_complete() and self.tree_pairing() is not None

    # ------------------------------------------------------------------
    # Serialization helpers
    # ------------------------------------------------------------------
    def to_jsonable(self) -> dict:
        return {
            "rows": self.bounds.rows,
            "cols": self.bounds.cols,
            "row_clues": list(self.row_clues),
            "col_clues": list(self.col_clues),
            "cells": [[state.value for state in row] for row in self.cells],
        }

    def states(self) -> Iterable[Tuple[Coord, CellState]]:
        for r, row in enumerate(self.cells):
            for c, state in enumerate(row):
                yield (r, c), state
