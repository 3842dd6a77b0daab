import unittest

from tents.core.constants import CellState, Direction, LineKind
from tents.core.exceptions import (
    ImpossibleTentPositionError,
    InvalidCellUpdateError,
    NoTreeFoundError,
    ShapeError,
)
from tents.engine.grid import TentsGrid


class GridConstructionTests(unittest.TestCase):
    def test_rejects_ragged_rows(self) -> None:
        with self.assertRaises(ShapeError):
            TentsGrid.from_strings(["...", ".."], [None, None], [None, None, None])

    def test_rejects_clue_length_mismatch(self) -> None:
        with self.assertRaises(ShapeError):
            TentsGrid.from_strings(["..", ".."], [None], [None, None])
        with self.assertRaises(ShapeError):
            TentsGrid.from_strings(["..", ".."], [None, None], [None, None, None])

    def test_rejects_negative_clue(self) -> None:
        with self.assertRaises(ShapeError):
            TentsGrid.from_strings(["..", ".."], [-1, None], [None, None])

    def test_rejects_empty_grid(self) -> None:
        with self.assertRaises(ShapeError):
            TentsGrid([], [], [])

    def test_counts_trees(self) -> None:
        grid = TentsGrid.from_strings(["T..", "..T"], [None, None], [None, None, None])
        self.assertEqual(grid.tree_count, 2)
        self.assertEqual(grid.trees(), [(0, 0), (1, 2)])


class GridCellTests(unittest.TestCase):
    def setUp(self) -> None:
        self.grid = TentsGrid.from_strings(
            ["T..", "...", "..T"], [None, None, None], [1, None, 1]
        )

    def test_cell_at_rejects_out_of_bounds(self) -> None:
        self.assertEqual(self.grid.cell_at(0, 0), CellState.TREE)
        with self.assertRaises(IndexError):
            self.grid.cell_at(-1, 0)
        with self.assertRaises(IndexError):
            self.grid.cell_at(0, 3)

    def test_set_cell_refuses_to_touch_trees(self) -> None:
        with self.assertRaises(InvalidCellUpdateError):
            self.grid.set_cell(0, 0, CellState.TENT)
        with self.assertRaises(InvalidCellUpdateError):
            self.grid.set_cell(1, 1, CellState.TREE)

    def test_place_tent_clears_unknown_surroundings(self) -> None:
        self.grid.place_tent(1, 0)
        self.assertEqual(self.grid.cell_at(1, 0), CellState.TENT)
        for coord in [(0, 1), (1, 1), (2, 0), (2, 1)]:
            self.assertEqual(self.grid.cell_at(*coord), CellState.EMPTY)
        self.assertEqual(self.grid.cell_at(0, 0), CellState.TREE)
        self.assertEqual(self.grid.cell_at(1, 2), CellState.UNKNOWN)

    def test_copy_is_independent(self) -> None:
        clone = self.grid.copy()
        clone.set_cell(1, 1, CellState.TENT)
        self.assertEqual(self.grid.cell_at(1, 1), CellState.UNKNOWN)
        self.assertNotEqual(clone, self.grid)

    def test_resolve_unknowns_counts_changes(self) -> None:
        self.assertEqual(self.grid.resolve_unknowns(), 7)
        self.assertEqual(self.grid.unknown_count(), 0)


class GridQueryTests(unittest.TestCase):
    def test_lines_are_rows_then_columns(self) -> None:
        grid = TentsGrid.from_strings(["..", "..", ".."], [0, 1, None], [2, None])
        lines = grid.lines()
        self.assertEqual([line.kind for line in lines], [LineKind.ROW] * 3 + [LineKind.COLUMN] * 2)
        self.assertEqual([line.clue for line in lines], [0, 1, None, 2, None])
        self.assertEqual(lines[3].cells, ((0, 0), (1, 0), (2, 0)))

    def test_line_rejects_bad_index(self) -> None:
        grid = TentsGrid.from_strings(["..", ".."], [None, None], [None, None])
        with self.assertRaises(IndexError):
            grid.line(LineKind.COLUMN, 2)

    def test_tent_counts(self) -> None:
        grid = TentsGrid.from_strings(["X.X", "T.T"], [None, None], [None, None, None])
        self.assertEqual(grid.row_tent_count(0), 2)
        self.assertEqual(grid.row_tent_count(1), 0)
        self.assertEqual(grid.column_tent_count(2), 1)

    def test_adjacency_is_orthogonal_only(self) -> None:
        grid = TentsGrid.from_strings(["T..", "...", "..X"], [None] * 3, [None] * 3)
        self.assertTrue(grid.has_adjacent_tree(0, 1))
        self.assertFalse(grid.has_adjacent_tree(1, 1))
        self.assertTrue(grid.has_adjacent_tent(1, 2))
        self.assertFalse(grid.has_adjacent_tent(1, 1))
        self.assertTrue(grid.has_surrounding_tent(1, 1))

    def test_candidate_slots_follow_direction_order(self) -> None:
        grid = TentsGrid.from_strings(["T..", ".T.", "..."], [None] * 3, [None] * 3)
        slots = grid.candidate_tent_slots()
        self.assertEqual([(s.row, s.col) for s in slots], [(0, 0), (1, 1)])
        self.assertEqual(slots[0].directions, (Direction.EAST, Direction.SOUTH))
        self.assertEqual(
            slots[1].directions,
            (Direction.WEST, Direction.NORTH, Direction.EAST, Direction.SOUTH),
        )

    def test_tent_position_for(self) -> None:
        grid = TentsGrid.from_strings(["T..", "...", "..."], [None] * 3, [None] * 3)
        self.assertEqual(grid.tent_position_for(0, 0, Direction.SOUTH), (1, 0))
        with self.assertRaises(ImpossibleTentPositionError):
            grid.tent_position_for(0, 0, Direction.WEST)
        with self.assertRaises(NoTreeFoundError) as ctx:
            grid.tent_position_for(1, 1, Direction.EAST)
        self.assertEqual((ctx.exception.row, ctx.exception.col), (1, 1))


class GridGoalTests(unittest.TestCase):
    def test_is_complete_only_compares_clues(self) -> None:
        grid = TentsGrid.from_strings(["TX.", "..."], [1, None], [None, 1, None])
        self.assertTrue(grid.is_complete())
        self.assertEqual(grid.unknown_count(), 4)

    def test_is_consistent_detects_touching_tents(self) -> None:
        grid = TentsGrid.from_strings(["TX.", "..X", "..T"], [None] * 3, [None] * 3)
        self.assertFalse(grid.is_consistent())

    def test_is_consistent_detects_overfull_lines(self) -> None:
        grid = TentsGrid.from_strings(["TX.X", "...T"], [1, None], [None] * 4)
        self.assertFalse(grid.is_consistent())

    def test_tree_pairing_requires_one_tent_per_tree(self) -> None:
        grid = TentsGrid.from_strings(["TXT", "..."], [None, None], [None] * 3)
        self.assertIsNone(grid.tree_pairing())

    def test_tree_pairing_reassigns_shared_tents(self) -> None:
        grid = TentsGrid.from_strings(["TXT", "..X"], [None, None], [None] * 3)
        self.assertEqual(grid.tree_pairing(), {(0, 0): (0, 1), (0, 2): (1, 2)})

    def test_tree_matching_is_maximum_not_perfect(self) -> None:
        grid = TentsGrid.from_strings(["TXT", "..."], [None, None], [None] * 3)
        self.assertEqual(grid.tree_matching(), {(0, 0): (0, 1)})

    def test_open_trees_follow_alternating_paths(self) -> None:
        # The shared tent goes to (0,0) first, yet either tree may own it.
        grid = TentsGrid.from_strings(["T.", "XT"], [None, None], [None, None])
        self.assertEqual(grid.open_trees(), [(0, 0), (1, 1)])

    def test_open_trees_skip_trees_served_in_every_pairing(self) -> None:
        grid = TentsGrid.from_strings(["TX.", "..T"], [None, None], [None] * 3)
        self.assertEqual(grid.open_trees(), [(1, 2)])

    def test_to_jsonable(self) -> None:
        grid = TentsGrid.from_strings(["TX"], [1], [None, 1])
        self.assertEqual(
            grid.to_jsonable(),
            {
                "rows": 1,
                "cols": 2,
                "row_clues": [1],
                "col_clues": [None, 1],
                "cells": [["TREE", "TENT"]],
            },
        )


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
