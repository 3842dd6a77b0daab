import unittest
from typing import List, Tuple

from tents.core.exceptions import SearchBudgetExceeded
from tents.engine.search import SearchStats, solve


class QueensCandidate:
    """Places one queen per row, left to right."""

    def __init__(self, size: int, columns: Tuple[int, ...] = ()) -> None:
        self.size = size
        self.columns = columns

    def successors(self) -> List["QueensCandidate"]:
        if len(self.columns) == self.size:
            return []
        return [QueensCandidate(self.size, self.columns + (col,)) for col in range(self.size)]

    def is_locally_valid(self) -> bool:
        if not self.columns:
            return True
        row, col = len(self.columns) - 1, self.columns[-1]
        for other_row, other_col in enumerate(self.columns[:-1]):
            if other_col == col or abs(other_col - col) == row - other_row:
                return False
        return True

    def is_goal(self) -> bool:
        return len(self.columns) == self.size and self.is_locally_valid()


class SolveTests(unittest.TestCase):
    def test_returns_first_goal_in_successor_order(self) -> None:
        found = solve(QueensCandidate(4))
        self.assertIsNotNone(found)
        assert found is not None
        self.assertEqual(found.columns, (1, 3, 0, 2))

    def test_returns_none_when_space_is_exhausted(self) -> None:
        stats = SearchStats()
        self.assertIsNone(solve(QueensCandidate(3), stats=stats))
        self.assertGreater(stats.nodes_pruned, 0)
        self.assertGreater(stats.backtracks, 0)

    def test_goal_is_tested_before_expansion(self) -> None:
        stats = SearchStats()
        root = QueensCandidate(1, (0,))
        self.assertIs(solve(root, stats=stats), root)
        self.assertEqual(stats.nodes_visited, 1)

    def test_budget_is_enforced(self) -> None:
        with self.assertRaises(SearchBudgetExceeded):
            solve(QueensCandidate(4), max_nodes=3)

    def test_stats_track_depth(self) -> None:
        stats = SearchStats()
        solve(QueensCandidate(5), stats=stats)
        self.assertEqual(stats.max_depth, 5)

    def test_deep_trees_do_not_recurse(self) -> None:
        class Chain:
            def __init__(self, depth: int) -> None:
                self.depth = depth

            def successors(self) -> List["Chain"]:
                return [Chain(self.depth + 1)]

            def is_locally_valid(self) -> bool:
                return True

            def is_goal(self) -> bool:
                return self.depth == 5000

        found = solve(Chain(0))
        self.assertIsNotNone(found)
        assert found is not None
        self.assertEqual(found.depth, 5000)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
