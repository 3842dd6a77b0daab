import io
import unittest

from tents.engine.deduction import DeductionReport
from tents.engine.grid import TentsGrid
from tents.engine.solver import SearchEngine, SolveResult
from tents.utils.pretty import format_grid, pretty_print_grid, print_solve_summary


class FormatGridTests(unittest.TestCase):
    def test_matches_board_dump_layout(self) -> None:
        grid = TentsGrid.from_strings(
            ["..T..T.", "...T..."],
            [2, 1],
            [1, 3, 0, 0, 2, 1, 2],
        )
        self.assertEqual(
            format_grid(grid).splitlines(),
            [
                " | 1 3 0 0 2 1 2 ",
                "----------------",
                "2|     T     T   ",
                "1|       T       ",
            ],
        )

    def test_renders_missing_clues_and_states(self) -> None:
        grid = TentsGrid.from_strings(["TXE"], [None], [None, 1, None])
        self.assertEqual(format_grid(grid), " | - 1 - \n--------\n-| T X E ")

    def test_pretty_print_with_label(self) -> None:
        stream = io.StringIO()
        grid = TentsGrid.from_strings(["TX"], [1], [None, 1])
        pretty_print_grid(grid, label="Board", stream=stream)
        self.assertEqual(stream.getvalue().splitlines()[0], "Board")


class SolveSummaryTests(unittest.TestCase):
    def test_reports_missing_solution(self) -> None:
        stream = io.StringIO()
        result = SolveResult(
            grid=None,
            engine=SearchEngine.BACKTRACKING,
            deduction=DeductionReport(passes=2, unknown_before=5, unknown_after=3,
                                      rule_hits={"zero_clue": 1}),
        )
        print_solve_summary(result, stream=stream)
        output = stream.getvalue()
        self.assertTrue(output.startswith("No solution\n"))
        self.assertIn("--- Deduction ---", output)
        self.assertIn("Resolved:      2/5 unknown cells", output)
        self.assertIn("zero_clue:", output)
        self.assertIn("Engine:        backtracking", output)

    def test_reports_exhausted_budget(self) -> None:
        stream = io.StringIO()
        result = SolveResult(
            grid=None,
            engine=SearchEngine.BACKTRACKING,
            deduction=DeductionReport(),
            budget_exhausted=True,
        )
        print_solve_summary(result, stream=stream)
        self.assertIn("search budget exhausted", stream.getvalue())


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
