"""Pretty-print helpers for tents-and-trees grids."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

from ..core.constants import CellState
from ..core.models import Clue

if TYPE_CHECKING:
    from ..engine.grid import TentsGrid
    from ..engine.solver import SolveResult


SYMBOLS = {
    CellState.EMPTY: "E",
    CellState.TENT: "X",
    CellState.TREE: "T",
    CellState.UNKNOWN: " ",
}


def clue_symbol(clue: Clue) -> str:
    return "-" if clue is None else str(clue)


def format_grid(grid: TentsGrid) -> str:
    header = " | " + "".join(f"{clue_symbol(clue)} " for clue in grid.col_clues)
    lines = [header, "--" * (grid.bounds.cols + 1)]
    for r, row in enumerate(grid.cells):
        row_render = "".join(f"{SYMBOLS[state]} " for state in row)
        lines.append(f"{clue_symbol(grid.row_clues[r])}| {row_render}")
    return "\n".join(lines)


def pretty_print_grid(grid: TentsGrid, *, label: str | None = None, stream=None) -> None:
    """Print the grid in a human-friendly format."""

    stream = stream or sys.stdout
    if label:
        print(label, file=stream)
    print(format_grid(grid), file=stream)


def print_solve_summary(result: SolveResult, *, stream=None) -> None:
    """Print the solved grid (if any) followed by deduction and search stats."""

    stream = stream or sys.stdout
    if result.grid is not None:
        print(format_grid(result.grid), file=stream)
    elif result.budget_exhausted:
        print("No solution found: search budget exhausted", file=stream)
    else:
        print("No solution", file=stream)

    deduction = result.deduction
    print(file=stream)
    print("--- Deduction ---", file=stream)
    print(f"  Passes:        {deduction.passes}", file=stream)
    print(
        f"  Resolved:      {deduction.cells_resolved}/{deduction.unknown_before} unknown cells",
        file=stream,
    )
    for name, hits in sorted(deduction.rule_hits.items()):
        print(f"  {name + ':':<18} {hits}", file=stream)

    print(file=stream)
    print("--- Search ---", file=stream)
    print(f"  Engine:        {result.engine.value}", file=stream)
    if result.stats is not None:
        print(f"  Nodes:         {result.stats.nodes_visited}", file=stream)
        print(f"  Pruned:        {result.stats.nodes_pruned}", file=stream)
        print(f"  Backtracks:    {result.stats.backtracks}", file=stream)
        print(f"  Max depth:     {result.stats.max_depth}", file=stream)
    print(f"  Elapsed:       {result.elapsed_seconds:.3f}s", file=stream)

    if result.validation_messages:
        print(file=stream)
        print("--- Validation ---", file=stream)
        for msg in result.validation_messages:
            print(f"  {msg}", file=stream)
