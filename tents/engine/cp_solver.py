"""CP-SAT tents-and-trees solver using OR-Tools."""

from __future__ import annotations

from typing import Dict, List, Optional

from ortools.sat.python import cp_model

from ..core.constants import CellState
from ..core.exceptions import SearchBudgetExceeded
from ..core.models import Coord
from ..utils.logger import get_logger
from .grid import TentsGrid

LOGGER = get_logger(__name__)


def solve_with_cp(
    grid: TentsGrid,
    timeout: float = 10.0,
    workers: int = 4,
) -> Optional[TentsGrid]:
    """Solve the whole puzzle via CP-SAT.

    Args:
        grid: Puzzle grid; unknown cells are decided, tents and empties are kept.
        timeout: Solver time limit in seconds.
        workers: Number of CP-SAT search workers.

    Returns:
        A fully resolved copy of ``grid``, or None if the model is infeasible.

    Raises:
        SearchBudgetExceeded: the time limit ran out before CP-SAT found a
            solution or proved there is none.
    """
    model = cp_model.CpModel()

    # ------------------------------------------------------------------
    # Step 1: Tent variables for every cell that could hold a tent
    # ------------------------------------------------------------------
    tent_vars: Dict[Coord, cp_model.IntVar] = {}
    for (r, c), state in grid.states():
        if state in (CellState.UNKNOWN, CellState.TENT):
            var = model.new_bool_var(f"tent_{r}_{c}")
            if state == CellState.TENT:
                model.add(var == 1)
            tent_vars[(r, c)] = var

    # ------------------------------------------------------------------
    # Step 2: Pairing variables, one tent per tree and one tree per tent
    # ------------------------------------------------------------------
    claims: Dict[Coord, List[cp_model.IntVar]] = {coord: [] for coord in tent_vars}
    for tr, tc in grid.trees():
        options = []
        for _, neighbor in grid.orthogonal_neighbors(tr, tc):
            if neighbor not in tent_vars:
                continue
            pair = model.new_bool_var(f"pair_{tr}_{tc}_{neighbor[0]}_{neighbor[1]}")
            options.append(pair)
            claims[neighbor].append(pair)
        if not options:
            LOGGER.warning("CP-SAT: tree at (%d,%d) has no possible tent", tr, tc)
            return None
        model.add_exactly_one(options)

    for coord, var in tent_vars.items():
        pairs = claims[coord]
        if pairs:
            model.add(sum(pairs) == var)
        else:
            model.add(var == 0)

    # ------------------------------------------------------------------
    # Step 3: Tents never touch, diagonals included
    # ------------------------------------------------------------------
    for r in range(grid.bounds.rows - 1):
        for c in range(grid.bounds.cols - 1):
            window = [
                tent_vars[cell]
                for cell in ((r, c), (r, c + 1), (r + 1, c), (r + 1, c + 1))
                if cell in tent_vars
            ]
            if len(window) > 1:
                model.add_at_most_one(window)

    # ------------------------------------------------------------------
    # Step 4: Row and column clues
    # ------------------------------------------------------------------
    for line in grid.lines():
        if line.clue is None:
            continue
        line_vars = [tent_vars[cell] for cell in line.cells if cell in tent_vars]
        if not line_vars:
            if line.clue != 0:
                LOGGER.warning(
                    "CP-SAT: %s %d needs %d tents but has no free cell",
                    line.kind.value.lower(),
                    line.index,
                    line.clue,
                )
                return None
            continue
        model.add(sum(line_vars) == line.clue)

    # ------------------------------------------------------------------
    # Step 5: Solve
    # ------------------------------------------------------------------
    solver = cp_model.CpSolver()
    solver.parameters.max_time_in_seconds = timeout
    solver.parameters.num_workers = workers

    LOGGER.info(
        "CP-SAT: %d tent vars, %d trees, solving (timeout=%0.1fs)...",
        len(tent_vars),
        grid.tree_count,
        timeout,
    )
    status = solver.solve(model)

    if status == cp_model.UNKNOWN:
        raise SearchBudgetExceeded(
            f"CP-SAT time limit of {timeout:0.1f}s reached without a proof either way"
        )
    if status not in (cp_model.OPTIMAL, cp_model.FEASIBLE):
        LOGGER.warning("CP-SAT: no solution found (status=%s)", solver.status_name(status))
        return None

    LOGGER.info("CP-SAT: solution found in %.2fs", solver.wall_time)

    # ------------------------------------------------------------------
    # Step 6: Extract solution
    # ------------------------------------------------------------------
    solution = grid.copy()
    for (r, c), var in tent_vars.items():
        state = CellState.TENT if solver.value(var) else CellState.EMPTY
        solution.set_cell(r, c, state)
    solution.resolve_unknowns()
    return solution

