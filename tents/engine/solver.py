"""Solve orchestration: deduce, search, validate.

The caller hands over a loaded grid and only ever receives the terminal
result: a fully resolved grid or an explicit "no solution".
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from ..core.exceptions import SearchBudgetExceeded, ValidationError
from ..utils.logger import get_logger
from .candidate import TentsCandidate
from .cp_solver import solve_with_cp
from .deduction import DeductionReport, deduce
from .grid import TentsGrid
from .search import SearchStats, solve
from .validator import GridValidator


LOGGER = get_logger(__name__)


class SearchEngine(str, Enum):
    BACKTRACKING = "backtracking"
    CP_SAT = "cp-sat"


@dataclass
class SolverConfig:
    engine: SearchEngine = SearchEngine.BACKTRACKING
    use_deduction: bool = True
    max_nodes: Optional[int] = None
    cp_timeout_seconds: float = 10.0
    validate: bool = True


@dataclass
class SolveResult:
    grid: Optional[TentsGrid]
    engine: SearchEngine
    deduction: DeductionReport
    stats: Optional[SearchStats] = None
    budget_exhausted: bool = False
    validation_messages: List[str] = field(default_factory=list)
    elapsed_seconds: float = 0.0

    @property
    def solved(self) -> bool:
        return self.grid is not None

    def to_jsonable(self) -> dict:
        return {
            "solved": self.solved,
            "engine": self.engine.value,
            "budget_exhausted": self.budget_exhausted,
            "grid": self.grid.to_jsonable() if self.grid is not None else None,
            "tents": [list(coord) for coord in self.grid.tents()] if self.grid is not None else [],
            "deduction": {
                "passes": self.deduction.passes,
                "unknown_before": self.deduction.unknown_before,
                "unknown_after": self.deduction.unknown_after,
                "rule_hits": dict(self.deduction.rule_hits),
            },
            "search": (
                {
                    "nodes_visited": self.stats.nodes_visited,
                    "nodes_pruned": self.stats.nodes_pruned,
                    "backtracks": self.stats.backtracks,
                    "max_depth": self.stats.max_depth,
                }
                if self.stats is not None
                else None
            ),
            "validation": self.validation_messages,
            "elapsed_seconds": round(self.elapsed_seconds, 6),
        }


class TentsSolver:
    """High-level orchestrator: deduction to a fixed point, then search."""

    def __init__(self, config: Optional[SolverConfig] = None) -> None:
        self.config = config or SolverConfig()
        self.validator = GridValidator()

    # ------------------------------------------------------------------
    # Public entrypoint
    # ------------------------------------------------------------------
    def solve(self, grid: TentsGrid) -> SolveResult:
        started = time.perf_counter()
        working = grid.copy()
        if self.config.use_deduction:
            deduction = deduce(working)
        else:
            unknown = working.unknown_count()
            deduction = DeductionReport(unknown_before=unknown, unknown_after=unknown)

        result = SolveResult(grid=None, engine=self.config.engine, deduction=deduction)
        try:
            if self.config.engine == SearchEngine.CP_SAT:
                solution = solve_with_cp(working, timeout=self.config.cp_timeout_seconds)
            else:
                result.stats = SearchStats()
                solution = self._backtrack(working, result.stats)
        except SearchBudgetExceeded as exc:
            LOGGER.warning("Search aborted: %s", exc)
            result.budget_exhausted = True
            solution = None

        if solution is not None:
            solution.resolve_unknowns()
            if self.config.validate:
                validation = self.validator.validate(solution)
                if not validation.ok:
                    raise ValidationError(f"Solution validation failed: {validation.messages}")
                result.validation_messages = validation.messages
            result.grid = solution

        result.elapsed_seconds = time.perf_counter() - started
        if result.solved:
            LOGGER.info(
                "Solved %dx%d puzzle with %s in %.3fs",
                grid.bounds.rows,
                grid.bounds.cols,
                result.engine.value,
                result.elapsed_seconds,
            )
        else:
            LOGGER.info("No solution found with %s", result.engine.value)
        return result

    # ------------------------------------------------------------------
    # Engines
    # ------------------------------------------------------------------
    def _backtrack(self, grid: TentsGrid, stats: SearchStats) -> Optional[TentsGrid]:
        root = TentsCandidate(grid)
        found = solve(root, max_nodes=self.config.max_nodes, stats=stats)
        LOGGER.debug(
            "Backtracking visited %d nodes (%d pruned, %d backtracks, depth %d)",
            stats.nodes_visited,
            stats.nodes_pruned,
            stats.backtracks,
            stats.max_depth,
        )
        if found is None:
            return None
        return found.grid.copy()
