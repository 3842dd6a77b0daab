"""Forward-chaining deduction rules run before the search.

Every rule scans the whole grid, only ever turns UNKNOWN cells into EMPTY or
TENT, and reports whether it changed anything. :func:`deduce` applies the
rules pass after pass until a full pass changes nothing. Skipping deduction
never affects correctness, only the size of the search tree.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Sequence

from ..core.constants import CellState
from ..core.models import Line
from ..utils.logger import get_logger
from .grid import TentsGrid


LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class DeductionRule:
    name: str
    apply: Callable[[TentsGrid], bool]


@dataclass
class DeductionReport:
    """Summary of one fixed-point run."""

    passes: int = 0
    unknown_before: int = 0
    unknown_after: int = 0
    rule_hits: Dict[str, int] = field(default_factory=dict)

    @property
    def changed(self) -> bool:
        return bool(self.rule_hits)

    @property
    def cells_resolved(self) -> int:
        return self.unknown_before - self.unknown_after


def _fill_unknowns(grid: TentsGrid, line: Line, state: CellState) -> bool:
    changed = False
    for row, col in line.cells:
        if grid.cells[row][col] == CellState.UNKNOWN:
            grid.set_cell(row, col, state)
            changed = True
    return changed


def apply_zero_clues(grid: TentsGrid) -> bool:
    """A line clued 0 cannot hold any tent."""

    changed = False
    for line in grid.lines():
        if line.clue == 0:
            changed = _fill_unknowns(grid, line, CellState.EMPTY) or changed
    return changed


def apply_saturated_lines(grid: TentsGrid) -> bool:
    """A line already holding its clued number of tents gets no more."""

    changed = False
    for line in grid.lines():
        if line.clue is None:
            continue
        if grid.count_states(line, CellState.TENT) == line.clue:
            changed = _fill_unknowns(grid, line, CellState.EMPTY) or changed
    return changed


def apply_exhausted_slack(grid: TentsGrid) -> bool:
    """When a clue equals tents plus unknowns, every unknown must be a tent.

    Counts are taken when each line is visited, so tents placed on earlier
    lines (and the cells they rule out) are already accounted for.
    """

    changed = False
    for line in grid.lines():
        if line.clue is None:
            continue
        if grid.count_states(line, CellState.UNKNOWN) == 0:
            continue
        if grid.count_states(line, CellState.UNKNOWN, CellState.TENT) != line.clue:
            continue
        for row, col in line.cells:
            if grid.cells[row][col] == CellState.UNKNOWN:
                grid.place_tent(row, col)
                changed = True
    return changed


def apply_no_adjacent_tree(grid: TentsGrid) -> bool:
    """A cell without an orthogonal tree can never host a tent."""

    changed = False
    for (row, col), state in list(grid.states()):
        if state == CellState.UNKNOWN and not grid.has_adjacent_tree(row, col):
            grid.set_cell(row, col, CellState.EMPTY)
            changed = True
    return changed


def apply_unique_slots(grid: TentsGrid) -> bool:
    """A tree still lacking a tent with a single open neighbour gets it there."""

    changed = False
    for row, col in grid.trees():
        if grid.has_adjacent_tent(row, col):
            continue
        slots = grid.tree_slots(row, col)
        if len(slots.directions) != 1:
            continue
        tent_row, tent_col = grid.tent_position_for(row, col, slots.directions[0])
        grid.place_tent(tent_row, tent_col)
        changed = True
    return changed


def apply_tent_neighborhoods(grid: TentsGrid) -> bool:
    """No tent may touch another, so cells around a tent are empty."""

    changed = False
    for row, col in grid.tents():
        for nr, nc in grid.surrounding(row, col):
            if grid.cells[nr][nc] == CellState.UNKNOWN:
                grid.set_cell(nr, nc, CellState.EMPTY)
                changed = True
    return changed


DEFAULT_RULES: Sequence[DeductionRule] = (
    DeductionRule("zero_clue", apply_zero_clues),
    DeductionRule("saturated_line", apply_saturated_lines),
    DeductionRule("exhausted_slack", apply_exhausted_slack),
    DeductionRule("no_adjacent_tree", apply_no_adjacent_tree),
    DeductionRule("unique_slot", apply_unique_slots),
    DeductionRule("tent_neighborhood", apply_tent_neighborhoods),
)


def deduce(
    grid: TentsGrid,
    rules: Sequence[DeductionRule] = DEFAULT_RULES,
    max_passes: Optional[int] = None,
) -> DeductionReport:
    """Apply ``rules`` in place until a full pass changes nothing."""

    report = DeductionReport(unknown_before=grid.unknown_count())
    while max_passes is None or report.passes < max_passes:
        report.passes += 1
        changed = False
        for rule in rules:
            if rule.apply(grid):
                report.rule_hits[rule.name] = report.rule_hits.get(rule.name, 0) + 1
                LOGGER.debug("Rule %s fired on pass %d", rule.name, report.passes)
                changed = True
        if not changed:
            break

    report.unknown_after = grid.unknown_count()
    LOGGER.info(
        "Deduction resolved %d/%d unknown cells in %d passes",
        report.cells_resolved,
        report.unknown_before,
        report.passes,
    )
    return report
