"""Deterministic rule validation for solved grids."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from ..core.constants import CellState
from ..core.exceptions import ValidationError
from ..utils.logger import get_logger
from .grid import TentsGrid


LOGGER = get_logger(__name__)


@dataclass
class ValidationResult:
    ok: bool
    messages: List[str]


class GridValidator:
    """Runs deterministic validation over a final grid."""

    def validate(self, grid: TentsGrid) -> ValidationResult:
        messages: List[str] = []
        try:
            self._check_resolved(grid)
            self._check_clues(grid)
            self._check_tent_spacing(grid)
            self._check_pairing(grid)
        except ValidationError as exc:
            messages.append(str(exc))
            LOGGER.error("Validation failed: %s", exc)
            return ValidationResult(ok=False, messages=messages)
        return ValidationResult(ok=True, messages=[])

    def _check_resolved(self, grid: TentsGrid) -> None:
        for (r, c), state in grid.states():
            if state == CellState.UNKNOWN:
                raise ValidationError(f"Unresolved cell at ({r},{c})")

    def _check_clues(self, grid: TentsGrid) -> None:
        for line in grid.lines():
            if line.clue is None:
                continue
            count = grid.count_states(line, CellState.TENT)
            if count != line.clue:
                raise ValidationError(
                    f"{line.kind.value.title()} {line.index} holds {count} tents, clue is {line.clue}"
                )

    def _check_tent_spacing(self, grid: TentsGrid) -> None:
        for r, c in grid.tents():
            for nr, nc in grid.surrounding(r, c):
                if grid.cells[nr][nc] == CellState.TENT:
                    raise ValidationError(f"Tents at ({r},{c}) and ({nr},{nc}) touch")

    def _check_pairing(self, grid: TentsGrid) -> None:
        trees, tents = grid.tree_count, len(grid.tents())
        if trees != tents:
            raise ValidationError(f"{tents} tents placed for {trees} trees")
        if grid.tree_pairing() is None:
            raise ValidationError("Tents cannot be paired one to one with adjacent trees")
