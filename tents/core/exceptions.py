"""Custom exception hierarchy for the tents-and-trees solver."""

from __future__ import annotations

from typing import Optional

from .constants import ParseErrorKind


class TentsError(Exception):
    """Base exception for solver failures."""


class ShapeError(TentsError):
    """Raised when a grid's matrix and clue vectors disagree on dimensions."""


class InvalidCellUpdateError(TentsError):
    """Raised when a mutation would create, move or remove a tree."""


class NoTreeFoundError(TentsError):
    """Raised when a tent position is requested from a cell that is not a tree."""

    def __init__(self, row: int, col: int) -> None:
        super().__init__(f"No tree found at ({row},{col})")
        self.row = row
        self.col = col


class ImpossibleTentPositionError(TentsError):
    """Raised when a tree's neighbour in the requested direction is off the grid."""

    def __init__(self, row: int, col: int) -> None:
        super().__init__(f"Impossible tent position next to tree at ({row},{col})")
        self.row = row
        self.col = col


class PuzzleLoadError(TentsError):
    """Raised when a puzzle file cannot be read."""


class PuzzleParseError(TentsError):
    """Raised when a puzzle definition is malformed."""

    def __init__(self, kind: ParseErrorKind, message: str, value: Optional[int] = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.value = value


class SearchBudgetExceeded(TentsError):
    """Raised when the backtracking search visits more nodes than allowed."""


class ValidationError(TentsError):
    """Raised when the solution integrity checks fail."""
