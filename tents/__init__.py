"""Tents-and-trees puzzle solver.

This package exposes the public API surface via:

- ``tents.engine.solver.TentsSolver``: deduction followed by search.
- ``tents.engine.grid.TentsGrid``: the puzzle grid and its queries.
- ``tents.io.parser`` helpers: reading puzzle definitions from text files.
"""

from .engine.grid import TentsGrid
from .engine.solver import SearchEngine, SolveResult, SolverConfig, TentsSolver
from .io.parser import load_puzzle, parse_puzzle

__all__ = [
    "TentsGrid",
    "TentsSolver",
    "SolverConfig",
    "SolveResult",
    "SearchEngine",
    "load_puzzle",
    "parse_puzzle",
]

__version__ = "0.1.0"
