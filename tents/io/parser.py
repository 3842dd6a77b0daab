"""Puzzle definition parsing.

A puzzle file is comma separated::

    1,.,3        column clues ('.', '_' or '-' for no clue)
    0,3,.        row clues
    .,.,T        one line per board row
    T,.,.
    .,.,.

Board tokens: ``.``, ``_`` or ``u`` unknown, ``t`` tree, ``x`` tent, ``e``
empty (case-insensitive). Lines starting with ``#`` and trailing blank lines
are ignored.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Tuple

from ..core.constants import CellState, ParseErrorKind
from ..core.exceptions import PuzzleLoadError, PuzzleParseError
from ..core.models import Clue
from ..engine.grid import TentsGrid
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)

NO_CLUE_TOKENS = {".", "_", "-"}


def load_puzzle(path: Path | str) -> TentsGrid:
    source = Path(path)
    if not source.is_file():
        raise PuzzleLoadError(f"Missing puzzle file: {source}")
    try:
        contents = source.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise PuzzleLoadError(f"Cannot read puzzle file {source}: {exc}") from exc
    grid = parse_puzzle(contents)
    LOGGER.info(
        "Loaded %dx%d puzzle with %d trees from %s",
        grid.bounds.rows,
        grid.bounds.cols,
        grid.tree_count,
        source,
    )
    return grid


def parse_puzzle(contents: str) -> TentsGrid:
    lines = _significant_lines(contents)
    col_count, row_count = _parse_metadata(lines)
    col_clues = _parse_clues(lines[0], col_count)
    row_clues = _parse_clues(lines[1], row_count)
    cells = [_parse_row(line) for line in lines[2:]]
    return TentsGrid(cells, row_clues, col_clues)


def _significant_lines(contents: str) -> List[str]:
    if not contents.strip():
        raise PuzzleParseError(ParseErrorKind.EMPTY_FILE, "File is empty")
    lines = [line for line in contents.splitlines() if not line.lstrip().startswith("#")]
    while lines and not lines[-1].strip():
        lines.pop()
    if not lines:
        raise PuzzleParseError(ParseErrorKind.EMPTY_FILE, "File holds no puzzle lines")
    return lines


def _fields(line: str) -> List[str]:
    return [value.strip() for value in line.split(",")]


def _parse_metadata(lines: List[str]) -> Tuple[int, int]:
    """Return (column count, row count) after checking the overall shape."""

    col_count = len(_fields(lines[0]))
    if col_count == 1:
        raise PuzzleParseError(ParseErrorKind.EMPTY_COLUMN_CLUES, "The column clues cannot be read")
    if len(lines) < 2:
        raise PuzzleParseError(ParseErrorKind.MISSING_ROW_CLUES, "Row clues are not present")
    row_count = len(_fields(lines[1]))
    if row_count == 1:
        raise PuzzleParseError(ParseErrorKind.EMPTY_ROW_CLUES, "The row clues cannot be read")

    board_rows = 0
    for row_num, line in enumerate(lines[2:]):
        if len(_fields(line)) != col_count:
            raise PuzzleParseError(
                ParseErrorKind.INVALID_ROW_LENGTH,
                f"Board row {row_num} does not have {col_count} fields",
                value=row_num,
            )
        board_rows += 1
    if board_rows != row_count:
        raise PuzzleParseError(
            ParseErrorKind.INVALID_BOARD_LENGTH,
            f"Board has {board_rows} rows, row clues describe {row_count}",
            value=board_rows,
        )
    return col_count, row_count


def _parse_clue(token: str) -> Optional[Clue]:
    if token in NO_CLUE_TOKENS:
        return None
    if token.isascii() and token.isdigit():
        return int(token)
    raise PuzzleParseError(ParseErrorKind.INVALID_FORMAT, f"Invalid clue: {token!r}")


def _parse_clues(line: str, expected: int) -> List[Clue]:
    clues = [_parse_clue(token) for token in _fields(line)]
    if len(clues) != expected:
        raise PuzzleParseError(
            ParseErrorKind.INVALID_CLUE_LENGTH,
            f"There are the wrong number of clues: {len(clues)}",
            value=len(clues),
        )
    return clues


def _parse_row(line: str) -> List[CellState]:
    row: List[CellState] = []
    for token in _fields(line):
        if len(token) != 1:
            raise PuzzleParseError(ParseErrorKind.INVALID_FORMAT, f"Invalid cell: {token!r}")
        try:
            row.append(CellState.from_symbol(token))
        except ValueError:
            raise PuzzleParseError(
                ParseErrorKind.INVALID_FORMAT, f"Invalid cell: {token!r}"
            ) from None
    return row
