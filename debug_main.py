"""Convenience entrypoint for stepping through a solve rule by rule.

Usage in a Python console (Jupyter-style)::

    import debug_main
    state = debug_main.prepare_state(puzzle_path="puzzles/sample_board.txt")
    debug_main.step_rule(state, "zero_clue")
    debug_main.step_rule(state, "no_adjacent_tree")
    debug_main.step_fixed_point(state)
    debug_main.step_search(state)

Call :func:`run_debug` for a one-liner, or execute the functions above one by
one to inspect the board after each stage.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from tents.engine.candidate import TentsCandidate
from tents.engine.deduction import DEFAULT_RULES, DeductionReport, DeductionRule, deduce
from tents.engine.search import SearchStats, solve
from tents.engine.validator import GridValidator
from tents.io.parser import load_puzzle
from tents.utils.logger import configure_logging
from tents.utils.pretty import pretty_print_grid

DEFAULT_DEBUG_ARGS: Dict[str, Any] = {
    "puzzle_path": Path("puzzles/sample_board.txt"),
    "max_nodes": 50_000,
    "log_level": logging.DEBUG,
}

LOGGER = logging.getLogger(__name__)

RULES_BY_NAME: Dict[str, DeductionRule] = {rule.name: rule for rule in DEFAULT_RULES}


def prepare_state(**overrides: Any) -> Dict[str, Any]:
    """Return a mutable state dictionary used by the step helpers."""

    args = {**DEFAULT_DEBUG_ARGS, **overrides}
    configure_logging(args["log_level"])
    grid = load_puzzle(Path(args["puzzle_path"]))
    pretty_print_grid(grid, label="Loaded board")
    return {
        "args": args,
        "grid": grid,
        "history": [],
        "report": None,
        "solution": None,
        "stats": None,
    }


def step_rule(state: Dict[str, Any], name: str) -> bool:
    """Apply one named rule once and print the board if it changed anything."""

    try:
        rule = RULES_BY_NAME[name]
    except KeyError:
        raise ValueError(f"Unknown rule {name!r}; choose from {sorted(RULES_BY_NAME)}") from None
    changed = rule.apply(state["grid"])
    state["history"].append((name, changed))
    if changed:
        pretty_print_grid(state["grid"], label=f"After {name}")
    else:
        LOGGER.info("Rule %s changed nothing", name)
    return changed


def step_fixed_point(state: Dict[str, Any]) -> DeductionReport:
    state["report"] = deduce(state["grid"])
    pretty_print_grid(state["grid"], label="After deduction")
    print(f"Is complete? {state['grid'].is_complete()}")
    return state["report"]


def step_search(state: Dict[str, Any]) -> Optional[TentsCandidate]:
    stats = SearchStats()
    found = solve(
        TentsCandidate(state["grid"]),
        max_nodes=state["args"]["max_nodes"],
        stats=stats,
    )
    state["stats"] = stats
    if found is None:
        print("No solution")
        return None
    solution = found.grid.copy()
    solution.resolve_unknowns()
    state["solution"] = solution
    pretty_print_grid(solution, label=f"Solution after {stats.nodes_visited} nodes")
    return found


def step_validate(state: Dict[str, Any]):
    if state["solution"] is None:
        raise RuntimeError("State has no solution. Call step_search() first.")
    validation = GridValidator().validate(state["solution"])
    print(f"Validation: {validation.messages or 'ok'}")
    return validation


def run_debug(**overrides: Any) -> Dict[str, Any]:
    """Replay every default rule once in order, then finish the solve."""

    state = prepare_state(**overrides)
    for rule in DEFAULT_RULES:
        step_rule(state, rule.name)
    step_fixed_point(state)
    if step_search(state) is not None:
        step_validate(state)
    return state


def main() -> None:  # pragma: no cover - manual helper
    state = run_debug()
    stats = state["stats"]
    if stats is not None:
        print(f"Nodes visited: {stats.nodes_visited}, backtracks: {stats.backtracks}")


if __name__ == "__main__":
    main()
