"""CLI entrypoint for the tents-and-trees solver."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from tents.core.exceptions import PuzzleLoadError, PuzzleParseError, ShapeError
from tents.engine.solver import SearchEngine, SolverConfig, TentsSolver
from tents.io.parser import load_puzzle
from tents.utils.logger import configure_logging
from tents.utils.pretty import print_solve_summary


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Solve tents-and-trees puzzles",
    )
    parser.add_argument("puzzle", type=Path, help="Path to the puzzle definition file")
    parser.add_argument(
        "--engine",
        type=str,
        choices=[engine.value for engine in SearchEngine],
        default=SearchEngine.BACKTRACKING.value,
        help="Search engine used after deduction",
    )
    parser.add_argument(
        "--no-deduction",
        action="store_true",
        help="Skip the deduction rules and search from the loaded grid",
    )
    parser.add_argument(
        "--max-nodes",
        type=int,
        default=None,
        help="Abort the backtracking search after this many nodes",
    )
    parser.add_argument(
        "--cp-timeout",
        type=float,
        default=10.0,
        help="Time limit in seconds for the cp-sat engine",
    )
    parser.add_argument(
        "--format",
        type=str,
        choices=["text", "json"],
        default="text",
        help="Report format",
    )
    parser.add_argument("--output", type=Path, help="Optional path for the report")
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        configure_logging(args.log_level)
    except ValueError as exc:
        parser.error(str(exc))

    if args.max_nodes is not None and args.max_nodes <= 0:
        parser.error("--max-nodes must be positive")
    if args.cp_timeout <= 0:
        parser.error("--cp-timeout must be positive")

    try:
        grid = load_puzzle(args.puzzle)
    except (PuzzleLoadError, PuzzleParseError, ShapeError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    config = SolverConfig(
        engine=SearchEngine(args.engine),
        use_deduction=not args.no_deduction,
        max_nodes=args.max_nodes,
        cp_timeout_seconds=args.cp_timeout,
    )
    result = TentsSolver(config).solve(grid)

    if args.format == "json":
        output_text = json.dumps(result.to_jsonable(), indent=2)
        if args.output:
            args.output.write_text(output_text + "\n", encoding="utf-8")
        else:
            print(output_text)
    elif args.output:
        with args.output.open("w", encoding="utf-8") as handle:
            print_solve_summary(result, stream=handle)
    else:
        print_solve_summary(result)
    return 0 if result.solved else 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
