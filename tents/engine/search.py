"""Generic depth-first backtracking search.

The engine knows nothing about tents. Any node type providing
``successors()``, ``is_locally_valid()`` and ``is_goal()`` can be searched;
each node is expected to own an independent snapshot of its state, so
backtracking simply drops the abandoned nodes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Optional, Protocol, Sequence, TypeVar

from ..core.exceptions import SearchBudgetExceeded
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)

CandidateT = TypeVar("CandidateT", bound="Candidate")


class Candidate(Protocol):
    def successors(self: CandidateT) -> Sequence[CandidateT]:
        """Return the child nodes in the order they should be explored."""

    def is_locally_valid(self) -> bool:
        """Check the most recent change only; ancestors are assumed valid."""

    def is_goal(self) -> bool:
        """Return True when this node is an acceptable solution."""


@dataclass
class SearchStats:
    nodes_visited: int = 0
    nodes_pruned: int = 0
    backtracks: int = 0
    max_depth: int = 0


def solve(
    root: CandidateT,
    *,
    max_nodes: Optional[int] = None,
    stats: Optional[SearchStats] = None,
) -> Optional[CandidateT]:
    """Return the first goal reached by a pre-order traversal from ``root``.

    At every node the goal test runs first, then invalid nodes are pruned,
    then successors are explored in the order produced. The traversal keeps
    an explicit stack of successor iterators instead of recursing, so deep
    trees do not hit the interpreter's recursion limit.

    Raises :class:`SearchBudgetExceeded` once more than ``max_nodes`` nodes
    have been visited.
    """

    stats = stats if stats is not None else SearchStats()
    stack: List[Iterator[CandidateT]] = []
    node = root
    while True:
        stats.nodes_visited += 1
        if max_nodes is not None and stats.nodes_visited > max_nodes:
            raise SearchBudgetExceeded(f"Search budget of {max_nodes} nodes exhausted")

        if node.is_goal():
            LOGGER.debug(
                "Goal reached after %d nodes at depth %d", stats.nodes_visited, len(stack)
            )
            return node
        if node.is_locally_valid():
            stack.append(iter(node.successors()))
            stats.max_depth = max(stats.max_depth, len(stack))
        else:
            stats.nodes_pruned += 1

        while stack:
            following = next(stack[-1], None)
            if following is not None:
                node = following
                break
            stack.pop()
            stats.backtracks += 1
        else:
            LOGGER.debug("Search space exhausted after %d nodes", stats.nodes_visited)
            return None
