from __future__ import annotations

import logging
import random
from typing import List, Optional, Sequence

from .graph import PrecedenceGraph
from .models import OrderingResult

logger = logging.getLogger(__name__)

_rng = random.Random()


class OrderingInvariantError(RuntimeError):
    """The graph ran out of roots before it ran out of vertices."""


def seed(value: Optional[int]) -> None:
    """Reseed the process-wide generator used when no ``rng`` is passed."""
    _rng.seed(value)


def get_rng() -> random.Random:
    return _rng


def random_linear_extension(
    graph: PrecedenceGraph,
    rng: Optional[random.Random] = None,
) -> List[int]:
    """Peel off a uniformly chosen root until the graph is empty.

    Works on a copy; ``graph`` is left untouched. Roots are tracked through
    in-degree bookkeeping as vertices are removed, so each step costs the
    out-degree of the removed vertex plus one list pop. This is a greedy
    randomized topological sort: every current root is equally likely at each
    step, which is not the same as sampling uniformly from all valid orders.
    """
    rng = rng or _rng
    working = graph.copy()
    roots = sorted(working.roots())
    order: List[int] = []
    while len(working):
        if not roots:
            logger.error(
                "No root among %d remaining sections; the graph was not acyclic", len(working)
            )
            raise OrderingInvariantError("Precedence graph has no root; was validation skipped?")
        root = roots.pop(rng.randrange(len(roots)))
        successors = working.successors(root)
        working.remove_node(root)
        order.append(root)
        for succ in successors:
            if working.in_degree(succ) == 0:
                roots.append(succ)
    return order


def shuffle_sections(
    graph: PrecedenceGraph,
    sections: Sequence[str],
    rng: Optional[random.Random] = None,
) -> OrderingResult:
    if len(graph) != len(sections):
        raise ValueError(f"Graph has {len(graph)} sections but {len(sections)} texts were supplied")
    order = random_linear_extension(graph, rng)
    indices = [number - 1 for number in order]
    logger.debug("Shuffled order: %s", [i + 1 for i in indices])
    return OrderingResult.from_indices(indices, sections)
