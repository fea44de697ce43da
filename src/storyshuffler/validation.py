from __future__ import annotations

import logging
from typing import Optional, Sequence

from .cycles import find_cycles, render_paradox
from .graph import PrecedenceGraph, build_precedence_graph
from .models import Constraint
from .syntax import out_of_range_references

logger = logging.getLogger(__name__)


def all_syntactically_valid(constraints: Sequence[Constraint]) -> bool:
    return all(c.is_syntactically_valid for c in constraints)


def references_in_range(constraints: Sequence[Constraint]) -> bool:
    count = len(constraints)
    return not any(out_of_range_references(c, count) for c in constraints)


def can_shuffle(constraints: Sequence[Constraint], section_count: int) -> bool:
    """Gate checked before validation: enough sections and clean input."""
    return (
        section_count > 1
        and len(constraints) == section_count
        and all_syntactically_valid(constraints)
        and references_in_range(constraints)
    )


def mark_cycles(constraints: Sequence[Constraint]) -> Optional[PrecedenceGraph]:
    """Annotate every constraint with its paradoxes and return the graph if clean.

    Every vertex is checked even after a paradox is found, so that each
    constraint's ``paradox_message`` reflects the current input only.
    """
    graph = build_precedence_graph(constraints)
    invalid = 0
    for node in graph.nodes:
        cycles = find_cycles(graph, node)
        constraint = constraints[node - 1]
        if cycles:
            constraint.paradox_message = render_paradox(cycles)
            invalid += 1
        else:
            constraint.paradox_message = None
    if invalid:
        logger.info("Found paradoxes at %d of %d sections", invalid, len(graph))
        return None
    logger.debug("Constraints for %d sections are free of paradoxes", len(graph))
    return graph
