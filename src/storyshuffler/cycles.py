from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple

from .graph import PrecedenceGraph

Cycle = Tuple[int, ...]


def find_cycles(graph: PrecedenceGraph, start: int) -> List[Cycle]:
    """Return every simple cycle through ``start``.

    Each cycle begins and ends with ``start``; a self-loop comes back as
    ``(start, start)``. Successors are visited in ascending order, so the
    result is stable for a given graph. The walk keeps an explicit stack, so
    depth is bounded by the section count rather than the recursion limit.
    """
    if start not in graph:
        raise ValueError(f"Section {start} is not in the graph")
    cycles: List[Cycle] = []
    path: List[int] = [start]
    on_path = {start}
    stack = [iter(graph.successors(start))]
    while stack:
        nxt = next(stack[-1], None)
        if nxt is None:
            stack.pop()
            on_path.discard(path.pop())
            continue
        if nxt == start:
            cycles.append(tuple(path) + (start,))
        elif nxt not in on_path:
            path.append(nxt)
            on_path.add(nxt)
            stack.append(iter(graph.successors(nxt)))
    return cycles


def render_cycle(cycle: Sequence[int]) -> str:
    lines = ["Paradox detected:\n"]
    for previous, step in zip(cycle, cycle[1:]):
        lines.append(f"\t§{previous} must come before §{step}\n")
    return "".join(lines)


def render_paradox(cycles: Iterable[Sequence[int]]) -> str:
    return "".join(render_cycle(cycle) for cycle in cycles)
