from __future__ import annotations

from typing import Dict, Iterator, List, Sequence, Set, Tuple

from .models import Constraint


class PrecedenceGraph:
    """Directed graph over one-based section numbers.

    An edge ``u -> v`` means section ``u`` must come before section ``v``.
    Edges are stored as sets, so adding one twice is a no-op.
    """

    def __init__(self, nodes: Sequence[int] = (), edges: Sequence[Tuple[int, int]] = ()):
        self.nodes: List[int] = []
        self.adj: Dict[int, Set[int]] = {}
        self.rev: Dict[int, Set[int]] = {}
        for node in nodes:
            self.add_node(node)
        for u, v in edges:
            self.add_edge(u, v)

    def __len__(self) -> int:
        return len(self.nodes)

    def __contains__(self, node: object) -> bool:
        return node in self.adj

    def add_node(self, node: int) -> None:
        if node in self.adj:
            return
        self.nodes.append(node)
        self.adj[node] = set()
        self.rev[node] = set()

    def add_edge(self, u: int, v: int) -> None:
        if u not in self.adj or v not in self.adj:
            raise ValueError(f"Edge ({u}, {v}) references a section outside 1..{len(self.nodes)}")
        self.adj[u].add(v)
        self.rev[v].add(u)

    def remove_node(self, node: int) -> None:
        for succ in self.adj.pop(node):
            self.rev[succ].discard(node)
        for pred in self.rev.pop(node):
            self.adj[pred].discard(node)
        self.nodes.remove(node)

    def successors(self, node: int) -> List[int]:
        return sorted(self.adj[node])

    def in_degree(self, node: int) -> int:
        return len(self.rev[node])

    def roots(self) -> List[int]:
        return [n for n in self.nodes if not self.rev[n]]

    def edges(self) -> Iterator[Tuple[int, int]]:
        for u in self.nodes:
            for v in sorted(self.adj[u]):
                yield u, v

    def edge_set(self) -> Set[Tuple[int, int]]:
        return set(self.edges())

    def copy(self) -> "PrecedenceGraph":
        return PrecedenceGraph(self.nodes, list(self.edges()))


def build_precedence_graph(constraints: Sequence[Constraint]) -> PrecedenceGraph:
    graph = PrecedenceGraph()
    count = len(constraints)
    if count == 0:
        return graph
    for number in range(1, count + 1):
        graph.add_node(number)
    if constraints[0].fixed:
        # fixed-first precedes everything
        for successor in range(2, count + 1):
            graph.add_edge(1, successor)
    if constraints[-1].fixed:
        # fixed-last follows everything
        for predecessor in range(1, count):
            graph.add_edge(predecessor, count)
    for index, constraint in enumerate(constraints):
        for successor in constraint.before:
            graph.add_edge(index + 1, successor)
    return graph
