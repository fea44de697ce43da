from __future__ import annotations

import pytest

from storyshuffler.cycles import find_cycles, render_cycle, render_paradox
from storyshuffler.graph import PrecedenceGraph, build_precedence_graph
from storyshuffler.models import Constraint


def test_two_section_cycle_found_from_both_ends():
    g = build_precedence_graph([Constraint(before=[2]), Constraint(before=[1])])
    assert find_cycles(g, 1) == [(1, 2, 1)]
    assert find_cycles(g, 2) == [(2, 1, 2)]
    message = render_paradox(find_cycles(g, 1))
    assert "§1 must come before §2" in message
    assert "§2 must come before §1" in message


def test_self_reference_is_a_cycle_of_length_one():
    g = build_precedence_graph([Constraint(before=[1])])
    cycles = find_cycles(g, 1)
    assert cycles == [(1, 1)]
    assert render_paradox(cycles) == "Paradox detected:\n\t§1 must come before §1\n"


def test_chain_has_no_cycles():
    g = build_precedence_graph([Constraint(before=[2]), Constraint(before=[3]), Constraint()])
    for node in g.nodes:
        assert find_cycles(g, node) == []


def test_all_simple_cycles_through_vertex_are_reported():
    g = PrecedenceGraph([1, 2, 3], [(1, 2), (2, 1), (2, 3), (3, 1)])
    assert find_cycles(g, 1) == [(1, 2, 1), (1, 2, 3, 1)]
    message = render_paradox(find_cycles(g, 1))
    assert message.count("Paradox detected:") == 2


def test_cycle_not_through_vertex_is_ignored():
    g = PrecedenceGraph([1, 2, 3], [(1, 2), (2, 3), (3, 2)])
    assert find_cycles(g, 1) == []
    assert find_cycles(g, 2) == [(2, 3, 2)]


def test_fixed_ends_can_create_a_paradox():
    # last section pinned, but it also claims to precede the first
    constraints = [Constraint(), Constraint(), Constraint(fixed=True, before=[1])]
    g = build_precedence_graph(constraints)
    assert (1, 3, 1) in find_cycles(g, 1)


def test_render_cycle_walks_consecutive_pairs():
    assert render_cycle((2, 4, 3, 2)) == (
        "Paradox detected:\n"
        "\t§2 must come before §4\n"
        "\t§4 must come before §3\n"
        "\t§3 must come before §2\n"
    )


def test_unknown_vertex_raises():
    with pytest.raises(ValueError):
        find_cycles(PrecedenceGraph([1]), 2)
