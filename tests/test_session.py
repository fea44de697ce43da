from __future__ import annotations

import random

import pytest

from storyshuffler.session import ShufflerSession

MANUSCRIPT = "Alpha\n* * *\nBeta\n* * *\nGamma\n* * *\nDelta"


def test_split_creates_default_constraints():
    session = ShufflerSession(MANUSCRIPT)
    assert session.sections == ["Alpha", "Beta", "Gamma", "Delta"]
    assert len(session.constraints) == 4
    assert all(not c.fixed and c.before == [] for c in session.constraints)


def test_only_first_and_last_can_be_fixed():
    session = ShufflerSession(MANUSCRIPT)
    session.set_fixed(0, True)
    session.set_fixed(3, True)
    with pytest.raises(ValueError):
        session.set_fixed(1, True)
    with pytest.raises(IndexError):
        session.set_successors(4, "1")


def test_shuffle_honors_pins_and_successors():
    session = ShufflerSession(MANUSCRIPT)
    session.set_fixed(0, True)
    session.set_successors(2, "2")
    rng = random.Random(3)
    for _ in range(50):
        result = session.shuffle(rng)
        assert result is not None
        assert result.indices[0] == 0
        assert result.indices.index(2) < result.indices.index(1)
        assert result.texts[0] == "Alpha"


def test_syntax_error_blocks_shuffle_and_keeps_previous_result():
    session = ShufflerSession(MANUSCRIPT)
    previous = session.shuffle(random.Random(1))
    assert previous is not None
    assert not session.set_successors(1, "three")
    assert not session.can_shuffle()
    assert session.shuffle(random.Random(1)) is None
    assert session.result is previous


def test_out_of_range_successor_is_rejected():
    session = ShufflerSession(MANUSCRIPT)
    assert not session.set_successors(0, "9")
    assert not session.constraints[0].is_syntactically_valid


def test_paradox_blocks_shuffle_with_messages():
    session = ShufflerSession(MANUSCRIPT)
    session.set_successors(0, "2")
    session.set_successors(1, "1")
    assert session.can_shuffle()
    assert session.shuffle() is None
    assert session.result is None
    assert session.constraints[0].paradox_message
    assert session.constraints[1].paradox_message
    assert session.constraints[2].paradox_message is None
    assert session.has_errors()


def test_single_section_cannot_be_shuffled():
    session = ShufflerSession("only section")
    assert session.shuffle() is None


def test_resplit_resets_constraints_but_keeps_result():
    session = ShufflerSession(MANUSCRIPT)
    session.set_successors(0, "2")
    result = session.shuffle(random.Random(2))
    session.set_delimiter("\n", is_regex=False)
    assert session.constraints[0].before == []
    assert len(session.constraints) == len(session.sections)
    assert session.result is result


def test_assembled_joins_latest_result():
    session = ShufflerSession("A|B", delimiter="|")
    assert session.assembled() is None
    session.set_fixed(0, True)
    session.shuffle(random.Random(0))
    assert session.assembled() == "A\n\n|\n\nB"
