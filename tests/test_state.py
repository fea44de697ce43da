from __future__ import annotations

import json
import random

import pytest

from storyshuffler.session import ShufflerSession
from storyshuffler.state import StateFileError, load_state, save_state


def test_state_round_trip(tmp_path):
    session = ShufflerSession("A\n* * *\nB\n* * *\nC")
    session.set_fixed(2, True)
    session.set_successors(0, "2")
    result = session.shuffle(random.Random(4))
    assert result is not None
    session.set_successors(1, "oops")
    path = tmp_path / "state" / "session.json"
    save_state(path, session)

    restored = load_state(path)
    assert restored.sections == ["A", "B", "C"]
    assert restored.constraints[2].fixed
    assert restored.constraints[0].before == [2]
    assert restored.constraints[1].raw_input == "oops"
    assert not restored.constraints[1].is_syntactically_valid
    assert restored.result == result


def test_mismatched_constraints_are_discarded(tmp_path):
    path = tmp_path / "session.json"
    path.write_text(
        json.dumps({"manuscript": "A\n* * *\nB", "constraints": [{"fixed": True}]}),
        encoding="utf-8",
    )
    restored = load_state(path)
    assert len(restored.constraints) == 2
    assert not restored.constraints[0].fixed


def test_malformed_state_raises(tmp_path):
    path = tmp_path / "session.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(StateFileError):
        load_state(path)
    path.write_text(json.dumps({"result": {"indices": [0, 1], "texts": ["A"]}}), encoding="utf-8")
    with pytest.raises(StateFileError):
        load_state(path)
    path.write_text(json.dumps({"version": 99}), encoding="utf-8")
    with pytest.raises(StateFileError):
        load_state(path)


def test_restored_out_of_range_reference_is_flagged(tmp_path):
    path = tmp_path / "session.json"
    path.write_text(
        json.dumps(
            {
                "manuscript": "A\n* * *\nB",
                "constraints": [{"before": [9], "raw_input": "9"}, {}],
            }
        ),
        encoding="utf-8",
    )
    restored = load_state(path)
    assert not restored.constraints[0].is_syntactically_valid
    assert restored.constraints[0].before == []
    assert restored.constraints[0].raw_input == "9"
    assert restored.has_errors()
    assert restored.shuffle() is None


def test_restored_before_without_text_is_rebuilt(tmp_path):
    path = tmp_path / "session.json"
    path.write_text(
        json.dumps(
            {
                "manuscript": "A\n* * *\nB",
                "constraints": [{"before": [2], "is_syntactically_valid": False}, {}],
            }
        ),
        encoding="utf-8",
    )
    restored = load_state(path)
    assert restored.constraints[0].is_syntactically_valid
    assert restored.constraints[0].before == [2]
    assert restored.constraints[0].raw_input == "2"
