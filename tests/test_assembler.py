"""Tests for score assembly and budget validation."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from sightreader.assembler import assemble_score, rest_measure  # noqa: E402
from sightreader.models import Measure, NoteEvent, Pitch  # noqa: E402


def _measure(*durations):
    return Measure(tuple(NoteEvent.note(Pitch(0, 4), d) for d in durations))


def test_idle_hand_gets_full_measure_rests():
    score = assemble_score([_measure(4, 4), None], [None, _measure(8)], "C", "4/4", [0, 0])
    assert score.left[0] == rest_measure(8)
    assert score.right[1] == rest_measure(8)
    assert score.num_measures == 2
    assert score.progression == (0, 0)


def test_budget_violation_raises():
    with pytest.raises(ValueError):
        assemble_score([_measure(4, 2)], [None], "C", "4/4", [0])


def test_voice_length_mismatch_raises():
    with pytest.raises(ValueError):
        assemble_score([_measure(6)], [None, None], "C", "3/4", [0])


def test_progression_length_mismatch_raises():
    with pytest.raises(ValueError):
        assemble_score([_measure(4)], [None], "C", "2/4", [0, 4])
