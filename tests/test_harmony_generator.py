"""Tests for progression selection and chord helpers."""

import random
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from sightreader.errors import InvalidParameter  # noqa: E402
from sightreader.harmony_generator import (  # noqa: E402
    CLOSED_PROGRESSIONS,
    OPEN_PROGRESSIONS,
    chord_tones,
    choose_progression,
    tile_progression,
    voicing,
)
from sightreader.key_mode import MODES  # noqa: E402
from sightreader.models import Pitch  # noqa: E402


def test_tables_cover_every_mode():
    for mode in MODES:
        assert CLOSED_PROGRESSIONS[mode]
        assert OPEN_PROGRESSIONS[mode]
        for base in CLOSED_PROGRESSIONS[mode]:
            assert base[-1] == 0
        for base in OPEN_PROGRESSIONS[mode]:
            assert base[-1] != 0


@pytest.mark.parametrize("n", [1, 2, 3, 4, 5, 7, 8, 12, 17])
@pytest.mark.parametrize("mode", MODES)
def test_progression_length_matches(mode, n):
    progression = choose_progression(mode, n, random.Random(n))
    assert len(progression) == n
    assert all(0 <= root <= 6 for root in progression)


def test_short_pieces_use_closed_loop():
    progression = choose_progression("major", 4, random.Random(3))
    assert tuple(progression) in CLOSED_PROGRESSIONS["major"]


def test_long_pieces_open_then_close():
    progression = choose_progression("minor", 8, random.Random(5))
    assert tuple(progression[:4]) in OPEN_PROGRESSIONS["minor"]
    assert tuple(progression[4:]) in CLOSED_PROGRESSIONS["minor"]


def test_tile_truncates_and_repeats():
    assert tile_progression((0, 3, 4, 0), 6) == [0, 3, 4, 0, 0, 3]
    assert tile_progression((0, 3, 4, 0), 2) == [0, 3]


def test_tile_rejects_bad_input():
    with pytest.raises(ValueError):
        tile_progression((), 4)
    with pytest.raises(InvalidParameter):
        tile_progression((0,), 0)


def test_chord_tones_wrap():
    assert chord_tones(0) == (0, 2, 4)
    assert chord_tones(5) == (5, 0, 2)


def test_voicing_ascends():
    for root in range(7):
        tones = voicing(root, 3)
        assert tones[0] == Pitch(root, 3)
        assert tones[0] < tones[1] < tones[2]
