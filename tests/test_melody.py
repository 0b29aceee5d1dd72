"""Tests for the melodic line generator."""

import random
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from sightreader.harmony_generator import chord_tones, voicing  # noqa: E402
from sightreader.melody import MelodyGenerator, NotePool  # noqa: E402
from sightreader.models import Hand, Pitch  # noqa: E402
from sightreader.profiles import get_profile  # noqa: E402


def _indices(generator, hand, events):
    pool = generator.pools[hand]
    return [pool.pitches.index(e.pitch) for e in events if not e.is_rest]


def test_note_pool_spans_bounds():
    pool = NotePool(Pitch(0, 4), Pitch(4, 4))
    assert [p.degree for p in pool.pitches] == [0, 1, 2, 3, 4]
    pool = NotePool(Pitch(0, 4), Pitch(0, 5))
    assert len(pool) == 8
    assert pool[-1] == Pitch(0, 5)


def test_note_pool_rejects_reversed_bounds():
    with pytest.raises(ValueError):
        NotePool(Pitch(4, 4), Pitch(0, 4))


def test_nearest_index_prefers_lower_on_tie():
    pool = NotePool(Pitch(0, 4), Pitch(0, 5))
    assert pool.nearest_index(2, {1, 3}) == 1
    assert pool.nearest_index(4, {0}) == 7
    assert pool.nearest_index(3, {0}) == 0
    assert pool.clamp(-3) == 0
    assert pool.clamp(99) == 7


@pytest.mark.parametrize("difficulty", ["beginner", "elementary"])
def test_walk_moves_by_at_most_two(difficulty):
    profile = get_profile("4/4", difficulty)
    for seed in range(25):
        generator = MelodyGenerator(profile, [0, 3, 4, 0], random.Random(seed))
        events = []
        for measure in range(4):
            events += generator.line(Hand.RH, measure, (2, 2, 2, 2), opens_line=measure == 0)
        indices = _indices(generator, Hand.RH, events)
        for a, b in zip(indices, indices[1:]):
            assert abs(a - b) <= 2


@pytest.mark.parametrize("difficulty", ["beginner", "elementary"])
def test_walk_never_repeats_three_times(difficulty):
    profile = get_profile("4/4", difficulty)
    for seed in range(25):
        generator = MelodyGenerator(profile, [0] * 4, random.Random(seed))
        events = []
        for measure in range(4):
            events += generator.line(Hand.LH, measure, (2, 2, 2, 2), opens_line=measure == 0)
        indices = _indices(generator, Hand.LH, events)
        for a, b, c in zip(indices, indices[1:], indices[2:]):
            assert not (a == b == c)


@pytest.mark.parametrize("difficulty", ["intermediate", "advanced"])
def test_strong_beats_are_chord_tones(difficulty):
    progression = [0, 5, 3, 4]
    profile = get_profile("4/4", difficulty)
    for seed in range(25):
        generator = MelodyGenerator(profile, progression, random.Random(seed))
        for measure, root in enumerate(progression):
            events = generator.line(Hand.RH, measure, (2, 2, 2, 2), opens_line=measure == 0)
            for position in (0, 2):  # eighths 0 and 4
                event = events[position]
                assert not event.is_rest
                assert event.pitch.degree in chord_tones(root)


@pytest.mark.parametrize("difficulty", ["beginner", "elementary", "intermediate", "advanced"])
def test_resolving_line_ends_on_tonic(difficulty):
    profile = get_profile("3/4", difficulty)
    for seed in range(25):
        generator = MelodyGenerator(profile, [0, 4], random.Random(seed))
        generator.line(Hand.RH, 0, (2, 2, 2), opens_line=True)
        events = generator.line(Hand.RH, 1, (2, 2, 2), resolves=True)
        assert not events[-1].is_rest
        assert events[-1].pitch.degree == 0


def test_first_slot_of_a_line_is_never_a_rest():
    profile = get_profile("4/4", "advanced")
    for seed in range(50):
        generator = MelodyGenerator(profile, [0], random.Random(seed))
        events = generator.line(Hand.RH, 0, (1, 1, 1, 1, 4), opens_line=True)
        assert not events[0].is_rest
        assert sum(e.duration for e in events) == 8


def test_rests_only_on_weak_beats():
    profile = get_profile("4/4", "advanced")
    for seed in range(50):
        generator = MelodyGenerator(profile, [0, 0], random.Random(seed))
        for measure in range(2):
            events = generator.line(Hand.RH, measure, (1, 1, 1, 1, 1, 1, 1, 1))
            assert not events[0].is_rest
            assert not events[4].is_rest


def test_pitches_stay_in_pool():
    profile = get_profile("2/4", "intermediate")
    generator = MelodyGenerator(profile, [0, 1, 4, 0], random.Random(2))
    pool = generator.pools[Hand.LH]
    for measure in range(4):
        for event in generator.line(Hand.LH, measure, (1, 1, 2), opens_line=measure == 0):
            if not event.is_rest:
                assert event.pitch in pool.pitches


def test_accompaniment_uses_voiced_chord_and_resolves():
    profile = get_profile("4/4", "advanced")
    generator = MelodyGenerator(profile, [0, 4], random.Random(0))
    figure = ((0, 2), (1, 2), (2, 2), (1, 2))
    events = generator.accompaniment(1, figure)
    tones = voicing(4, 3)
    assert [e.pitch for e in events] == [tones[0], tones[1], tones[2], tones[1]]
    final = generator.accompaniment(1, figure, resolves=True)
    assert final[-1].pitch.degree == 0
    assert [e.duration for e in final] == [2, 2, 2, 2]
