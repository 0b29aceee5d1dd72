"""Tests for dynamic markings and hairpins."""

import random
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from sightreader.dynamics import (  # noqa: E402
    DYNAMIC_CYCLE,
    apply_dynamics,
    apply_hairpins,
    phrase_dynamics,
    sparse_dynamics,
)
from sightreader.models import Dynamic, Measure, NoteEvent, Pitch  # noqa: E402
from sightreader.profiles import get_profile  # noqa: E402


def _voice(*rhythms):
    return tuple(
        Measure(tuple(NoteEvent.note(Pitch(i % 5, 4), d) for i, d in enumerate(rhythm)))
        for rhythm in rhythms
    )


def _rests(count, budget=8):
    return tuple(Measure((NoteEvent.rest(budget),)) for _ in range(count))


def _markings(voice):
    return [(m, e.dynamic) for m, measure in enumerate(voice) for e in measure if e.dynamic]


def test_phrase_cycle_every_two_measures():
    voice = phrase_dynamics(_voice(*[(4, 4)] * 10))
    assert _markings(voice) == [
        (0, Dynamic.F),
        (2, Dynamic.P),
        (4, Dynamic.MF),
        (6, Dynamic.MP),
        (8, Dynamic.F),
    ]


def test_phrase_dynamic_attaches_to_first_note():
    voice = (Measure((NoteEvent.rest(2), NoteEvent.note(Pitch(0, 4), 6))),)
    marked = phrase_dynamics(voice)
    assert marked[0].events[0].dynamic is None
    assert marked[0].events[1].dynamic is Dynamic.F


def test_idle_measures_stay_unmarked():
    marked = phrase_dynamics(_rests(4))
    assert _markings(marked) == []


def test_sparse_dynamics_count_and_no_repeats():
    right = _voice(*[(4, 4)] * 3) + _rests(3)
    left = _rests(3) + _voice(*[(8,)] * 3)
    for seed in range(100):
        rh, lh = sparse_dynamics(right, left, random.Random(seed))
        marks = sorted(_markings(rh) + _markings(lh))
        assert 1 <= len(marks) <= 3
        levels = [level for _, level in marks]
        for a, b in zip(levels, levels[1:]):
            assert a is not b
        assert len({m for m, _ in marks}) == len(marks)


def test_sparse_dynamics_limited_by_note_measures():
    right = _voice((8,))
    left = _rests(1)
    for seed in range(20):
        rh, lh = sparse_dynamics(right, left, random.Random(seed))
        assert len(_markings(rh)) == 1
        assert _markings(lh) == []


def test_apply_dynamics_dispatches_on_tier():
    right = _voice(*[(4, 4)] * 4)
    left = _rests(4)
    rh, _ = apply_dynamics(right, left, get_profile("4/4", "advanced"), random.Random(0))
    assert [level for _, level in _markings(rh)] == list(DYNAMIC_CYCLE[:2])


def _hairpins(voice):
    starts = [(m, i) for m, measure in enumerate(voice) for i, e in enumerate(measure) if e.hairpin_start]
    ends = [(m, i) for m, measure in enumerate(voice) for i, e in enumerate(measure) if e.hairpin_end]
    return starts, ends


def test_hairpins_are_balanced_and_disjoint():
    profile = get_profile("4/4", "beginner")
    right = _voice((2, 2, 4), (8,), (4, 4), (8,)) + _rests(4)
    left = _rests(4) + _voice((4, 4), (2, 2, 4), (8,), (8,))
    seen_any = False
    for seed in range(200):
        rh, lh = apply_hairpins(right, left, profile, random.Random(seed))
        total = 0
        used = []
        for voice in (rh, lh):
            starts, ends = _hairpins(voice)
            assert len(starts) == len(ends)
            for (m0, i0), (m1, i1) in zip(starts, ends):
                assert (m0, i0) < (m1, i1)
                assert m1 - m0 <= 1
                used.extend(range(m0, m1 + 1))
            total += len(starts)
        assert total <= 4
        assert len(used) == len(set(used))
        seen_any = seen_any or total > 0
    assert seen_any


def test_no_hairpins_above_beginner():
    right = _voice(*[(4, 4)] * 4)
    left = _rests(4)
    rh, lh = apply_hairpins(right, left, get_profile("4/4", "advanced"), random.Random(0))
    assert rh == right and lh == left
