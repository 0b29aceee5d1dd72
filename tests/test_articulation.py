"""Tests for per-measure articulation, accidentals and accents."""

import random
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from sightreader.articulation import (  # noqa: E402
    annotate_measure,
    apply_accents,
    apply_accidentals,
    apply_slurs,
    apply_staccato,
    slur_spans,
)
from sightreader.models import Measure, NoteEvent, Pitch  # noqa: E402
from sightreader.profiles import get_profile  # noqa: E402


def _notes(*durations):
    return tuple(NoteEvent.note(Pitch(i % 7, 4), d) for i, d in enumerate(durations))


def test_staccato_marks_only_short_notes():
    events = apply_staccato(_notes(1, 2, 4) + (NoteEvent.rest(1),))
    assert [e.staccato for e in events] == [True, True, False, False]


def test_slur_probability_one_groups_whole_measure():
    events = apply_slurs(_notes(2, 2, 2, 2), 1.0, random.Random(0))
    spans = slur_spans(events)
    assert spans
    for start, end in spans:
        assert 1 <= end - start <= 2
    covered = [i for start, end in spans for i in range(start, end + 1)]
    assert len(covered) == len(set(covered))


def test_slurs_never_touch_rests_or_staccato():
    base = list(_notes(2, 1, 1, 2))
    base[1] = NoteEvent.rest(1)
    base[3] = base[3].with_(staccato=True)
    for seed in range(30):
        events = apply_slurs(base, 1.0, random.Random(seed))
        for start, end in slur_spans(events):
            for event in events[start:end + 1]:
                assert not event.is_rest
                assert not event.staccato


def test_single_note_measure_gets_no_slur():
    events = apply_slurs(_notes(8), 1.0, random.Random(0))
    assert slur_spans(events) == []
    assert not events[0].slur_start


def test_slur_markers_are_balanced():
    profile = get_profile("4/4", "advanced")
    for seed in range(50):
        events = apply_slurs(_notes(1, 1, 2, 2, 2), profile.slur_prob, random.Random(seed))
        starts = sum(e.slur_start for e in events)
        ends = sum(e.slur_end for e in events)
        assert starts == ends == len(slur_spans(events))


def test_accidentals_only_on_sharpenable_degrees():
    events = tuple(NoteEvent.note(Pitch(d, 4), 1) for d in range(7)) + (NoteEvent.rest(1),)
    raised = apply_accidentals(events, frozenset({5, 6}), 1.0, random.Random(0))
    assert [e.raised for e in raised] == [False] * 5 + [True, True, False]
    untouched = apply_accidentals(events, frozenset(), 1.0, random.Random(0))
    assert not any(e.raised for e in untouched)


def test_accents_skip_staccato_and_rests():
    events = (
        NoteEvent.note(Pitch(0, 4), 2).with_(staccato=True),
        NoteEvent.rest(2),
        NoteEvent.note(Pitch(1, 4), 4),
    )
    accented = apply_accents(events, 1.0, random.Random(0))
    assert [e.accent for e in accented] == [False, False, True]


def test_annotate_keeps_durations_and_leaves_input_unchanged():
    profile = get_profile("4/4", "advanced")
    measure = Measure(_notes(2, 2, 1, 1, 2))
    for seed in range(30):
        result = annotate_measure(measure, profile, frozenset({5, 6}), random.Random(seed))
        assert result.duration == measure.duration
        assert [e.pitch for e in result] == [e.pitch for e in measure]
    assert not any(e.staccato or e.slur_start or e.accent for e in measure)


def test_annotate_chooses_staccato_or_slurs_not_both():
    profile = get_profile("4/4", "advanced")
    measure = Measure(_notes(2, 2, 2, 2))
    for seed in range(50):
        result = annotate_measure(measure, profile, frozenset(), random.Random(seed))
        has_staccato = any(e.staccato for e in result)
        has_slur = any(e.slur_start for e in result)
        assert not (has_staccato and has_slur)


def test_rest_measure_is_left_alone():
    profile = get_profile("4/4", "advanced")
    measure = Measure((NoteEvent.rest(8),))
    assert annotate_measure(measure, profile, frozenset({6}), random.Random(0)) is measure
