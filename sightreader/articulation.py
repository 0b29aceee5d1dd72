"""Per-measure articulation: staccato, slurs, accidentals and accents.

Each helper takes a sequence of :class:`~sightreader.models.NoteEvent` and
returns a new tuple; input events are never modified.  The stages run in
the order of :func:`annotate_measure`:

1. articulation choice -- either staccato on every short note or slur spans;
2. raised accidentals on sharpenable scale degrees;
3. accents on non-staccato notes.

Rest substitution happens earlier, while the melodic line is generated, so
rests never displace the melodic cursor.
"""

from __future__ import annotations

import random
from typing import AbstractSet, List, Sequence, Tuple

from .models import Measure, NoteEvent
from .profiles import DifficultyProfile

__all__ = [
    "STACCATO_MAX_DURATION",
    "annotate_measure",
    "apply_accents",
    "apply_accidentals",
    "apply_slurs",
    "apply_staccato",
    "slur_spans",
]

# Notes this short (in eighths) are staccato when a measure is detached.
STACCATO_MAX_DURATION = 2

_SLUR_LENGTHS = (2, 3)


def _slurrable(event: NoteEvent) -> bool:
    return not event.is_rest and not event.staccato


def apply_staccato(events: Sequence[NoteEvent]) -> Tuple[NoteEvent, ...]:
    """Mark every note of at most :data:`STACCATO_MAX_DURATION` eighths staccato."""

    return tuple(
        e.with_(staccato=True) if not e.is_rest and e.duration <= STACCATO_MAX_DURATION else e
        for e in events
    )


def apply_slurs(
    events: Sequence[NoteEvent], probability: float, rng: random.Random
) -> Tuple[NoteEvent, ...]:
    """Group runs of two or three legato notes under slurs.

    Scanning left to right, a span may start on any non-rest, non-staccato
    note with ``probability``. Its length is two or three notes, cut short
    at the end of the measure, and every member must itself be slurrable.
    A rejected candidate is skipped and the scan resumes on the next note.
    """

    result: List[NoteEvent] = list(events)
    if probability <= 0:
        return tuple(result)
    i = 0
    while i < len(result):
        if _slurrable(result[i]) and rng.random() < probability:
            end = min(i + rng.choice(_SLUR_LENGTHS), len(result))
            if end - i >= 2 and all(_slurrable(e) for e in result[i:end]):
                result[i] = result[i].with_(slur_start=True)
                result[end - 1] = result[end - 1].with_(slur_end=True)
                i = end
                continue
        i += 1
    return tuple(result)


def apply_accidentals(
    events: Sequence[NoteEvent],
    sharpenable: AbstractSet[int],
    probability: float,
    rng: random.Random,
) -> Tuple[NoteEvent, ...]:
    """Raise notes on ``sharpenable`` degrees with ``probability`` each."""

    if not sharpenable or probability <= 0:
        return tuple(events)
    return tuple(
        e.with_(raised=True)
        if not e.is_rest and e.pitch.degree in sharpenable and rng.random() < probability
        else e
        for e in events
    )


def apply_accents(
    events: Sequence[NoteEvent], probability: float, rng: random.Random
) -> Tuple[NoteEvent, ...]:
    """Accent non-rest, non-staccato notes with ``probability`` each."""

    if probability <= 0:
        return tuple(events)
    return tuple(
        e.with_(accent=True) if _slurrable(e) and rng.random() < probability else e
        for e in events
    )


def slur_spans(events: Sequence[NoteEvent]) -> List[Tuple[int, int]]:
    """Return ``(start, end)`` index pairs (inclusive) of the slurs in ``events``."""

    spans: List[Tuple[int, int]] = []
    start = None
    for idx, event in enumerate(events):
        if event.slur_start:
            start = idx
        if event.slur_end and start is not None:
            spans.append((start, idx))
            start = None
    return spans


def annotate_measure(
    measure: Measure,
    profile: DifficultyProfile,
    sharpenable: AbstractSet[int],
    rng: random.Random,
) -> Measure:
    """Apply articulation, accidentals and accents to ``measure``."""

    if not measure.has_notes:
        return measure
    events: Tuple[NoteEvent, ...] = measure.events
    if profile.staccato_prob > 0 and rng.random() < profile.staccato_prob:
        events = apply_staccato(events)
    else:
        events = apply_slurs(events, profile.slur_prob, rng)
    events = apply_accidentals(events, sharpenable, profile.accidental_prob, rng)
    events = apply_accents(events, profile.accent_prob, rng)
    return Measure(events)
