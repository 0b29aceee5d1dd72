"""Dynamic markings and crescendo/diminuendo spans.

Two dynamic policies exist:

* **Phrase cycle** (every tier above beginner): measures ``0, 2, 4, ...``
  open a two-measure phrase and receive the next entry of
  :data:`DYNAMIC_CYCLE`.  The marking is attached in each voice to the first
  non-rest note of the measure, so an idle hand stays unmarked.
* **Sparse** (beginner): one to three markings spread evenly over the
  measures that contain notes, never the same marking twice in a row.

Hairpins are only generated for beginner pieces, where ``cresc_dim_prob``
is non-zero.  A span starts on the first note of a measure and ends either
three quarters of the way through it, at its last event or on the first
event of the following measure.  A measure is covered by at most one span.
"""

from __future__ import annotations

import logging
import random
from typing import List, Optional, Sequence, Set, Tuple

from .models import Dynamic, Hairpin, Measure, NoteEvent, Voice
from .profiles import Difficulty, DifficultyProfile

__all__ = [
    "DYNAMIC_CYCLE",
    "HAIRPIN_COUNT_WEIGHTS",
    "apply_dynamics",
    "apply_hairpins",
    "phrase_dynamics",
    "sparse_dynamics",
]

DYNAMIC_CYCLE: Tuple[Dynamic, ...] = (Dynamic.F, Dynamic.P, Dynamic.MF, Dynamic.MP)

PHRASE_LENGTH = 2
MAX_SPARSE_MARKINGS = 3

# Relative weights for 1, 2, 3 or 4 hairpins once a piece gets any.
HAIRPIN_COUNT_WEIGHTS: Tuple[int, ...] = (6, 3, 2, 1)

_SPAN_KINDS = ("three_quarter", "full", "extended")

_Events = List[List[NoteEvent]]


def _editable(voice: Voice) -> _Events:
    return [list(measure.events) for measure in voice]


def _frozen(events: _Events) -> Voice:
    return tuple(Measure(tuple(measure)) for measure in events)


def _first_note(events: Sequence[NoteEvent]) -> Optional[int]:
    for idx, event in enumerate(events):
        if not event.is_rest:
            return idx
    return None


def _mark(events: List[NoteEvent], dynamic: Dynamic) -> bool:
    idx = _first_note(events)
    if idx is None:
        return False
    events[idx] = events[idx].with_(dynamic=dynamic)
    return True


def phrase_dynamics(voice: Voice) -> Voice:
    """Return ``voice`` with the phrase-cycle dynamic on every second measure."""

    events = _editable(voice)
    for index in range(0, len(events), PHRASE_LENGTH):
        _mark(events[index], DYNAMIC_CYCLE[(index // PHRASE_LENGTH) % len(DYNAMIC_CYCLE)])
    return _frozen(events)


def _note_measures(right: _Events, left: _Events) -> List[int]:
    return [
        m
        for m in range(len(right))
        if _first_note(right[m]) is not None or _first_note(left[m]) is not None
    ]


def sparse_dynamics(right: Voice, left: Voice, rng: random.Random) -> Tuple[Voice, Voice]:
    """Spread one to three markings evenly over the note-bearing measures.

    The marking goes to the right hand when it plays in the chosen measure
    and to the left hand otherwise.  Consecutive markings always differ.
    """

    rh, lh = _editable(right), _editable(left)
    measures = _note_measures(rh, lh)
    if not measures:
        return right, left
    count = min(rng.randint(1, MAX_SPARSE_MARKINGS), len(measures))
    previous: Optional[Dynamic] = None
    for i in range(count):
        measure = measures[(i * len(measures)) // count]
        level = rng.choice([d for d in DYNAMIC_CYCLE if d is not previous])
        if not _mark(rh[measure], level):
            _mark(lh[measure], level)
        previous = level
    return _frozen(rh), _frozen(lh)


def apply_dynamics(
    right: Voice, left: Voice, profile: DifficultyProfile, rng: random.Random
) -> Tuple[Voice, Voice]:
    """Apply the dynamic policy of ``profile``'s tier to both voices."""

    if profile.difficulty is Difficulty.BEGINNER:
        return sparse_dynamics(right, left, rng)
    return phrase_dynamics(right), phrase_dynamics(left)


def _three_quarter_end(events: Sequence[NoteEvent], start: int, budget: int) -> int:
    """Index of the last event ending within three quarters of the measure."""

    end, elapsed = start, 0
    for idx, event in enumerate(events):
        elapsed += event.duration
        if idx >= start and elapsed * 4 <= budget * 3:
            end = idx
    return end


def _span(
    voice: _Events, measure: int, kind: str, budget: int, used: Set[int]
) -> Optional[Tuple[Tuple[int, int], Tuple[int, int]]]:
    """Return ``((measure, index), (measure, index))`` bounds of a span or ``None``.

    Shorter kinds that would collapse onto a single event grow into the
    next kind.
    """

    events = voice[measure]
    start = _first_note(events)
    if start is None:
        return None
    order = _SPAN_KINDS[_SPAN_KINDS.index(kind):]
    for candidate in order:
        if candidate == "three_quarter":
            end = _three_quarter_end(events, start, budget)
            if end > start:
                return (measure, start), (measure, end)
        elif candidate == "full":
            if len(events) - 1 > start:
                return (measure, start), (measure, len(events) - 1)
        else:
            following = measure + 1
            if following < len(voice) and following not in used:
                if _first_note(voice[following]) is not None:
                    return (measure, start), (following, 0)
    return None


def apply_hairpins(
    right: Voice, left: Voice, profile: DifficultyProfile, rng: random.Random
) -> Tuple[Voice, Voice]:
    """Add crescendo and diminuendo spans with ``profile.cresc_dim_prob``.

    When a piece gets hairpins at all, their count is drawn from one to four
    using :data:`HAIRPIN_COUNT_WEIGHTS`.  Fewer spans are placed when the
    piece runs out of unused note-bearing measures.
    """

    if profile.cresc_dim_prob <= 0 or rng.random() >= profile.cresc_dim_prob:
        return right, left
    rh, lh = _editable(right), _editable(left)
    count = rng.choices(range(1, len(HAIRPIN_COUNT_WEIGHTS) + 1), weights=HAIRPIN_COUNT_WEIGHTS)[0]
    used: Set[int] = set()
    placed = 0
    candidates = _note_measures(rh, lh)
    while placed < count and candidates:
        measure = rng.choice(candidates)
        kind = rng.choice(_SPAN_KINDS)
        voice = rh if _first_note(rh[measure]) is not None else lh
        bounds = _span(voice, measure, kind, profile.budget, used)
        candidates.remove(measure)
        if bounds is None:
            continue
        (m0, i0), (m1, i1) = bounds
        shape = rng.choice(list(Hairpin))
        voice[m0][i0] = voice[m0][i0].with_(hairpin_start=shape)
        voice[m1][i1] = voice[m1][i1].with_(hairpin_end=True)
        used.update({m0, m1})
        if m1 in candidates:
            candidates.remove(m1)
        placed += 1
    logging.debug("Placed %d of %d hairpins", placed, count)
    return _frozen(rh), _frozen(lh)
