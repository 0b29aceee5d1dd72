"""Harmonic progression selection.

Progressions are lists of scale-degree chord roots, one per measure.  Each
mode keeps two families of four-chord loops:

``closed``
    Loops that return to the tonic on their last chord.  Used on their own
    for pieces of four measures or fewer.

``open``
    Loops that stop on a non-tonic chord.  Longer pieces take one open loop
    followed by one closed loop so the harmony still comes home.

The chosen base sequence is tiled until it covers the requested number of
measures and then truncated to exactly that many.  Only diatonic triads are
modelled; there are no inversions or extensions.
"""

from __future__ import annotations

import logging
import random
from typing import Dict, List, Tuple

from .errors import InvalidParameter
from .models import Pitch

__all__ = [
    "CLOSED_PROGRESSIONS",
    "OPEN_PROGRESSIONS",
    "chord_tones",
    "choose_progression",
    "tile_progression",
    "voicing",
]

CLOSED_PROGRESSIONS: Dict[str, Tuple[Tuple[int, ...], ...]] = {
    "major": ((0, 3, 4, 0), (0, 5, 4, 0), (0, 1, 4, 0)),
    "minor": ((0, 3, 4, 0), (0, 6, 4, 0), (0, 5, 4, 0)),
    "dorian": ((0, 3, 4, 0), (0, 3, 6, 0), (0, 1, 3, 0)),
    "mixolydian": ((0, 6, 3, 0), (0, 3, 6, 0), (0, 4, 6, 0)),
    "lydian": ((0, 1, 6, 0), (0, 1, 4, 0), (0, 6, 1, 0)),
    "phrygian": ((0, 1, 6, 0), (0, 1, 3, 0), (0, 5, 1, 0)),
}

OPEN_PROGRESSIONS: Dict[str, Tuple[Tuple[int, ...], ...]] = {
    "major": ((0, 5, 3, 4), (0, 1, 3, 4), (0, 3, 1, 4)),
    "minor": ((0, 3, 5, 4), (0, 5, 6, 4), (0, 3, 6, 4)),
    "dorian": ((0, 3, 6, 4), (0, 1, 3, 4), (0, 6, 3, 4)),
    "mixolydian": ((0, 3, 6, 4), (0, 6, 3, 4), (0, 4, 3, 6)),
    "lydian": ((0, 1, 6, 4), (0, 6, 1, 4), (0, 1, 4, 6)),
    "phrygian": ((0, 1, 5, 3), (0, 5, 1, 3), (0, 1, 3, 6)),
}

# Pieces longer than this take an open loop followed by a closed one.
CLOSED_ONLY_MAX_MEASURES = 4


def chord_tones(root: int) -> Tuple[int, int, int]:
    """Return the ``(root, third, fifth)`` degrees of the triad on ``root``."""

    return (root % 7, (root + 2) % 7, (root + 4) % 7)


def voicing(root: int, octave: int = 3) -> Tuple[Pitch, Pitch, Pitch]:
    """Return a close-position voicing of the triad on ``root``.

    The root sits in ``octave``; the third and fifth are placed in the same
    octave when their degree lies above the root and one octave higher
    otherwise, so the three tones always ascend.
    """

    r, third, fifth = chord_tones(root)
    root_pitch = Pitch(r, octave)
    third_pitch = Pitch(third, octave if third > r else octave + 1)
    fifth_pitch = Pitch(fifth, octave if fifth > r else octave + 1)
    return (root_pitch, third_pitch, fifth_pitch)


def tile_progression(base: Tuple[int, ...], length: int) -> List[int]:
    """Repeat ``base`` until it covers ``length`` chords and truncate.

    @param base (Tuple[int, ...]): Non-empty sequence of chord roots.
    @param length (int): Number of chords required. Must be positive.
    @returns List[int]: Exactly ``length`` chord roots.
    """

    if not base:
        raise ValueError("base progression must not be empty")
    if length <= 0:
        raise InvalidParameter("length must be positive")
    tiled = list(base)
    while len(tiled) < length:
        tiled.extend(base)
    return tiled[:length]


def choose_progression(mode: str, num_measures: int, rng: random.Random) -> List[int]:
    """Pick a progression for ``mode`` spanning ``num_measures`` measures.

    Random draws happen in a fixed order: the open loop (only for pieces
    longer than four measures) and then the closed loop.
    """

    if mode not in CLOSED_PROGRESSIONS:
        raise InvalidParameter(f"Unknown mode: {mode!r}")
    if num_measures <= CLOSED_ONLY_MAX_MEASURES:
        base = rng.choice(CLOSED_PROGRESSIONS[mode])
    else:
        opening = rng.choice(OPEN_PROGRESSIONS[mode])
        closing = rng.choice(CLOSED_PROGRESSIONS[mode])
        base = opening + closing
    progression = tile_progression(base, num_measures)
    logging.debug("Progression for %s over %d measures: %s", mode, num_measures, progression)
    return progression
