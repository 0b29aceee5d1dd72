"""Difficulty profiles keyed by ``(time_signature, difficulty)``.

Every tunable of the generator lives here: rhythm catalogs, note-pool
bounds, left-hand accompaniment figures and the embellishment
probabilities.  The table is built once at import time from the literal
catalogs below and exposed through :func:`get_profile`, so every supported
combination is exhaustive and can be checked by a single test loop.

Durations are expressed in eighth notes throughout.  Pool bounds are
``Pitch`` values relative to the tonic, inclusive on both ends.

The probability constants are tuning values rather than musical rules; the
invariants tested elsewhere hold for any value in ``[0, 1]``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Mapping, Tuple

from .errors import InvalidParameter
from .models import Hand, Pitch

__all__ = [
    "Difficulty",
    "DifficultyProfile",
    "MEASURE_BUDGETS",
    "STRONG_BEATS",
    "TIME_SIGNATURES",
    "get_profile",
    "measure_budget",
    "parse_difficulty",
]


class Difficulty(str, Enum):
    """Difficulty tiers, lowest first."""

    BEGINNER = "beginner"
    ELEMENTARY = "elementary"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


# Eighth-note budget of one measure.
MEASURE_BUDGETS: Dict[str, int] = {"4/4": 8, "3/4": 6, "2/4": 4}

TIME_SIGNATURES: Tuple[str, ...] = tuple(MEASURE_BUDGETS)

# Eighth positions treated as harmonically strong.
STRONG_BEATS: Dict[str, Tuple[int, ...]] = {"4/4": (0, 4), "3/4": (0,), "2/4": (0,)}

Rhythm = Tuple[int, ...]
# ``(chord_tone_index, duration)`` where the index selects root/third/fifth.
AccompanimentFigure = Tuple[Tuple[int, int], ...]


@dataclass(frozen=True)
class DifficultyProfile:
    """Immutable generation settings for one time signature and tier."""

    time_signature: str
    difficulty: Difficulty
    rhythms: Tuple[Rhythm, ...]
    split_point: int
    split_rhythms: Mapping[int, Tuple[Rhythm, ...]]
    accompaniment: Tuple[AccompanimentFigure, ...]
    pool_bounds: Mapping[Hand, Tuple[Pitch, Pitch]]
    rest_prob: float
    staccato_prob: float
    slur_prob: float
    accidental_prob: float
    accent_prob: float
    cresc_dim_prob: float

    @property
    def budget(self) -> int:
        return MEASURE_BUDGETS[self.time_signature]

    @property
    def uses_harmony(self) -> bool:
        """``True`` when melodies snap to chord tones instead of walking freely."""

        return self.difficulty in (Difficulty.INTERMEDIATE, Difficulty.ADVANCED)


_RHYTHMS: Dict[str, Dict[Difficulty, Tuple[Rhythm, ...]]] = {
    "4/4": {
        Difficulty.BEGINNER: ((8,), (4, 4), (2, 2, 4)),
        Difficulty.ELEMENTARY: ((4, 4), (2, 2, 4), (4, 2, 2), (2, 2, 2, 2), (6, 2)),
        Difficulty.INTERMEDIATE: (
            (4, 4), (2, 2, 4), (4, 2, 2), (2, 2, 2, 2), (2, 4, 2), (3, 1, 4), (4, 3, 1),
        ),
        Difficulty.ADVANCED: (
            (4, 4), (2, 2, 4), (4, 2, 2), (2, 2, 2, 2), (2, 4, 2),
            (1, 1, 2, 2, 2), (2, 2, 1, 1, 2), (2, 2, 2, 1, 1), (4, 2, 1, 1),
            (3, 1, 2, 2), (2, 3, 1, 2), (1, 1, 1, 1, 4),
        ),
    },
    "3/4": {
        Difficulty.BEGINNER: ((6,), (4, 2), (2, 4)),
        Difficulty.ELEMENTARY: ((2, 2, 2), (4, 2), (2, 4), (6,)),
        Difficulty.INTERMEDIATE: ((2, 2, 2), (4, 2), (2, 4), (3, 1, 2), (2, 1, 1, 2)),
        Difficulty.ADVANCED: (
            (2, 2, 2), (1, 1, 2, 2), (2, 1, 1, 2), (2, 2, 1, 1), (4, 1, 1), (1, 1, 4), (3, 1, 2),
        ),
    },
    "2/4": {
        Difficulty.BEGINNER: ((4,), (2, 2)),
        Difficulty.ELEMENTARY: ((2, 2), (4,)),
        Difficulty.INTERMEDIATE: ((2, 2), (4,), (1, 1, 2), (3, 1)),
        Difficulty.ADVANCED: ((2, 2), (1, 1, 2), (2, 1, 1), (1, 1, 1, 1), (3, 1)),
    },
}

# Where a ``split`` measure hands over from the first hand to the second.
_SPLIT_POINTS: Dict[str, int] = {"4/4": 4, "3/4": 4, "2/4": 2}

# Fragment catalogs keyed by the fragment's own budget.
_SPLIT_RHYTHMS: Dict[Difficulty, Dict[int, Tuple[Rhythm, ...]]] = {
    Difficulty.BEGINNER: {2: ((2,),), 4: ((4,),)},
    Difficulty.ELEMENTARY: {2: ((2,),), 4: ((4,), (2, 2))},
    Difficulty.INTERMEDIATE: {2: ((2,), (1, 1)), 4: ((4,), (2, 2), (3, 1))},
    Difficulty.ADVANCED: {2: ((2,), (1, 1)), 4: ((4,), (2, 2), (1, 1, 2), (2, 1, 1), (3, 1))},
}

_ACCOMPANIMENT: Dict[str, Dict[Difficulty, Tuple[AccompanimentFigure, ...]]] = {
    "4/4": {
        Difficulty.BEGINNER: (((0, 8),), ((0, 4), (2, 4))),
        Difficulty.ELEMENTARY: (((0, 8),), ((0, 4), (2, 4))),
        Difficulty.INTERMEDIATE: (
            ((0, 8),),
            ((0, 4), (2, 4)),
            ((0, 2), (1, 2), (2, 2), (1, 2)),
        ),
        Difficulty.ADVANCED: (
            ((0, 8),),
            ((0, 4), (2, 4)),
            ((0, 2), (1, 2), (2, 2), (1, 2)),
            ((0, 2), (2, 2), (1, 2), (2, 2)),
            ((0, 2), (1, 2), (0, 2), (2, 2)),
        ),
    },
    "3/4": {
        Difficulty.BEGINNER: (((0, 6),), ((0, 4), (2, 2))),
        Difficulty.ELEMENTARY: (((0, 6),), ((0, 4), (2, 2))),
        Difficulty.INTERMEDIATE: (((0, 6),), ((0, 4), (2, 2)), ((0, 2), (1, 2), (2, 2))),
        Difficulty.ADVANCED: (
            ((0, 6),),
            ((0, 4), (2, 2)),
            ((0, 2), (1, 2), (2, 2)),
            ((0, 2), (2, 2), (1, 2)),
        ),
    },
    "2/4": {
        Difficulty.BEGINNER: (((0, 4),), ((0, 2), (2, 2))),
        Difficulty.ELEMENTARY: (((0, 4),), ((0, 2), (2, 2))),
        Difficulty.INTERMEDIATE: (((0, 4),), ((0, 2), (2, 2)), ((0, 2), (1, 2))),
        Difficulty.ADVANCED: (
            ((0, 4),),
            ((0, 2), (2, 2)),
            ((0, 2), (1, 2)),
            ((0, 1), (2, 1), (1, 1), (2, 1)),
        ),
    },
}

_FIVE_FINGER = {
    Hand.RH: (Pitch(0, 4), Pitch(4, 4)),
    Hand.LH: (Pitch(0, 3), Pitch(4, 3)),
}
_OCTAVE = {
    Hand.RH: (Pitch(0, 4), Pitch(0, 5)),
    Hand.LH: (Pitch(0, 3), Pitch(0, 4)),
}
_TWELFTH = {
    Hand.RH: (Pitch(0, 4), Pitch(4, 5)),
    Hand.LH: (Pitch(0, 3), Pitch(4, 4)),
}

_POOL_BOUNDS: Dict[Difficulty, Dict[Hand, Tuple[Pitch, Pitch]]] = {
    Difficulty.BEGINNER: _FIVE_FINGER,
    Difficulty.ELEMENTARY: _OCTAVE,
    Difficulty.INTERMEDIATE: _TWELFTH,
    Difficulty.ADVANCED: _TWELFTH,
}

# rest, staccato, slur, accidental, accent, crescendo/diminuendo
_PROBABILITIES: Dict[Difficulty, Tuple[float, float, float, float, float, float]] = {
    Difficulty.BEGINNER: (0.0, 0.0, 0.0, 0.0, 0.0, 0.8),
    Difficulty.ELEMENTARY: (0.04, 0.10, 0.15, 0.05, 0.05, 0.0),
    Difficulty.INTERMEDIATE: (0.06, 0.12, 0.20, 0.08, 0.08, 0.0),
    Difficulty.ADVANCED: (0.08, 0.20, 0.25, 0.12, 0.12, 0.0),
}


def _build_profiles() -> Dict[Tuple[str, Difficulty], DifficultyProfile]:
    profiles: Dict[Tuple[str, Difficulty], DifficultyProfile] = {}
    for time_signature in TIME_SIGNATURES:
        for difficulty in Difficulty:
            rest, staccato, slur, accidental, accent, cresc = _PROBABILITIES[difficulty]
            profiles[(time_signature, difficulty)] = DifficultyProfile(
                time_signature=time_signature,
                difficulty=difficulty,
                rhythms=_RHYTHMS[time_signature][difficulty],
                split_point=_SPLIT_POINTS[time_signature],
                split_rhythms=_SPLIT_RHYTHMS[difficulty],
                accompaniment=_ACCOMPANIMENT[time_signature][difficulty],
                pool_bounds=_POOL_BOUNDS[difficulty],
                rest_prob=rest,
                staccato_prob=staccato,
                slur_prob=slur,
                accidental_prob=accidental,
                accent_prob=accent,
                cresc_dim_prob=cresc,
            )
    return profiles


_PROFILES = _build_profiles()


def parse_difficulty(value) -> Difficulty:
    """Return the :class:`Difficulty` named by ``value`` (case-insensitive)."""

    if isinstance(value, Difficulty):
        return value
    try:
        return Difficulty(str(value).strip().lower())
    except ValueError:
        raise InvalidParameter(f"Unknown difficulty: {value!r}") from None


def measure_budget(time_signature: str) -> int:
    """Return the eighth-note budget of ``time_signature``.

    Raises
    ------
    InvalidParameter
        If the time signature is not one of :data:`TIME_SIGNATURES`.
    """

    try:
        return MEASURE_BUDGETS[time_signature]
    except KeyError:
        raise InvalidParameter(f"Unsupported time signature: {time_signature!r}") from None


def get_profile(time_signature: str, difficulty) -> DifficultyProfile:
    """Look up the profile for ``time_signature`` and ``difficulty``."""

    measure_budget(time_signature)
    return _PROFILES[(time_signature, parse_difficulty(difficulty))]
