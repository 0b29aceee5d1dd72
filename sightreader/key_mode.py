"""Key and mode resolution.

A key label such as ``"C"``, ``"F#m"``, ``"Bb"`` or ``"D dor"`` is parsed into
a :class:`KeyMode` describing the tonic, one of six diatonic modes and the
semitone layout of the scale.  Every pitch produced by the generator is
stored as a scale degree relative to this tonic, so the resolved key is the
single place where degrees become real pitch classes.

Mode detection
--------------
Explicit suffix tokens win (``dor``, ``mix``, ``lyd``, ``phr``, ``maj``,
``min`` and their long forms).  Without one, a bare trailing lowercase
``m`` means minor; everything else is major.

Example
-------
>>> resolve_key("Am").mode
'minor'
>>> sorted(resolve_key("Am").sharpenable_degrees)
[5, 6]
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, FrozenSet, Tuple

from .errors import InvalidKey

__all__ = [
    "KeyMode",
    "resolve_key",
    "LETTERS",
    "MODES",
    "MODE_INTERVALS",
    "NATURAL_SEMITONES",
]

# Natural letter names in diatonic order. Index 0 is C so letter indices match
# the staff-position convention used by the notation adapter.
LETTERS: Tuple[str, ...] = ("C", "D", "E", "F", "G", "A", "B")

NATURAL_SEMITONES: Dict[str, int] = {
    "C": 0,
    "D": 2,
    "E": 4,
    "F": 5,
    "G": 7,
    "A": 9,
    "B": 11,
}

_ALTERATIONS: Dict[str, int] = {"#": 1, "b": -1}

# Semitone offsets from the tonic for each supported mode.
MODE_INTERVALS: Dict[str, Tuple[int, ...]] = {
    "major": (0, 2, 4, 5, 7, 9, 11),
    "minor": (0, 2, 3, 5, 7, 8, 10),
    "dorian": (0, 2, 3, 5, 7, 9, 10),
    "mixolydian": (0, 2, 4, 5, 7, 9, 10),
    "lydian": (0, 2, 4, 6, 7, 9, 11),
    "phrygian": (0, 1, 3, 5, 7, 8, 10),
}

MODES: Tuple[str, ...] = tuple(MODE_INTERVALS)

# Suffix tokens recognised after the tonic. Matching is done on the first three
# letters so both ``"dor"`` and ``"dorian"`` resolve to the same mode.
_SUFFIX_MODES: Dict[str, str] = {
    "maj": "major",
    "ion": "major",
    "min": "minor",
    "aeo": "minor",
    "dor": "dorian",
    "mix": "mixolydian",
    "lyd": "lydian",
    "phr": "phrygian",
}

# ABC ``K:`` suffix for each mode.
_ABC_MODE_SUFFIX: Dict[str, str] = {
    "major": "",
    "minor": "m",
    "dorian": "Dor",
    "mixolydian": "Mix",
    "lydian": "Lyd",
    "phrygian": "Phr",
}

# Only the sixth and seventh degrees are ever raised as chromatic colour.
_RAISABLE_CANDIDATES = (5, 6)


@dataclass(frozen=True)
class KeyMode:
    """Resolved key information.

    Attributes
    ----------
    label:
        Canonical key label, e.g. ``"F#m"`` or ``"D dor"``.
    tonic:
        Tonic spelling including accidental, e.g. ``"F#"``.
    mode:
        One of :data:`MODES`.
    root_semitone:
        Pitch class of the tonic (``0`` = C).
    diatonic_intervals:
        Seven semitone offsets of the scale degrees from the tonic.
    sharpenable_degrees:
        Scale degrees eligible for a raised accidental.
    """

    label: str
    tonic: str
    mode: str
    root_semitone: int
    diatonic_intervals: Tuple[int, ...]
    sharpenable_degrees: FrozenSet[int]

    @property
    def tonic_letter(self) -> int:
        """Absolute letter index (0 = C) of the tonic."""

        return LETTERS.index(self.tonic[0])

    @property
    def tonic_alteration(self) -> int:
        """Semitone alteration of the tonic spelling (``-1``, ``0`` or ``1``)."""

        return _ALTERATIONS.get(self.tonic[1:], 0)

    @property
    def abc_key(self) -> str:
        """Key signature value for an ABC ``K:`` header field."""

        return f"{self.tonic}{_ABC_MODE_SUFFIX[self.mode]}"

    def degree_semitone(self, degree: int) -> int:
        """Return the semitone offset of ``degree`` (any integer) from the tonic."""

        octaves, step = divmod(degree, 7)
        return self.diatonic_intervals[step] + 12 * octaves

    @property
    def tonic_semitone(self) -> int:
        """Semitone of the tonic above C without wrapping (``Cb`` is ``-1``)."""

        return NATURAL_SEMITONES[self.tonic[0]] + self.tonic_alteration

    def letter_of(self, degree: int) -> Tuple[int, int]:
        """Return ``(letter_index, octave_carry)`` spelling ``degree``.

        ``letter_index`` counts from C; ``octave_carry`` is ``1`` when the
        letter wraps past B into the next octave.
        """

        return divmod(self.tonic_letter + degree, 7)[::-1]

    def signature_alteration(self, degree: int) -> int:
        """Semitones the key signature adds to the letter spelling ``degree``."""

        letter, carry = self.letter_of(degree)
        actual = self.tonic_semitone + self.diatonic_intervals[degree % 7]
        natural = NATURAL_SEMITONES[LETTERS[letter]] + 12 * carry
        return actual - natural


def _detect_mode(rest: str, label: str) -> str:
    """Return the mode named by the text following the tonic."""

    token = rest.strip()
    if not token:
        return "major"
    prefix = token.lower()[:3]
    if prefix in _SUFFIX_MODES:
        return _SUFFIX_MODES[prefix]
    if token == "m":
        return "minor"
    logging.warning("Unrecognised mode suffix %r in key %r; assuming major.", token, label)
    return "major"


def _sharpenable(mode: str, intervals: Tuple[int, ...]) -> FrozenSet[int]:
    """Return degrees that can be raised a semitone without hitting the next degree."""

    if mode in ("major", "lydian"):
        return frozenset()
    degrees = set()
    for degree in _RAISABLE_CANDIDATES:
        upper = intervals[degree + 1] if degree + 1 < 7 else 12
        if upper - intervals[degree] > 1:
            degrees.add(degree)
    return frozenset(degrees)


@lru_cache(maxsize=None)
def resolve_key(label: str) -> KeyMode:
    """Parse ``label`` into a :class:`KeyMode`.

    Parameters
    ----------
    label:
        Tonic letter, optional ``#``/``b`` accidental and optional mode
        suffix, e.g. ``"C"``, ``"Ebm"``, ``"G mix"``.

    Returns
    -------
    KeyMode
        Resolved tonic, mode and scale layout.

    Raises
    ------
    InvalidKey
        If the label is empty or does not start with a letter ``A``-``G``.
    """

    text = (label or "").strip()
    if not text or text[0].upper() not in NATURAL_SEMITONES:
        raise InvalidKey(f"Unknown key: {label!r}")

    letter = text[0].upper()
    rest = text[1:]
    accidental = ""
    # A ``b`` directly after the letter is always a flat: ``"Bbm"`` is B-flat
    # minor while ``"bm"`` is B minor.
    if rest[:1] in _ALTERATIONS:
        accidental, rest = rest[0], rest[1:]

    mode = _detect_mode(rest, label)
    intervals = MODE_INTERVALS[mode]
    tonic = letter + accidental
    root = (NATURAL_SEMITONES[letter] + _ALTERATIONS.get(accidental, 0)) % 12

    suffix = _ABC_MODE_SUFFIX[mode]
    canonical = f"{tonic}{suffix}" if mode in ("major", "minor") else f"{tonic} {suffix.lower()}"
    return KeyMode(
        label=canonical,
        tonic=tonic,
        mode=mode,
        root_semitone=root,
        diatonic_intervals=intervals,
        sharpenable_degrees=_sharpenable(mode, intervals),
    )
