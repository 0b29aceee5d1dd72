"""Staff-notation view of a score.

Renderers do not need to understand scale degrees or modes.  This module
flattens a :class:`~sightreader.models.Score` into :class:`NotationEvent`
records that carry a staff position (``0`` is middle C, one step per letter
name), a notehead/stem/flag description of the duration and every
articulation and expression flag of the source event.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

from .key_mode import KeyMode, resolve_key
from .models import Dynamic, Hairpin, Hand, NoteEvent, Pitch, Score

__all__ = [
    "CLEFS",
    "Glyph",
    "NotationEvent",
    "glyph_for",
    "notation_events",
    "staff_position",
]

CLEFS: Dict[Hand, str] = {Hand.RH: "treble", Hand.LH: "bass"}

_ACCIDENTAL_NAMES = {-1: "flat", 0: "natural", 1: "sharp", 2: "double-sharp"}


@dataclass(frozen=True)
class Glyph:
    """Drawing instructions for one duration."""

    notehead: str
    stem: bool
    flags: int
    dotted: bool


# Durations in eighth notes.
_GLYPHS: Dict[int, Glyph] = {
    1: Glyph("filled", True, 1, False),
    2: Glyph("filled", True, 0, False),
    3: Glyph("filled", True, 0, True),
    4: Glyph("open", True, 0, False),
    6: Glyph("open", True, 0, True),
    8: Glyph("open", False, 0, False),
}


def glyph_for(duration: int) -> Glyph:
    """Return the :class:`Glyph` drawing ``duration`` eighths.

    Raises
    ------
    ValueError
        If ``duration`` has no single-glyph representation.
    """

    try:
        return _GLYPHS[duration]
    except KeyError:
        raise ValueError(f"No glyph for a duration of {duration} eighths") from None


def staff_position(pitch: Pitch, key: KeyMode) -> int:
    """Return the staff step of ``pitch`` in ``key``, counting middle C as ``0``."""

    letter, carry = key.letter_of(pitch.degree)
    return (pitch.octave + carry - 4) * 7 + letter


@dataclass(frozen=True)
class NotationEvent:
    """A note or rest ready for glyph placement."""

    hand: Hand
    clef: str
    measure: int
    onset: int
    duration: int
    glyph: Glyph
    position: Optional[int] = None
    accidental: Optional[str] = None
    staccato: bool = False
    accent: bool = False
    slur_start: bool = False
    slur_end: bool = False
    dynamic: Optional[Dynamic] = None
    hairpin_start: Optional[Hairpin] = None
    hairpin_end: bool = False

    @property
    def is_rest(self) -> bool:
        return self.position is None


def _view(event: NoteEvent, hand: Hand, measure: int, onset: int, key: KeyMode) -> NotationEvent:
    position = accidental = None
    if not event.is_rest:
        position = staff_position(event.pitch, key)
        if event.raised:
            accidental = _ACCIDENTAL_NAMES[key.signature_alteration(event.pitch.degree) + 1]
    return NotationEvent(
        hand=hand,
        clef=CLEFS[hand],
        measure=measure,
        onset=onset,
        duration=event.duration,
        glyph=glyph_for(event.duration),
        position=position,
        accidental=accidental,
        staccato=event.staccato,
        accent=event.accent,
        slur_start=event.slur_start,
        slur_end=event.slur_end,
        dynamic=event.dynamic,
        hairpin_start=event.hairpin_start,
        hairpin_end=event.hairpin_end,
    )


def notation_events(score: Score) -> List[NotationEvent]:
    """Flatten ``score`` into right-hand events followed by left-hand events."""

    key = resolve_key(score.key)
    views: List[NotationEvent] = []
    for hand, voice in score.voices():
        for index, measure in enumerate(voice):
            onset = 0
            for event in measure:
                views.append(_view(event, hand, index, onset, key))
                onset += event.duration
    return views
