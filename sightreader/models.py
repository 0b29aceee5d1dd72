"""Value types shared by every stage of the generator.

All records are frozen dataclasses.  Stages never patch an event in place;
they build a new one with :meth:`NoteEvent.with_` so intermediate results
can be compared and reused freely in tests.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from functools import total_ordering
from typing import Iterator, Optional, Tuple

__all__ = [
    "Hand",
    "Dynamic",
    "Hairpin",
    "Pitch",
    "NoteEvent",
    "Measure",
    "Voice",
    "HandBlock",
    "Score",
]


class Hand(str, Enum):
    """Performing configuration of a block of measures."""

    RH = "rh"
    LH = "lh"
    BOTH = "both"
    SPLIT = "split"

    @property
    def other(self) -> "Hand":
        """Return the opposite single hand. Only defined for ``RH``/``LH``."""

        if self is Hand.RH:
            return Hand.LH
        if self is Hand.LH:
            return Hand.RH
        raise ValueError(f"{self.value!r} has no opposite hand")


class Dynamic(str, Enum):
    """Dynamic markings, softest first."""

    P = "p"
    MP = "mp"
    MF = "mf"
    F = "f"


class Hairpin(str, Enum):
    """Crescendo or diminuendo span type."""

    CRESCENDO = "crescendo"
    DIMINUENDO = "diminuendo"


@total_ordering
@dataclass(frozen=True)
class Pitch:
    """A diatonic pitch relative to the tonic.

    ``degree`` is the letter index counted from the tonic (``0`` is the
    tonic, so in C major ``0`` = C and ``6`` = B). Pitches order by
    ``(octave, degree)``.
    """

    degree: int
    octave: int

    def __post_init__(self) -> None:
        if not 0 <= self.degree <= 6:
            raise ValueError(f"degree must be between 0 and 6, got {self.degree}")

    @property
    def number(self) -> int:
        """Diatonic step count from degree 0 of octave 0."""

        return self.octave * 7 + self.degree

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Pitch):
            return NotImplemented
        return (self.octave, self.degree) < (other.octave, other.degree)


@dataclass(frozen=True)
class NoteEvent:
    """A sounding note or a rest lasting ``duration`` eighth notes."""

    duration: int
    pitch: Optional[Pitch] = None
    staccato: bool = False
    accent: bool = False
    slur_start: bool = False
    slur_end: bool = False
    raised: bool = False
    dynamic: Optional[Dynamic] = None
    hairpin_start: Optional[Hairpin] = None
    hairpin_end: bool = False

    def __post_init__(self) -> None:
        if self.duration <= 0:
            raise ValueError(f"duration must be positive, got {self.duration}")
        if self.pitch is None and (
            self.staccato or self.accent or self.slur_start or self.slur_end or self.raised
        ):
            raise ValueError("rests cannot carry staccato, accent, slur or accidental flags")

    @classmethod
    def rest(cls, duration: int) -> "NoteEvent":
        return cls(duration)

    @classmethod
    def note(cls, pitch: Pitch, duration: int) -> "NoteEvent":
        return cls(duration, pitch)

    @property
    def is_rest(self) -> bool:
        return self.pitch is None

    def with_(self, **changes) -> "NoteEvent":
        """Return a copy of this event with ``changes`` applied."""

        return replace(self, **changes)


@dataclass(frozen=True)
class Measure:
    """Ordered events filling one bar."""

    events: Tuple[NoteEvent, ...]

    @property
    def duration(self) -> int:
        return sum(e.duration for e in self.events)

    @property
    def has_notes(self) -> bool:
        return any(not e.is_rest for e in self.events)

    def __iter__(self) -> Iterator[NoteEvent]:
        return iter(self.events)

    def __len__(self) -> int:
        return len(self.events)


# One hand's measures, indexed by score measure number.
Voice = Tuple[Measure, ...]


@dataclass(frozen=True)
class HandBlock:
    """Half-open range ``[start, stop)`` of measures played in one configuration."""

    start: int
    stop: int
    hand: Hand

    def __post_init__(self) -> None:
        if self.stop <= self.start:
            raise ValueError(f"empty hand block [{self.start}, {self.stop})")

    @property
    def measures(self) -> range:
        return range(self.start, self.stop)

    def __len__(self) -> int:
        return self.stop - self.start


@dataclass(frozen=True)
class Score:
    """Finished two-hand exercise handed to renderers and players."""

    right: Voice
    left: Voice
    key: str
    time_signature: str
    progression: Tuple[int, ...]
    difficulty: str = "intermediate"
    blocks: Tuple[HandBlock, ...] = ()

    @property
    def num_measures(self) -> int:
        return len(self.right)

    def voices(self) -> Tuple[Tuple[Hand, Voice], Tuple[Hand, Voice]]:
        """Return ``((Hand.RH, right), (Hand.LH, left))``."""

        return ((Hand.RH, self.right), (Hand.LH, self.left))
