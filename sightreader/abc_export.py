"""ABC notation export.

The score is written as a two-voice ABC tune::

    X:1
    T:Sight-Reading Exercise
    M:4/4
    L:1/8
    K:Am
    V:1 clef=treble name="RH"
    V:2 clef=bass name="LH"
    [V:1] !f!A2 c2 e4 | ... |]
    [V:2] !f!A,8 | ... |]

Each event becomes one space-separated token built from, in order: slur
open ``(``, hairpin open or close, dynamic, accent ``!>!``, staccato ``.``,
accidental, pitch letter (or rest ``z``), duration in eighths (omitted
when ``1``) and slur close ``)``.

Accidentals are written relative to the key signature and follow the ABC
rule that an accidental lasts until the bar line: a note whose sounding
alteration differs from the one currently in force for its letter and
octave is prefixed with ``_``, ``=``, ``^`` or ``^^``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from .key_mode import LETTERS, KeyMode, resolve_key
from .models import Hairpin, Hand, Measure, NoteEvent, Score, Voice

__all__ = ["DEFAULT_TITLE", "pitch_token", "to_abc", "write_abc"]

DEFAULT_TITLE = "Sight-Reading Exercise"

_ACCIDENTAL_TOKENS: Dict[int, str] = {-2: "__", -1: "_", 0: "=", 1: "^", 2: "^^"}

_VOICE_HEADERS: Dict[Hand, Tuple[str, str]] = {
    Hand.RH: ("1", 'clef=treble name="RH"'),
    Hand.LH: ("2", 'clef=bass name="LH"'),
}


def pitch_token(letter: int, octave: int) -> str:
    """Return the ABC spelling of letter index ``letter`` in ``octave``.

    Octave 4 is written in upper case (``C`` is middle C) with one comma
    per octave below; octave 5 is lower case with one apostrophe per
    octave above.
    """

    name = LETTERS[letter]
    if octave <= 4:
        return name + "," * (4 - octave)
    return name.lower() + "'" * (octave - 5)


class _VoiceWriter:
    """Serialise the measures of one voice, tracking bar-scoped state."""

    def __init__(self, key: KeyMode) -> None:
        self.key = key
        self.open_hairpin: Optional[Hairpin] = None
        self.in_force: Dict[Tuple[int, int], int] = {}

    def _pitch(self, event: NoteEvent) -> str:
        letter, carry = self.key.letter_of(event.pitch.degree)
        octave = event.pitch.octave + carry
        signature = self.key.signature_alteration(event.pitch.degree)
        wanted = signature + (1 if event.raised else 0)
        prefix = ""
        if self.in_force.get((letter, octave), signature) != wanted:
            prefix = _ACCIDENTAL_TOKENS[wanted]
            self.in_force[(letter, octave)] = wanted
        return prefix + pitch_token(letter, octave)

    def token(self, event: NoteEvent) -> str:
        parts: List[str] = []
        if event.slur_start:
            parts.append("(")
        if event.hairpin_end and self.open_hairpin is not None:
            parts.append(f"!{self.open_hairpin.value})!")
            self.open_hairpin = None
        if event.hairpin_start is not None:
            parts.append(f"!{event.hairpin_start.value}(!")
            self.open_hairpin = event.hairpin_start
        if event.dynamic is not None:
            parts.append(f"!{event.dynamic.value}!")
        if event.accent:
            parts.append("!>!")
        if event.staccato:
            parts.append(".")
        parts.append("z" if event.is_rest else self._pitch(event))
        if event.duration != 1:
            parts.append(str(event.duration))
        if event.slur_end:
            parts.append(")")
        return "".join(parts)

    def measure(self, measure: Measure) -> str:
        self.in_force = {}
        return " ".join(self.token(event) for event in measure)

    def voice(self, voice: Voice) -> str:
        return " | ".join(self.measure(m) for m in voice) + " |]"


def to_abc(score: Score, title: str = DEFAULT_TITLE) -> str:
    """Return ``score`` as ABC notation text ending with a newline."""

    key = resolve_key(score.key)
    lines = [
        "X:1",
        f"T:{title}",
        f"M:{score.time_signature}",
        "L:1/8",
        f"K:{key.abc_key}",
    ]
    for hand, _ in score.voices():
        number, attributes = _VOICE_HEADERS[hand]
        lines.append(f"V:{number} {attributes}")
    for hand, voice in score.voices():
        number, _ = _VOICE_HEADERS[hand]
        lines.append(f"[V:{number}] {_VoiceWriter(key).voice(voice)}")
    return "\n".join(lines) + "\n"


def write_abc(score: Score, output_file: str, title: str = DEFAULT_TITLE) -> str:
    """Write ``score`` to ``output_file`` as ABC and return the text."""

    text = to_abc(score, title)
    path = Path(output_file).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    logging.info("ABC file saved to %s", output_file)
    return text
