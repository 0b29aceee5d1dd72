"""MIDI rendering of generated scores.

``build_midi`` converts a :class:`~sightreader.models.Score` into an in-memory
``mido.MidiFile`` with a tempo track followed by one track per hand.
``create_midi_file`` writes it to disk, creating the destination directory
when necessary.

Velocities follow the most recent dynamic marking in each voice and start
at :data:`DEFAULT_VELOCITY`; accents add :data:`ACCENT_BOOST`.  Staccato
notes sound for half their written length while other notes release a few
ticks early so repeated pitches re-articulate.

``mido`` is imported lazily so the generator itself can be used without the
MIDI dependency installed.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

if TYPE_CHECKING:
    from mido import MidiFile

from .key_mode import KeyMode, resolve_key
from .models import Dynamic, Hand, NoteEvent, Pitch, Score

__all__ = [
    "ACCENT_BOOST",
    "DEFAULT_VELOCITY",
    "TICKS_PER_BEAT",
    "build_midi",
    "create_midi_file",
    "dynamic_velocity",
    "pitch_to_midi",
]

TICKS_PER_BEAT = 480
TICKS_PER_EIGHTH = TICKS_PER_BEAT // 2

DEFAULT_VELOCITY = 72
ACCENT_BOOST = 12

# Legato notes stop this many ticks before the next onset.
RELEASE_GAP = 10

_VELOCITIES: Dict[Dynamic, int] = {
    Dynamic.F: 100,
    Dynamic.MF: 80,
    Dynamic.MP: 64,
    Dynamic.P: 48,
}

CHANNELS: Dict[Hand, int] = {Hand.RH: 0, Hand.LH: 1}


def _import_mido():
    try:
        import mido
    except ModuleNotFoundError as exc:
        raise ImportError(
            "mido is required to create MIDI files; install it with 'pip install mido'"
        ) from exc
    return mido


def pitch_to_midi(pitch: Pitch, key: KeyMode, raised: bool = False) -> int:
    """Return the MIDI note number of ``pitch`` in ``key``.

    ``Pitch(0, 4)`` is the tonic in the octave of middle C, so in C major it
    maps to ``60``.

    Raises
    ------
    ValueError
        If the result falls outside ``0-127``.
    """

    number = 12 * (pitch.octave + 1) + key.tonic_semitone + key.degree_semitone(pitch.degree)
    if raised:
        number += 1
    if not 0 <= number <= 127:
        raise ValueError(f"{pitch} in {key.label} is outside the MIDI range")
    return number


def dynamic_velocity(dynamic: Optional[Dynamic], accent: bool = False) -> int:
    """Return the note-on velocity for ``dynamic`` with an optional accent."""

    velocity = DEFAULT_VELOCITY if dynamic is None else _VELOCITIES[dynamic]
    if accent:
        velocity += ACCENT_BOOST
    return max(1, min(127, velocity))


def _sounding_ticks(event: NoteEvent) -> int:
    written = event.duration * TICKS_PER_EIGHTH
    if event.staccato:
        return written // 2
    return max(1, written - RELEASE_GAP)


def _voice_events(voice, key: KeyMode) -> List[Tuple[int, int, str, int, int]]:
    """Return ``(tick, order, type, note, velocity)`` tuples for one voice.

    ``order`` sorts note-offs before note-ons that share a tick.
    """

    events: List[Tuple[int, int, str, int, int]] = []
    tick = 0
    active: Optional[Dynamic] = None
    for measure in voice:
        for event in measure:
            if event.dynamic is not None:
                active = event.dynamic
            if not event.is_rest:
                note = pitch_to_midi(event.pitch, key, event.raised)
                velocity = dynamic_velocity(active, event.accent)
                events.append((tick, 1, "note_on", note, velocity))
                events.append((tick + _sounding_ticks(event), 0, "note_off", note, 0))
            tick += event.duration * TICKS_PER_EIGHTH
    events.sort(key=lambda e: (e[0], e[1]))
    return events


def build_midi(score: Score, bpm: int = 90) -> "MidiFile":
    """Return a ``mido.MidiFile`` playing ``score`` at ``bpm`` quarter notes per minute."""

    mido = _import_mido()
    if bpm <= 0:
        raise ValueError("bpm must be a positive integer")

    key = resolve_key(score.key)
    numerator, denominator = (int(part) for part in score.time_signature.split("/"))
    mid = mido.MidiFile(ticks_per_beat=TICKS_PER_BEAT)

    tempo_track = mido.MidiTrack()
    mid.tracks.append(tempo_track)
    tempo_track.append(mido.MetaMessage("set_tempo", tempo=mido.bpm2tempo(bpm)))
    tempo_track.append(
        mido.MetaMessage("time_signature", numerator=numerator, denominator=denominator)
    )

    for hand, voice in score.voices():
        channel = CHANNELS[hand]
        track = mido.MidiTrack()
        mid.tracks.append(track)
        track.append(mido.MetaMessage("track_name", name=hand.value.upper()))
        track.append(mido.Message("program_change", program=0, channel=channel, time=0))
        last = 0
        for tick, _, kind, note, velocity in _voice_events(voice, key):
            track.append(
                mido.Message(kind, note=note, velocity=velocity, channel=channel, time=tick - last)
            )
            last = tick
    return mid


def create_midi_file(score: Score, bpm: int, output_file: str) -> "MidiFile":
    """Write ``score`` to ``output_file`` and return the ``MidiFile``."""

    mid = build_midi(score, bpm)
    path = Path(output_file).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    mid.save(str(path))
    logging.info("MIDI file saved to %s", output_file)
    return mid
