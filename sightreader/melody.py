"""Melodic line generation.

Each hand owns a *note pool*: the ordered diatonic pitches between the
profile's bounds for that hand.  A running cursor indexes into the pool and
moves once per sounding slot, so melodic motion is measured in pool steps
rather than semitones.

Slot rules, in order of precedence:

1.  **Rest** -- on tiers with a non-zero ``rest_prob`` a weak-beat slot may
    become a rest.  The first slot of a line and the final slot of the
    resolving line are never rests.  Rests leave the cursor in place.
2.  **Tonic resolution** -- the final slot of the resolving line jumps to the
    tonic nearest the cursor, overriding everything below.
3.  **Harmony tiers** (intermediate, advanced) -- strong beats snap to the
    nearest chord tone; weak beats snap with probability
    :data:`WEAK_BEAT_SNAP` and otherwise step by one.
4.  **Walk tiers** (beginner, elementary) -- steps of one (80%) or two (20%)
    in a random direction, refusing a third consecutive repeat of the same
    pitch.

In ``both`` blocks the left hand does not walk.  It plays a chord figure
voiced from the measure's harmony, see :meth:`MelodyGenerator.accompaniment`.
"""

from __future__ import annotations

import logging
import random
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .harmony_generator import chord_tones, voicing
from .models import Hand, NoteEvent, Pitch
from .profiles import STRONG_BEATS, AccompanimentFigure, DifficultyProfile
from .rhythm_engine import onsets

__all__ = [
    "NotePool",
    "MelodyGenerator",
    "WEAK_BEAT_SNAP",
    "SMALL_STEP_PROBABILITY",
    "MAX_WALK_ATTEMPTS",
]

WEAK_BEAT_SNAP = 0.3
SMALL_STEP_PROBABILITY = 0.8
MAX_WALK_ATTEMPTS = 20

_TONIC = frozenset({0})


class NotePool:
    """Ordered diatonic pitches from ``low`` to ``high`` inclusive."""

    def __init__(self, low: Pitch, high: Pitch) -> None:
        if high < low:
            raise ValueError(f"pool bounds reversed: {low} > {high}")
        self.pitches: Tuple[Pitch, ...] = tuple(
            Pitch(n % 7, n // 7) for n in range(low.number, high.number + 1)
        )
        if len(self.pitches) < 2:
            raise ValueError("a note pool needs at least two pitches")

    def __len__(self) -> int:
        return len(self.pitches)

    def __getitem__(self, index: int) -> Pitch:
        return self.pitches[index]

    def clamp(self, index: int) -> int:
        return max(0, min(len(self.pitches) - 1, index))

    def nearest_index(self, index: int, degrees: Iterable[int]) -> int:
        """Return the pool index with a degree in ``degrees`` closest to ``index``.

        Ties resolve toward the lower index.
        """

        wanted = set(degrees)
        matches = [i for i, p in enumerate(self.pitches) if p.degree in wanted]
        if not matches:
            return index
        return min(matches, key=lambda i: (abs(i - index), i))

    def nearest_to_pitch(self, pitch: Pitch, degrees: Iterable[int]) -> Pitch:
        """Return the pool pitch with a degree in ``degrees`` closest to ``pitch``."""

        wanted = set(degrees)
        matches = [p for p in self.pitches if p.degree in wanted]
        if not matches:
            return pitch
        return min(matches, key=lambda p: (abs(p.number - pitch.number), p.number))


class MelodyGenerator:
    """Generate per-hand lines for one piece.

    Parameters
    ----------
    profile:
        Difficulty profile supplying pools and probabilities.
    progression:
        Chord root per measure.
    rng:
        Shared random source. Draw order is fixed by call order.
    """

    def __init__(
        self,
        profile: DifficultyProfile,
        progression: Sequence[int],
        rng: random.Random,
    ) -> None:
        self.profile = profile
        self.progression = list(progression)
        self.rng = rng
        self.pools: Dict[Hand, NotePool] = {
            hand: NotePool(*profile.pool_bounds[hand]) for hand in (Hand.RH, Hand.LH)
        }
        self._cursor: Dict[Hand, Optional[int]] = {Hand.RH: None, Hand.LH: None}
        self._history: Dict[Hand, List[int]] = {Hand.RH: [], Hand.LH: []}
        self._strong = set(STRONG_BEATS[profile.time_signature])

    # ------------------------------------------------------------------
    # Pitch selection
    # ------------------------------------------------------------------
    def _harmonic_index(self, pool: NotePool, cursor: int, measure: int, strong: bool) -> int:
        tones = chord_tones(self.progression[measure])
        if strong or self.rng.random() < WEAK_BEAT_SNAP:
            return pool.nearest_index(cursor, tones)
        return pool.clamp(cursor + self.rng.choice((-1, 1)))

    def _walk_index(self, pool: NotePool, cursor: int, history: Sequence[int]) -> int:
        repeated = len(history) >= 2 and history[-1] == history[-2]
        for _ in range(MAX_WALK_ATTEMPTS):
            size = 1 if self.rng.random() < SMALL_STEP_PROBABILITY else 2
            candidate = pool.clamp(cursor + size * self.rng.choice((-1, 1)))
            if not (repeated and candidate == history[-1]):
                return candidate
        fallback = cursor + 1 if cursor + 1 < len(pool) else cursor - 1
        logging.debug("Walk retries exhausted at index %d; using neighbour %d", cursor, fallback)
        return fallback

    def _next_index(self, hand: Hand, measure: int, strong: bool, final: bool) -> int:
        pool = self.pools[hand]
        cursor = self._cursor[hand]
        if cursor is None:
            cursor = self.rng.randrange(len(pool))
            if not final and not self.profile.uses_harmony:
                return cursor
        if final:
            return pool.nearest_index(cursor, _TONIC)
        if self.profile.uses_harmony:
            return self._harmonic_index(pool, cursor, measure, strong)
        return self._walk_index(pool, cursor, self._history[hand])

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def line(
        self,
        hand: Hand,
        measure: int,
        rhythm: Sequence[int],
        *,
        offset: int = 0,
        opens_line: bool = False,
        resolves: bool = False,
    ) -> List[NoteEvent]:
        """Return events for ``rhythm`` played by ``hand`` in ``measure``.

        @param hand (Hand): ``Hand.RH`` or ``Hand.LH``.
        @param measure (int): Score measure index, selects the chord.
        @param rhythm (Sequence[int]): Durations in eighths.
        @param offset (int): Eighth position of the first slot inside the
            measure. Non-zero for the second fragment of a split measure.
        @param opens_line (bool): ``True`` for the first slot of a hand block.
        @param resolves (bool): ``True`` when the last slot ends the piece.
        @returns List[NoteEvent]: One event per duration.
        """

        events: List[NoteEvent] = []
        last = len(rhythm) - 1
        for slot, (duration, position) in enumerate(zip(rhythm, onsets(rhythm, offset))):
            strong = position in self._strong
            first = opens_line and slot == 0
            final = resolves and slot == last
            if (
                self.profile.rest_prob > 0
                and not strong
                and not first
                and not final
                and self.rng.random() < self.profile.rest_prob
            ):
                events.append(NoteEvent.rest(duration))
                continue
            index = self._next_index(hand, measure, strong, final)
            self._cursor[hand] = index
            self._history[hand].append(index)
            events.append(NoteEvent.note(self.pools[hand][index], duration))
        return events

    def accompaniment(
        self,
        measure: int,
        figure: AccompanimentFigure,
        *,
        resolves: bool = False,
    ) -> List[NoteEvent]:
        """Return a left-hand chord figure for ``measure``.

        The triad on the measure's chord root is voiced in close position from
        the bottom octave of the left-hand pool. When ``resolves`` is set the
        last tone moves to the nearest tonic so the piece ends on the home
        note in both hands.
        """

        pool = self.pools[Hand.LH]
        tones = voicing(self.progression[measure], pool[0].octave)
        events = [NoteEvent.note(tones[tone], duration) for tone, duration in figure]
        if resolves:
            final = events[-1]
            events[-1] = final.with_(pitch=pool.nearest_to_pitch(final.pitch, _TONIC))
        return events
