"""End-to-end exercise generation.

:func:`generate` wires the stages together::

    key/mode -> profile -> progression -> hand blocks
             -> rhythms + melodic lines -> articulation -> dynamics
             -> hairpins -> score

Every random decision is drawn from the single ``random.Random`` passed in,
in the order listed above, so two calls with equally seeded generators and
the same arguments produce identical scores.
"""

from __future__ import annotations

import logging
import random
from typing import List, Optional

from .articulation import annotate_measure
from .assembler import assemble_score, rest_measure
from .dynamics import apply_dynamics, apply_hairpins
from .errors import InvalidKey, InvalidParameter
from .harmony_generator import choose_progression
from .key_mode import KeyMode, resolve_key
from .melody import MelodyGenerator
from .models import Hand, HandBlock, Measure, NoteEvent, Score
from .phrase_planner import SPLIT_ORDER, plan_hand_blocks
from .profiles import Difficulty, DifficultyProfile, get_profile, parse_difficulty
from .rhythm_engine import RhythmSelector

__all__ = [
    "DEFAULT_DIFFICULTY",
    "DEFAULT_KEY",
    "DEFAULT_MEASURES",
    "DEFAULT_TIME_SIGNATURE",
    "generate",
]

DEFAULT_MEASURES = 4
DEFAULT_KEY = "C"
DEFAULT_TIME_SIGNATURE = "4/4"
DEFAULT_DIFFICULTY = Difficulty.INTERMEDIATE


def _resolve_measures(num_measures) -> int:
    if isinstance(num_measures, bool) or not isinstance(num_measures, int) or num_measures <= 0:
        logging.warning(
            "Invalid measure count %r; using %d instead.", num_measures, DEFAULT_MEASURES
        )
        return DEFAULT_MEASURES
    return num_measures


def _resolve_key(key: str) -> KeyMode:
    try:
        return resolve_key(key)
    except InvalidKey as exc:
        logging.warning("%s; falling back to %s.", exc, DEFAULT_KEY)
        return resolve_key(DEFAULT_KEY)


def _resolve_profile(time_signature: str, difficulty) -> DifficultyProfile:
    try:
        tier = parse_difficulty(difficulty)
    except InvalidParameter as exc:
        logging.warning("%s; falling back to %s.", exc, DEFAULT_DIFFICULTY.value)
        tier = DEFAULT_DIFFICULTY
    try:
        return get_profile(time_signature, tier)
    except InvalidParameter as exc:
        logging.warning("%s; falling back to %s.", exc, DEFAULT_TIME_SIGNATURE)
        return get_profile(DEFAULT_TIME_SIGNATURE, tier)


class _PieceBuilder:
    """Fill per-hand measure slots block by block."""

    def __init__(
        self,
        profile: DifficultyProfile,
        progression: List[int],
        rng: random.Random,
    ) -> None:
        self.profile = profile
        self.rng = rng
        self.num_measures = len(progression)
        self.rhythms = RhythmSelector(profile)
        self.melody = MelodyGenerator(profile, progression, rng)
        self.right: List[Optional[Measure]] = [None] * self.num_measures
        self.left: List[Optional[Measure]] = [None] * self.num_measures

    def _store(self, hand: Hand, measure: int, events: List[NoteEvent]) -> None:
        target = self.right if hand is Hand.RH else self.left
        target[measure] = Measure(tuple(events))

    def _single(self, block: HandBlock, measure: int) -> None:
        rhythm = self.rhythms.measure(self.rng)
        events = self.melody.line(
            block.hand,
            measure,
            rhythm,
            opens_line=measure == block.start,
            resolves=measure == self.num_measures - 1,
        )
        self._store(block.hand, measure, events)

    def _split(self, measure: int) -> None:
        first, second = SPLIT_ORDER
        head, tail = self.rhythms.split_budgets
        opening = self.melody.line(
            first, measure, self.rhythms.fragment(head, self.rng), opens_line=True
        )
        closing = self.melody.line(
            second,
            measure,
            self.rhythms.fragment(tail, self.rng),
            offset=head,
            opens_line=True,
            resolves=measure == self.num_measures - 1,
        )
        self._store(first, measure, opening + [NoteEvent.rest(tail)])
        self._store(second, measure, [NoteEvent.rest(head)] + closing)

    def _both(self, block: HandBlock, measure: int) -> None:
        final = measure == self.num_measures - 1
        rhythm = self.rhythms.measure(self.rng)
        melody = self.melody.line(
            Hand.RH, measure, rhythm, opens_line=measure == block.start, resolves=final
        )
        figure = self.rhythms.accompaniment(self.rng)
        self._store(Hand.RH, measure, melody)
        self._store(Hand.LH, measure, self.melody.accompaniment(measure, figure, resolves=final))

    def build(self, blocks: List[HandBlock]) -> None:
        for block in blocks:
            for measure in block.measures:
                if block.hand is Hand.SPLIT:
                    self._split(measure)
                elif block.hand is Hand.BOTH:
                    self._both(block, measure)
                else:
                    self._single(block, measure)

    def annotate(self, key: KeyMode) -> None:
        for measure in range(self.num_measures):
            for voice in (self.right, self.left):
                if voice[measure] is not None:
                    voice[measure] = annotate_measure(
                        voice[measure], self.profile, key.sharpenable_degrees, self.rng
                    )


def generate(
    num_measures: int = DEFAULT_MEASURES,
    key: str = DEFAULT_KEY,
    time_signature: str = DEFAULT_TIME_SIGNATURE,
    difficulty=DEFAULT_DIFFICULTY,
    rng: Optional[random.Random] = None,
) -> Score:
    """Generate a two-hand sight-reading exercise.

    Invalid optional parameters never abort generation: an unknown key,
    time signature or difficulty, or a non-positive measure count, is
    logged as a warning and replaced by its default (``"C"``, ``"4/4"``,
    ``"intermediate"``, ``4``).

    @param num_measures (int): Number of measures in the piece.
    @param key (str): Key label such as ``"C"``, ``"F#m"`` or ``"D dor"``.
    @param time_signature (str): ``"4/4"``, ``"3/4"`` or ``"2/4"``.
    @param difficulty (str|Difficulty): Tier name, lowest ``"beginner"``
        to highest ``"advanced"``.
    @param rng (random.Random|None): Source of randomness. A fresh unseeded
        generator is created when omitted.
    @returns Score: Right and left voices with key, meter and progression.
    """

    if rng is None:
        rng = random.Random()
    measures = _resolve_measures(num_measures)
    key_mode = _resolve_key(key)
    profile = _resolve_profile(time_signature, difficulty)
    logging.debug(
        "Generating %d measures in %s, %s, %s",
        measures,
        key_mode.label,
        profile.time_signature,
        profile.difficulty.value,
    )

    progression = choose_progression(key_mode.mode, measures, rng)
    blocks = plan_hand_blocks(measures, profile.difficulty, rng)
    logging.debug("Hand blocks: %s", [(b.start, b.stop, b.hand.value) for b in blocks])

    builder = _PieceBuilder(profile, progression, rng)
    builder.build(blocks)
    builder.annotate(key_mode)

    right = tuple(m if m is not None else rest_measure(profile.budget) for m in builder.right)
    left = tuple(m if m is not None else rest_measure(profile.budget) for m in builder.left)
    right, left = apply_dynamics(right, left, profile, rng)
    right, left = apply_hairpins(right, left, profile, rng)

    return assemble_score(
        right,
        left,
        key=key_mode.label,
        time_signature=profile.time_signature,
        progression=progression,
        difficulty=profile.difficulty.value,
        blocks=blocks,
    )
