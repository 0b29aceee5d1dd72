"""Score assembly.

Combines the per-hand measure lists into a :class:`~sightreader.models.Score`.
Measures a hand does not play are filled with a single full-measure rest.
Every measure is checked against the time-signature budget; a mismatch is a
programming error and raises ``ValueError`` rather than being repaired.
"""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

from .models import HandBlock, Measure, NoteEvent, Score, Voice
from .profiles import measure_budget

__all__ = ["assemble_score", "rest_measure", "validate_voice"]


def rest_measure(budget: int) -> Measure:
    """Return a measure holding one rest of ``budget`` eighths."""

    return Measure((NoteEvent.rest(budget),))


def validate_voice(voice: Sequence[Measure], budget: int, name: str = "voice") -> None:
    """Raise ``ValueError`` if any measure of ``voice`` misses ``budget``."""

    for index, measure in enumerate(voice):
        if not measure.events:
            raise ValueError(f"{name} measure {index} is empty")
        if measure.duration != budget:
            raise ValueError(
                f"{name} measure {index} lasts {measure.duration} eighths, expected {budget}"
            )


def assemble_score(
    right: Sequence[Optional[Measure]],
    left: Sequence[Optional[Measure]],
    key: str,
    time_signature: str,
    progression: Sequence[int],
    difficulty: str = "intermediate",
    blocks: Sequence[HandBlock] = (),
) -> Score:
    """Build the final :class:`Score`.

    ``None`` entries in ``right`` or ``left`` mark measures the hand sits
    out; they become full-measure rests.
    """

    budget = measure_budget(time_signature)
    if len(right) != len(left):
        raise ValueError(f"voice lengths differ: {len(right)} right, {len(left)} left")
    if len(progression) != len(right):
        raise ValueError(
            f"progression has {len(progression)} chords for {len(right)} measures"
        )

    def fill(measures: Sequence[Optional[Measure]]) -> Voice:
        return tuple(m if m is not None else rest_measure(budget) for m in measures)

    rh: Voice = fill(right)
    lh: Voice = fill(left)
    validate_voice(rh, budget, "right hand")
    validate_voice(lh, budget, "left hand")
    blocks_tuple: Tuple[HandBlock, ...] = tuple(blocks)
    return Score(
        right=rh,
        left=lh,
        key=key,
        time_signature=time_signature,
        progression=tuple(progression),
        difficulty=difficulty,
        blocks=blocks_tuple,
    )
