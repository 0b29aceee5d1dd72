"""Hand assignment planning.

Before any note is generated the measure timeline is divided between the
hands.  A planner first labels every measure with a :class:`~sightreader.models.Hand`
and then groups runs of equal labels into :class:`~sightreader.models.HandBlock`
objects.  The policy depends on the difficulty tier:

``beginner``
    One switch: the first half of the piece goes to a randomly chosen hand
    and the second half to the other.

``elementary``
    Blocks of one or two measures alternating between hands.  Each new block
    has a small chance of being a single ``split`` measure where the hands
    share the bar.

``intermediate``
    Alternating blocks of one or two measures, capped at one measure for
    pieces of four measures or fewer.

``advanced``
    Both hands play every measure.

The resulting blocks always partition ``[0, num_measures)`` without gaps or
overlaps; :func:`validate_blocks` enforces this.
"""

from __future__ import annotations

import random
from typing import Iterable, List, Sequence, Tuple

from .errors import InvalidParameter
from .models import Hand, HandBlock
from .profiles import Difficulty, parse_difficulty

__all__ = [
    "SPLIT_PROBABILITY",
    "assign_hands",
    "SPLIT_ORDER",
    "group_blocks",
    "last_sounding_hands",
    "plan_hand_blocks",
    "sounding_hands",
    "validate_blocks",
]

# Chance that an elementary block becomes a one-measure split.
SPLIT_PROBABILITY = 0.15

_SINGLE_HANDS = (Hand.RH, Hand.LH)

# Hand playing the first and the second fragment of a ``split`` measure.
SPLIT_ORDER: Tuple[Hand, Hand] = (Hand.RH, Hand.LH)


def _alternating(
    num_measures: int,
    rng: random.Random,
    *,
    max_block: int,
    split_probability: float = 0.0,
) -> List[Hand]:
    hand = rng.choice(_SINGLE_HANDS)
    labels: List[Hand] = []
    while len(labels) < num_measures:
        if split_probability and rng.random() < split_probability:
            labels.append(Hand.SPLIT)
            continue
        length = 1 if max_block == 1 else rng.randint(1, max_block)
        length = min(length, num_measures - len(labels))
        labels.extend([hand] * length)
        hand = hand.other
    return labels


def assign_hands(num_measures: int, difficulty, rng: random.Random) -> List[Hand]:
    """Return one hand label per measure for ``difficulty``.

    @param num_measures (int): Length of the piece. Must be positive.
    @param difficulty (Difficulty|str): Tier controlling the policy.
    @param rng (random.Random): Source of randomness.
    @returns List[Hand]: ``num_measures`` labels.
    """

    if num_measures <= 0:
        raise InvalidParameter("num_measures must be positive")
    tier = parse_difficulty(difficulty)

    if tier is Difficulty.BEGINNER:
        first = rng.choice(_SINGLE_HANDS)
        half = (num_measures + 1) // 2
        return [first] * half + [first.other] * (num_measures - half)
    if tier is Difficulty.ELEMENTARY:
        return _alternating(num_measures, rng, max_block=2, split_probability=SPLIT_PROBABILITY)
    if tier is Difficulty.INTERMEDIATE:
        return _alternating(num_measures, rng, max_block=1 if num_measures <= 4 else 2)
    return [Hand.BOTH] * num_measures


def group_blocks(labels: Sequence[Hand]) -> List[HandBlock]:
    """Collapse consecutive equal ``labels`` into :class:`HandBlock` ranges."""

    blocks: List[HandBlock] = []
    start = 0
    for idx in range(1, len(labels) + 1):
        if idx == len(labels) or labels[idx] != labels[start]:
            blocks.append(HandBlock(start, idx, labels[start]))
            start = idx
    return blocks


def validate_blocks(blocks: Iterable[HandBlock], num_measures: int) -> None:
    """Raise ``ValueError`` unless ``blocks`` partition ``[0, num_measures)``."""

    expected = 0
    for block in blocks:
        if block.start != expected:
            raise ValueError(
                f"hand blocks must be contiguous: expected start {expected}, got {block.start}"
            )
        expected = block.stop
    if expected != num_measures:
        raise ValueError(f"hand blocks cover {expected} of {num_measures} measures")


def plan_hand_blocks(num_measures: int, difficulty, rng: random.Random) -> List[HandBlock]:
    """Return the validated hand blocks for a piece."""

    blocks = group_blocks(assign_hands(num_measures, difficulty, rng))
    validate_blocks(blocks, num_measures)
    return blocks


def sounding_hands(hand: Hand) -> Tuple[Hand, ...]:
    """Return the single hands that play in a block labelled ``hand``."""

    if hand in _SINGLE_HANDS:
        return (hand,)
    return _SINGLE_HANDS


def last_sounding_hands(blocks: Sequence[HandBlock]) -> Tuple[Hand, ...]:
    """Return the hands sounding at the very end of the piece.

    In a ``split`` block the left hand takes the second fragment, so it alone
    ends the measure.
    """

    if not blocks:
        raise ValueError("no hand blocks")
    hand = blocks[-1].hand
    if hand is Hand.SPLIT:
        return (SPLIT_ORDER[-1],)
    return sounding_hands(hand)
