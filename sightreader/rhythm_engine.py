"""Rhythm pattern selection.

Rhythms are drawn whole from the catalogs in :mod:`sightreader.profiles`
rather than built note by note, so every measure is guaranteed to fill its
eighth-note budget exactly.  Catalogs widen with the difficulty tier:
beginner patterns use whole, half and quarter values while advanced ones add
eighths and dotted syncopations.

``split`` measures are rhythmically two fragments.  Each fragment is drawn
from the sub-catalog keyed by its own budget (for 3/4 that is a four-eighth
fragment followed by a two-eighth one).
"""

from __future__ import annotations

import random
from itertools import accumulate
from typing import Iterable, List, Sequence, Tuple

from .profiles import AccompanimentFigure, DifficultyProfile, Rhythm

__all__ = ["RhythmSelector", "onsets", "validate_catalog"]


def validate_catalog(catalog: Iterable[Sequence[int]], budget: int) -> None:
    """Raise ``ValueError`` if any pattern in ``catalog`` does not sum to ``budget``."""

    for pattern in catalog:
        if not pattern or any(d <= 0 for d in pattern):
            raise ValueError(f"pattern {pattern!r} must contain positive durations")
        if sum(pattern) != budget:
            raise ValueError(f"pattern {pattern!r} sums to {sum(pattern)}, expected {budget}")


def onsets(pattern: Sequence[int], offset: int = 0) -> List[int]:
    """Return the eighth-note start position of each duration in ``pattern``."""

    return [offset + start for start in accumulate([0, *pattern[:-1]])]


class RhythmSelector:
    """Draw measure, fragment and accompaniment rhythms for one profile."""

    def __init__(self, profile: DifficultyProfile) -> None:
        self.profile = profile

    @property
    def split_budgets(self) -> Tuple[int, int]:
        """Budgets of the first and second fragment of a ``split`` measure."""

        point = self.profile.split_point
        return point, self.profile.budget - point

    def measure(self, rng: random.Random) -> Rhythm:
        """Return a full-measure pattern."""

        return rng.choice(self.profile.rhythms)

    def fragment(self, budget: int, rng: random.Random) -> Rhythm:
        """Return a pattern filling ``budget`` eighths of a split measure."""

        try:
            catalog = self.profile.split_rhythms[budget]
        except KeyError:
            raise ValueError(
                f"no split rhythms for a {budget}-eighth fragment in "
                f"{self.profile.time_signature} {self.profile.difficulty.value}"
            ) from None
        return rng.choice(catalog)

    def accompaniment(self, rng: random.Random) -> AccompanimentFigure:
        """Return a left-hand chord figure as ``(tone_index, duration)`` pairs."""

        return rng.choice(self.profile.accompaniment)
