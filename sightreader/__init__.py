"""Procedural piano sight-reading exercise generator.

The package turns a key, time signature, measure count and difficulty tier
into a two-hand :class:`~sightreader.models.Score`.  Generation runs as a
fixed pipeline (key resolution, difficulty profile, harmonic progression,
hand assignment, rhythm and melody, articulation and dynamics, assembly),
and every random decision is drawn from one ``random.Random`` so seeded
runs are reproducible.

Example
-------
>>> import random
>>> from sightreader import generate
>>> score = generate(8, "Am", "3/4", "advanced", rng=random.Random(7))
>>> score.num_measures
8

Scores can be exported with :func:`sightreader.abc_export.to_abc` or
:func:`sightreader.midi_io.create_midi_file` (requires ``mido``).
"""

from __future__ import annotations

__version__ = "0.1.0"

from .errors import InvalidKey, InvalidParameter
from .generator import generate
from .key_mode import KeyMode, resolve_key
from .models import Dynamic, Hairpin, Hand, HandBlock, Measure, NoteEvent, Pitch, Score
from .profiles import Difficulty, DifficultyProfile, get_profile

__all__ = [
    "__version__",
    "Difficulty",
    "DifficultyProfile",
    "Dynamic",
    "Hairpin",
    "Hand",
    "HandBlock",
    "InvalidKey",
    "InvalidParameter",
    "KeyMode",
    "Measure",
    "NoteEvent",
    "Pitch",
    "Score",
    "generate",
    "get_profile",
    "main",
    "resolve_key",
    "run_cli",
]


def run_cli(argv=None) -> None:
    """Proxy to :func:`sightreader.cli.run_cli`."""

    from .cli import run_cli as _run_cli

    _run_cli(argv)


def main() -> None:
    """Proxy to :func:`sightreader.cli.main`."""

    from .cli import main as _main

    _main()
