"""Command line interface for the sight-reading generator.

``run_cli`` parses the arguments, generates one exercise and writes it as
ABC text and/or a MIDI file.  Without ``--abc`` or ``--midi`` the ABC text is
printed to standard output so the result can be piped into other ABC tools.
Relative output paths are placed under ``$SIGHTREADER_OUTPUT_DIR`` when that
variable is set.

Example
-------
Running ``python -m sightreader --measures 8 --key Am --timesig 3/4 \
    --difficulty advanced --seed 7 --midi exercise.mid`` writes an
eight-measure A minor exercise to ``exercise.mid``.  The same seed and
options always produce the same exercise.
"""

from __future__ import annotations

import argparse
import logging
import random
import sys
from typing import List, Optional, Sequence

from .errors import InvalidKey, InvalidParameter
from .generator import DEFAULT_KEY, DEFAULT_MEASURES, DEFAULT_TIME_SIGNATURE, generate
from .key_mode import MODES, resolve_key
from .profiles import Difficulty, parse_difficulty
from .utils import resolve_output_path, validate_time_signature

__all__ = ["run_cli", "main", "supported_keys"]

_TONICS = ("C", "G", "D", "A", "E", "B", "F#", "C#", "F", "Bb", "Eb", "Ab", "Db", "Gb", "Cb")


def supported_keys() -> List[str]:
    """Return example key labels for every tonic spelling and mode."""

    return [resolve_key(f"{tonic} {mode}").label for mode in MODES for tonic in _TONICS]


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sight-reader",
        description="Generate a two-hand piano sight-reading exercise.",
    )
    parser.add_argument("--list-keys", action="store_true", help="List example key labels and exit")
    parser.add_argument("--measures", type=int, default=DEFAULT_MEASURES, help="Number of measures (default: 4).")
    parser.add_argument("--key", type=str, default=DEFAULT_KEY, help="Key label such as C, F#m or 'D dor'.")
    parser.add_argument("--timesig", type=str, default=DEFAULT_TIME_SIGNATURE, help="Time signature: 4/4, 3/4 or 2/4.")
    parser.add_argument(
        "--difficulty",
        type=str,
        default=Difficulty.INTERMEDIATE.value,
        help=f"One of {', '.join(d.value for d in Difficulty)}.",
    )
    parser.add_argument("--seed", type=int, help="Random seed for reproducible output")
    parser.add_argument("--bpm", type=int, default=90, help="Tempo used for MIDI output (default: 90).")
    parser.add_argument("--title", type=str, default="Sight-Reading Exercise", help="ABC title field.")
    parser.add_argument("--abc", type=str, metavar="PATH", help="Write ABC notation to PATH.")
    parser.add_argument("--midi", type=str, metavar="PATH", help="Write a MIDI file to PATH.")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    return parser


def run_cli(argv: Optional[Sequence[str]] = None) -> None:
    """Parse ``argv`` (default ``sys.argv[1:]``) and produce one exercise.

    Invalid options are reported with ``logging.error`` and terminate the
    process with exit status ``1``. Unlike :func:`generate`, the CLI does not
    silently substitute defaults for values the user typed explicitly.
    """

    args = _build_parser().parse_args(sys.argv[1:] if argv is None else argv)
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    if args.list_keys:
        print("\n".join(supported_keys()))
        return

    if args.measures <= 0:
        logging.error("Number of measures must be a positive integer.")
        sys.exit(1)
    if args.bpm <= 0:
        logging.error("BPM must be a positive integer.")
        sys.exit(1)
    try:
        key = resolve_key(args.key)
        time_signature = validate_time_signature(args.timesig)
        difficulty = parse_difficulty(args.difficulty)
    except (InvalidKey, InvalidParameter) as exc:
        logging.error(str(exc))
        sys.exit(1)

    seed = args.seed if args.seed is not None else random.randrange(2**32)
    logging.debug("Using seed %d", seed)
    score = generate(args.measures, key.label, time_signature, difficulty, random.Random(seed))

    from .abc_export import to_abc, write_abc

    try:
        if args.abc:
            write_abc(score, str(resolve_output_path(args.abc)), args.title)
        if args.midi:
            from .midi_io import create_midi_file

            create_midi_file(score, args.bpm, str(resolve_output_path(args.midi)))
    except OSError as exc:
        logging.error("Could not write output file: %s", exc)
        sys.exit(1)
    except ImportError as exc:
        logging.error(str(exc))
        sys.exit(1)

    if not args.abc and not args.midi:
        sys.stdout.write(to_abc(score, args.title))
    logging.info("Exercise generation complete.")


def main() -> None:
    """Console entry point used by ``sight-reader`` and ``python -m sightreader``."""

    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
    run_cli()
