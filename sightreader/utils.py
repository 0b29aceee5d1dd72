"""Utility helpers shared by the CLI and the output adapters.

Usage Example
-------------
>>> from sightreader.utils import validate_time_signature
>>> validate_time_signature(" 3 / 4 ")
'3/4'
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from .errors import InvalidParameter
from .profiles import TIME_SIGNATURES

__all__ = ["OUTPUT_DIR_ENV", "output_dir", "resolve_output_path", "validate_time_signature"]

# Environment variable overriding the directory relative output paths land in.
OUTPUT_DIR_ENV = "SIGHTREADER_OUTPUT_DIR"


def validate_time_signature(ts: str) -> str:
    """Normalise and validate a time signature string.

    Parameters
    ----------
    ts:
        Time signature in ``"NUM/DEN"`` form. Whitespace around the
        separator is ignored.

    Returns
    -------
    str
        The canonical label, e.g. ``"3/4"``.

    Raises
    ------
    InvalidParameter
        If ``ts`` is malformed or not one of the supported meters.
    """

    parts = ts.strip().split("/")
    if len(parts) != 2:
        raise InvalidParameter("Time signature must be in the form 'numerator/denominator'.")
    try:
        numerator = int(parts[0])
        denominator = int(parts[1])
    except ValueError as exc:
        raise InvalidParameter(
            "Time signature must contain integer numerator and denominator."
        ) from exc
    label = f"{numerator}/{denominator}"
    if label not in TIME_SIGNATURES:
        raise InvalidParameter(
            f"Time signature must be one of {', '.join(TIME_SIGNATURES)}; got {label}."
        )
    return label


def output_dir() -> Optional[Path]:
    """Return the directory named by ``SIGHTREADER_OUTPUT_DIR`` if it is set."""

    env_path = os.environ.get(OUTPUT_DIR_ENV)
    if env_path:
        return Path(env_path).expanduser()
    return None


def resolve_output_path(path: str) -> Path:
    """Return ``path`` anchored in :func:`output_dir` when it is relative."""

    target = Path(path).expanduser()
    base = output_dir()
    if base is not None and not target.is_absolute():
        return base / target
    return target
