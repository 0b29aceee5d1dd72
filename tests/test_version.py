"""Simple version check for the package."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import sightreader  # noqa: E402


def test_version_matches():
    """``sightreader.__version__`` exposes the release version."""
    assert sightreader.__version__ == "0.1.0"
