"""Exception types raised by the generation engine.

Both errors derive from :class:`ValueError` so callers that already guard
generation with ``except ValueError`` keep working.  The public
:func:`sightreader.generate` entry point catches them for optional
parameters and falls back to the documented defaults instead of aborting.
"""

from __future__ import annotations

__all__ = ["InvalidKey", "InvalidParameter"]


class InvalidKey(ValueError):
    """Raised when a key label does not start with a recognised tonic letter."""


class InvalidParameter(ValueError):
    """Raised for an unsupported time signature, measure count or difficulty."""
