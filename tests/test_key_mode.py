"""Tests for key and mode resolution."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from sightreader.errors import InvalidKey  # noqa: E402
from sightreader.key_mode import MODE_INTERVALS, resolve_key  # noqa: E402


@pytest.mark.parametrize(
    "label, mode",
    [
        ("C", "major"),
        ("Am", "minor"),
        ("F#m", "minor"),
        ("Bb", "major"),
        ("D dor", "dorian"),
        ("Ddorian", "dorian"),
        ("G mix", "mixolydian"),
        ("F lydian", "lydian"),
        ("E phr", "phrygian"),
        ("C min", "minor"),
        ("A maj", "major"),
    ],
)
def test_mode_detection(label, mode):
    """Suffix tokens win over the trailing ``m`` rule."""
    key = resolve_key(label)
    assert key.mode == mode
    assert key.diatonic_intervals == MODE_INTERVALS[mode]


def test_flat_tonic_is_not_read_as_minor():
    """``Bb`` is B-flat major and ``Bbm`` is B-flat minor."""
    assert resolve_key("Bb").tonic == "Bb"
    assert resolve_key("Bb").mode == "major"
    assert resolve_key("Bbm").mode == "minor"
    assert resolve_key("Bb").root_semitone == 10


def test_canonical_labels():
    assert resolve_key("f#m").label == "F#m"
    assert resolve_key("D dorian").label == "D dor"
    assert resolve_key("C").label == "C"


def test_sharpenable_degrees_by_mode():
    """Only the sixth and seventh degrees with room below the next step qualify."""
    assert resolve_key("C").sharpenable_degrees == frozenset()
    assert resolve_key("F lyd").sharpenable_degrees == frozenset()
    assert resolve_key("Am").sharpenable_degrees == frozenset({5, 6})
    assert resolve_key("D dor").sharpenable_degrees == frozenset({6})
    assert resolve_key("G mix").sharpenable_degrees == frozenset({6})
    assert resolve_key("E phr").sharpenable_degrees == frozenset({5, 6})


@pytest.mark.parametrize("label", ["", "H", "7", "#C"])
def test_unknown_tonic_raises(label):
    with pytest.raises(InvalidKey):
        resolve_key(label)


def test_invalid_key_is_value_error():
    with pytest.raises(ValueError):
        resolve_key("X")


def test_unknown_suffix_falls_back_to_major(caplog):
    """Unrecognised suffixes log a warning instead of failing."""
    key = resolve_key("Cxyz")
    assert key.mode == "major"
    assert "xyz" in caplog.text


def test_signature_alterations():
    """Letters altered by the key signature report their alteration."""
    d_major = resolve_key("D")
    # D E F# G A B C#
    assert [d_major.signature_alteration(d) for d in range(7)] == [0, 0, 1, 0, 0, 0, 1]
    f_major = resolve_key("F")
    assert f_major.signature_alteration(3) == -1  # Bb
    assert resolve_key("Am").abc_key == "Am"
    assert resolve_key("D dor").abc_key == "DDor"


def test_letter_spelling_wraps_octave():
    a_minor = resolve_key("Am")
    assert a_minor.letter_of(0) == (5, 0)  # A
    assert a_minor.letter_of(2) == (0, 1)  # C above
