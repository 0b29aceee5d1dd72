"""Tests for shared utility helpers."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from sightreader.errors import InvalidParameter  # noqa: E402
from sightreader.utils import output_dir, resolve_output_path, validate_time_signature  # noqa: E402


def test_validate_time_signature_normalises():
    assert validate_time_signature(" 3 / 4 ") == "3/4"
    assert validate_time_signature("2/4") == "2/4"


@pytest.mark.parametrize("value", ["4", "a/4", "6/8", "4/4/4"])
def test_validate_time_signature_rejects(value):
    with pytest.raises(InvalidParameter):
        validate_time_signature(value)


def test_output_dir_from_environment(monkeypatch, tmp_path):
    monkeypatch.delenv("SIGHTREADER_OUTPUT_DIR", raising=False)
    assert output_dir() is None
    assert resolve_output_path("a.mid") == Path("a.mid")
    monkeypatch.setenv("SIGHTREADER_OUTPUT_DIR", str(tmp_path))
    assert resolve_output_path("a.mid") == tmp_path / "a.mid"
    absolute = tmp_path / "elsewhere" / "b.mid"
    assert resolve_output_path(str(absolute)) == absolute
