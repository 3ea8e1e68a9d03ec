"""Unit tests for command-line handling"""

from main import parse_mesh_size


def test_no_argument_uses_default():
    assert parse_mesh_size([], 50) == (50, None)


def test_numeric_argument_overrides_default():
    assert parse_mesh_size(["120"], 50) == (120, None)


def test_invalid_argument_falls_back_to_default():
    size, error = parse_mesh_size(["big"], 50)
    assert size == 50
    assert "big" in error
