"""Test color spec parsing.

Tests for sigpad.utils.color:
    - Named and hex colors (via Pillow ImageColor)
    - rgba() with fractional CSS alpha
    - Tuples of 3 / 4 components
    - Invalid specs raise ValueError

Run:
    pytest tests/test_color.py -v
"""

import numpy as np
import pytest

from sigpad.utils.color import parse_rgba, to_unit_rgba


@pytest.mark.parametrize("spec,expected", [
    ("black", (0, 0, 0, 255)),
    ("White", (255, 255, 255, 255)),
    ("#ff0000", (255, 0, 0, 255)),
    ("#00ff0080", (0, 255, 0, 128)),
    ("rgb(10, 20, 30)", (10, 20, 30, 255)),
    ("rgba(0,0,0,0)", (0, 0, 0, 0)),
    ("rgba(10, 20, 30, 0.5)", (10, 20, 30, 128)),
    ("rgba(1,2,3,1)", (1, 2, 3, 255)),
    ((1, 2, 3), (1, 2, 3, 255)),
    ([9, 8, 7, 6], (9, 8, 7, 6)),
])
def test_parse_rgba(spec, expected):
    assert parse_rgba(spec) == expected


@pytest.mark.parametrize("spec", [
    "not-a-color",
    "rgba(0,0,0,1.5)",
    "rgba(300,0,0,1)",
    (1, 2),
    (0, 0, 0, 0, 0),
    (0, 256, 0),
    (-1, 0, 0),
])
def test_parse_rgba_invalid(spec):
    with pytest.raises(ValueError):
        parse_rgba(spec)


def test_to_unit_rgba():
    rgba = to_unit_rgba("rgba(255, 0, 51, 0.2)")
    assert rgba.dtype == np.float32
    assert rgba.shape == (4,)
    np.testing.assert_allclose(rgba, [1.0, 0.0, 0.2, 0.2], atol=1e-6)
