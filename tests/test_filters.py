"""Test velocity estimation, smoothing and width mapping.

Tests for sigpad.ink.filters:
    - Elapsed-time floor (zero and negative dt)
    - Exponential smoothing weights
    - Width: max_width at rest, monotonic decrease, min_width floor
    - Dot size: default midpoint, constant, custom callable

Run:
    pytest tests/test_filters.py -v
"""

import math

import pytest

from sigpad.ink.filters import (
    MIN_ELAPSED_MS,
    estimate_velocity,
    resolve_dot_size,
    smooth_velocity,
    width_for_velocity,
)
from sigpad.ink.samples import Sample
from sigpad.utils.validators import PadConfig


# ============================================================================
# VELOCITY
# ============================================================================

def test_velocity_is_distance_over_elapsed():
    v = estimate_velocity(Sample(0, 0, 100.0), Sample(3, 4, 110.0))
    assert v == pytest.approx(0.5)


@pytest.mark.parametrize("dt", [0.0, 0.25, -40.0])
def test_velocity_elapsed_floor(dt):
    """Identical or out-of-order timestamps fall back to 1 ms."""
    v = estimate_velocity(Sample(0, 0, 50.0), Sample(6, 8, 50.0 + dt))
    assert math.isfinite(v)
    assert v == pytest.approx(10.0 / MIN_ELAPSED_MS)


def test_velocity_stationary_is_zero():
    assert estimate_velocity(Sample(5, 5, 0), Sample(5, 5, 30)) == 0.0


def test_smoothing_blends_with_weight():
    assert smooth_velocity(1.0, 0.0, 0.7) == pytest.approx(0.7)
    assert smooth_velocity(2.0, 1.0, 0.25) == pytest.approx(1.25)
    # Extremes: ignore history / ignore new input
    assert smooth_velocity(3.0, 9.0, 1.0) == pytest.approx(3.0)
    assert smooth_velocity(3.0, 9.0, 0.0) == pytest.approx(9.0)


# ============================================================================
# WIDTH
# ============================================================================

def test_width_at_rest_is_max_width():
    assert width_for_velocity(0.0, 0.5, 2.5) == pytest.approx(2.5)


def test_width_decreases_with_velocity():
    velocities = [0.0, 0.1, 0.5, 1.0, 2.0, 3.0]
    widths = [width_for_velocity(v, 0.5, 2.5) for v in velocities]
    assert all(a >= b for a, b in zip(widths, widths[1:])), widths
    assert widths[0] > widths[-1]


def test_width_floored_at_min_width():
    assert width_for_velocity(1000.0, 0.5, 2.5) == pytest.approx(0.5)


def test_width_known_value():
    # 2.5 / (0.7 + 1)
    assert width_for_velocity(0.7, 0.5, 2.5) == pytest.approx(1.4705882, rel=1e-6)


# ============================================================================
# DOT SIZE
# ============================================================================

class TestDotSize:
    def test_default_is_width_midpoint(self) -> None:
        cfg = PadConfig(min_width=1.0, max_width=4.0)
        assert resolve_dot_size(cfg) == pytest.approx(2.5)

    def test_constant(self) -> None:
        cfg = PadConfig(dot_size=3)
        assert resolve_dot_size(cfg) == pytest.approx(3.0)

    def test_callable_receives_width_range(self) -> None:
        seen = []

        def policy(lo, hi):
            seen.append((lo, hi))
            return hi * 2

        cfg = PadConfig(min_width=0.75, max_width=2.0, dot_size=policy)
        assert resolve_dot_size(cfg) == pytest.approx(4.0)
        assert seen == [(0.75, 2.0)]
