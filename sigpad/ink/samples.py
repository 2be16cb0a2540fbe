"""Value types for the ink pipeline: points, samples, curves, filter state.

All types are frozen dataclasses. Nothing in the pipeline mutates a sample
or curve after creation; transitions build new values instead.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from sigpad.utils import geometry


@dataclass(frozen=True)
class Point:
    """2D point in surface px (+Y down)."""

    x: float
    y: float

    def distance_to(self, other: Point) -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y], dtype=np.float64)


@dataclass(frozen=True)
class Sample(Point):
    """One timestamped pointer position.

    ``time`` is in milliseconds; only differences between samples matter.
    """

    time: float = 0.0


@dataclass(frozen=True)
class Curve:
    """Cubic Bézier segment fitted between two consecutive samples.

    ``start`` and ``end`` are the samples themselves; the controls are plain
    points produced by the control-point solver.
    """

    start: Sample
    control1: Point
    control2: Point
    end: Sample

    def control_points(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
        return (
            self.start.as_array(),
            self.control1.as_array(),
            self.control2.as_array(),
            self.end.as_array(),
        )

    def length(self) -> float:
        """Chord-sum length estimate in px (see geometry.bezier_chord_length)."""
        return geometry.bezier_chord_length(*self.control_points())

    def points_at(self, t: np.ndarray) -> np.ndarray:
        """Positions at parameters t, shape (N, 2)."""
        return geometry.bezier_cubic_eval(*self.control_points(), np.atleast_1d(t))


@dataclass(frozen=True)
class FilterState:
    """Velocity/width carried between consecutive curves of one stroke."""

    last_velocity: float
    last_width: float

    @classmethod
    def initial(cls, min_width: float, max_width: float) -> FilterState:
        return cls(last_velocity=0.0, last_width=(min_width + max_width) / 2)
