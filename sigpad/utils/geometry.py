"""Geometric operations for fitted stroke segments.

Provides:
    - Cubic Bézier evaluation at one or many parameter values
    - Polyline length
    - Chord-based Bézier length estimate (drives rasterization step count)

Used by:
    - ink.samples: Curve.length(), Curve.points_at()
    - ink.cpu_raster: disc positions along each curve

All coordinates are surface pixels (surface-local, +Y down).
"""

import numpy as np

# Number of chords used by the length estimate
LENGTH_CHORDS = 10


def bezier_cubic_eval(
    p1: np.ndarray,
    p2: np.ndarray,
    p3: np.ndarray,
    p4: np.ndarray,
    t: np.ndarray
) -> np.ndarray:
    """Evaluate cubic Bézier curve at parameter t.

    Parameters
    ----------
    p1, p2, p3, p4 : np.ndarray
        Start point, first control, second control, end point; shape (2,)
    t : np.ndarray
        Parameter values in [0, 1], shape (N,) or scalar

    Returns
    -------
    np.ndarray
        Points on curve, shape (N, 2) (or (2,) for scalar t)

    Notes
    -----
    Evaluated by de Casteljau subdivision (repeated lerp), which equals the
    Bernstein blend
    B(t) = (1-t)³·p1 + 3(1-t)²t·p2 + 3(1-t)t²·p3 + t³·p4
    but returns p1 exactly at t=0 and the point itself, with no rounding
    noise, when all four points coincide.
    """
    t = np.asarray(t, dtype=np.float64)
    scalar = t.ndim == 0
    t = np.atleast_1d(t)[:, np.newaxis]  # (N, 1)

    p1, p2, p3, p4 = (np.asarray(p, dtype=np.float64) for p in (p1, p2, p3, p4))

    a = p1 + t * (p2 - p1)
    b = p2 + t * (p3 - p2)
    c = p3 + t * (p4 - p3)
    ab = a + t * (b - a)
    bc = b + t * (c - b)
    result = ab + t * (bc - ab)
    return result[0] if scalar else result


def polyline_length(points: np.ndarray) -> float:
    """Sum of Euclidean distances between consecutive vertices, shape (N, 2)."""
    points = np.asarray(points, dtype=np.float64)
    if points.shape[0] < 2:
        return 0.0
    diffs = np.diff(points, axis=0)
    return float(np.hypot(diffs[:, 0], diffs[:, 1]).sum())


def bezier_chord_length(
    p1: np.ndarray,
    p2: np.ndarray,
    p3: np.ndarray,
    p4: np.ndarray,
    chords: int = LENGTH_CHORDS
) -> float:
    """Approximate arc length of a cubic Bézier by summing chords.

    Parameters
    ----------
    p1, p2, p3, p4 : np.ndarray
        Bézier points, shape (2,)
    chords : int
        Number of equal-parameter chords, default 10

    Returns
    -------
    float
        Length estimate in px (a lower bound on the true arc length)

    Notes
    -----
    The rasterizer uses floor(length) as its step count, so the estimate
    must be consistent between calls rather than exact.
    """
    t = np.linspace(0.0, 1.0, chords + 1)
    return polyline_length(bezier_cubic_eval(p1, p2, p3, p4, t))
