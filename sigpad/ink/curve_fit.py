"""Incremental Bézier fitting over a sliding window of samples.

Each new sample may emit one cubic segment. The window keeps at most four
samples (w0..w3); the emitted segment runs from w1 to w2 and borrows its
tangents from the neighbours w0 and w3:

    c2 = solve(w0, w1, w2).c2    # leaving w1
    c1 = solve(w1, w2, w3).c1    # arriving at w2
    Curve(w1, c2, c1, w2)

When the third sample arrives the first one is duplicated, so the very first
segment is drawn one sample earlier than a strict 4-point window allows.
"""

from typing import NamedTuple, Optional, Tuple

from .samples import Curve, Point, Sample

# Window capacity after each add_sample() call
WINDOW_SIZE = 4

Window = Tuple[Sample, ...]


class ControlPoints(NamedTuple):
    c1: Point
    c2: Point


def solve_control_points(s1: Point, s2: Point, s3: Point) -> ControlPoints:
    """Control points around s2 for a curve through s1, s2, s3.

    Parameters
    ----------
    s1, s2, s3 : Point
        Three consecutive samples

    Returns
    -------
    ControlPoints
        c1 on the s1 side of s2, c2 on the s3 side

    Notes
    -----
    Take the midpoints m1 (s1-s2) and m2 (s2-s3). The point cm on m1-m2 at
    fraction k = l2 / (l1 + l2) from m2 is translated onto s2, and both
    midpoints move with it. The resulting tangent at s2 is parallel to m1-m2,
    with handle lengths proportional to the adjacent segment lengths.

    Coincident samples (l1 + l2 == 0) use k = 0 instead of dividing 0/0.
    """
    m1x, m1y = (s1.x + s2.x) / 2.0, (s1.y + s2.y) / 2.0
    m2x, m2y = (s2.x + s3.x) / 2.0, (s2.y + s3.y) / 2.0

    l1 = s1.distance_to(s2)
    l2 = s2.distance_to(s3)
    total = l1 + l2
    k = l2 / total if total > 0.0 else 0.0

    cmx = m2x + (m1x - m2x) * k
    cmy = m2y + (m1y - m2y) * k

    tx = s2.x - cmx
    ty = s2.y - cmy

    return ControlPoints(
        c1=Point(m1x + tx, m1y + ty),
        c2=Point(m2x + tx, m2y + ty),
    )


def add_sample(window: Window, sample: Sample) -> Tuple[Window, Optional[Curve]]:
    """Append a sample and emit at most one fitted segment.

    Parameters
    ----------
    window : Tuple[Sample, ...]
        Current window, length 0-3
    sample : Sample
        New sample

    Returns
    -------
    window : Tuple[Sample, ...]
        Updated window, length ≤ 3 after a curve is emitted
    curve : Curve or None
        Segment w1 → w2, or None while fewer than 3 samples are known
    """
    points = window + (sample,)
    if len(points) < 3:
        return points, None

    if len(points) == 3:
        points = (points[0],) + points

    w0, w1, w2, w3 = points[-WINDOW_SIZE:]
    c2 = solve_control_points(w0, w1, w2).c2
    c1 = solve_control_points(w1, w2, w3).c1
    curve = Curve(start=w1, control1=c2, control2=c1, end=w2)

    return points[-(WINDOW_SIZE - 1):], curve
