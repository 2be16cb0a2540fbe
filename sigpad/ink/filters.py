"""Velocity estimation, exponential smoothing and velocity → width mapping.

Pipeline per emitted curve:
    raw = estimate_velocity(curve.start, curve.end)
    v = smooth_velocity(raw, filter.last_velocity, weight)
    width = width_for_velocity(v, min_width, max_width)

Velocity is px per ms with the elapsed time floored at 1 ms. This is not a
physical velocity, but stroke widths are calibrated against it (the +1 in
the width denominator assumes this scale), so both constants stay as is.
"""

from sigpad.utils.validators import PadConfig

from .samples import Sample

# Elapsed-time floor (ms) for velocity estimation
MIN_ELAPSED_MS = 1.0


def estimate_velocity(prior: Sample, current: Sample) -> float:
    """Distance between samples divided by elapsed time (floored at 1 ms).

    Parameters
    ----------
    prior : Sample
        Earlier sample
    current : Sample
        Later sample

    Returns
    -------
    float
        Non-negative velocity in px/ms

    Notes
    -----
    Out-of-order timestamps (negative elapsed time) also hit the floor,
    so the result is never negative or infinite.
    """
    elapsed = max(current.time - prior.time, MIN_ELAPSED_MS)
    return current.distance_to(prior) / elapsed


def smooth_velocity(raw: float, previous: float, weight: float) -> float:
    """Exponential filter: weight * raw + (1 - weight) * previous."""
    return weight * raw + (1.0 - weight) * previous


def width_for_velocity(velocity: float, min_width: float, max_width: float) -> float:
    """Map smoothed velocity to stroke width, inversely.

    width = max(max_width / (velocity + 1), min_width)

    At velocity 0 the width is max_width; it decreases monotonically and is
    floored at min_width.
    """
    return max(max_width / (velocity + 1.0), min_width)


def resolve_dot_size(config: PadConfig) -> float:
    """Diameter of the fallback dot for strokes too short to fit a curve.

    A callable dot_size is called with (min_width, max_width) and its result
    is used unclamped.
    """
    if callable(config.dot_size):
        return float(config.dot_size(config.min_width, config.max_width))
    return float(config.dot_size)
