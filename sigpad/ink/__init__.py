"""Velocity-sensitive ink synthesis for signature capture.

Pipeline per input sample:
    - curve_fit: sliding window (≤4 samples) → at most one cubic Bézier
    - filters: endpoint velocity → exponential smoothing → stroke width
    - cpu_raster: curve → disc train with t³ width blending → Surface
    - strokes: pure begin/update/end transitions over StrokeState
    - pad: SignaturePad, which applies transitions to a surface and listeners

Invariants:
    - Window never holds more than 4 samples
    - Curve widths stay within [min_width, max_width]
    - Single-threaded: each sample is fully processed before the next

Used by:
    - Host input adapters (mouse/touch/stylus → Sample)
    - scripts/preview_signature.py
"""

from .cpu_raster import RasterSurface, Surface, draw_curve, draw_dot
from .curve_fit import add_sample, solve_control_points
from .filters import estimate_velocity, resolve_dot_size, smooth_velocity, width_for_velocity
from .pad import SignaturePad
from .samples import Curve, FilterState, Point, Sample
from .strokes import Phase, StrokeBegan, StrokeEnded, StrokeState, StrokeStep, begin, end, update

__all__ = [
    'Curve',
    'FilterState',
    'Phase',
    'Point',
    'RasterSurface',
    'Sample',
    'SignaturePad',
    'StrokeBegan',
    'StrokeEnded',
    'StrokeState',
    'StrokeStep',
    'Surface',
    'add_sample',
    'begin',
    'draw_curve',
    'draw_dot',
    'end',
    'estimate_velocity',
    'resolve_dot_size',
    'smooth_velocity',
    'solve_control_points',
    'update',
    'width_for_velocity',
]
