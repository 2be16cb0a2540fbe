"""Color parsing for pen and background fills.

Provides:
    - parse_rgba(): CSS-like color spec → (r, g, b, a) uint8 tuple
    - to_unit_rgba(): same, as float32 array in [0, 1] for compositing

Accepted specs:
    - Named colors ("black", "navy", ...) and hex (#rgb, #rrggbb, #rrggbbaa)
    - rgb(r, g, b) and rgba(r, g, b, a) with CSS alpha a ∈ [0, 1]
    - Tuples/lists of 3 or 4 ints in [0, 255]

Named/hex/rgb() parsing is delegated to Pillow's ImageColor; rgba() is parsed
here because CSS alpha is fractional while ImageColor expects 0-255.
"""

import re
from typing import Sequence, Tuple, Union

import numpy as np
from PIL import ImageColor

ColorSpec = Union[str, Sequence[int]]

_RGBA_RE = re.compile(
    r"^rgba\(\s*(\d{1,3})\s*,\s*(\d{1,3})\s*,\s*(\d{1,3})\s*,\s*([0-9]*\.?[0-9]+)\s*\)$"
)


def parse_rgba(spec: ColorSpec) -> Tuple[int, int, int, int]:
    """Parse a color spec into an RGBA tuple.

    Parameters
    ----------
    spec : str or sequence of int
        Color spec (see module docstring)

    Returns
    -------
    Tuple[int, int, int, int]
        RGBA, each in [0, 255]

    Raises
    ------
    ValueError
        If the spec is not understood or components are out of range
    """
    if isinstance(spec, str):
        text = spec.strip().lower()
        m = _RGBA_RE.match(text)
        if m:
            r, g, b = (int(m.group(i)) for i in (1, 2, 3))
            alpha = float(m.group(4))
            if not 0.0 <= alpha <= 1.0:
                raise ValueError(f"rgba() alpha must be in [0, 1], got {alpha}")
            rgba = (r, g, b, int(round(alpha * 255)))
        else:
            # ImageColor raises ValueError for unknown specs
            parsed = ImageColor.getrgb(text)
            rgba = tuple(parsed) if len(parsed) == 4 else (*parsed, 255)
    else:
        values = tuple(int(v) for v in spec)
        if len(values) == 3:
            values = (*values, 255)
        if len(values) != 4:
            raise ValueError(f"Color tuple must have 3 or 4 components, got {len(values)}")
        rgba = values

    if any(c < 0 or c > 255 for c in rgba):
        raise ValueError(f"Color components must be in [0, 255], got {rgba}")
    return rgba


def to_unit_rgba(spec: ColorSpec) -> np.ndarray:
    """Parse a color spec into float32 RGBA in [0, 1], shape (4,)."""
    return np.asarray(parse_rgba(spec), dtype=np.float32) / 255.0
