"""CPU rasterizer: fitted curves → trains of filled discs on an RGBA surface.

Architecture:
    - Curve length (chord estimate) → step count = floor(length)
    - Evaluate the Bézier at t = i / steps, i ∈ [0, steps)
    - Width at each step: start + t³ · (end - start)
    - One disc of radius width / 2 per step
    - All discs of one curve are merged into a single coverage mask and
      composited once, so overlapping discs never double-darken

Surfaces implement the minimal Surface interface (fill_discs,
fill_background, clear). RasterSurface is the bundled numpy implementation;
hosts with their own canvas subclass Surface instead.

Invariants:
    - RasterSurface pixels are straight-alpha RGBA float32 in [0, 1], (H, W, 4)
    - Pixel (row i, col j) has its center at (j + 0.5, i + 0.5) in surface px
    - Disc edges are anti-aliased over one pixel
"""

import math
from abc import ABC, abstractmethod
from typing import Tuple

import numpy as np
from PIL import Image

from sigpad.utils.color import ColorSpec, to_unit_rgba
from sigpad.utils.logging_config import get_logger

from .samples import Curve, Point

logger = get_logger(__name__)

# Absorbs chord-sum rounding noise before floor(length)
STEP_TOLERANCE = 1e-9


class Surface(ABC):
    """Raster target the ink pipeline paints on."""

    @abstractmethod
    def fill_discs(self, centers: np.ndarray, radii: np.ndarray, color: ColorSpec) -> None:
        """Fill the union of discs (centers (N, 2), radii (N,)) in one pass."""

    @abstractmethod
    def fill_background(self, color: ColorSpec) -> None:
        """Paint the whole surface with color."""

    @abstractmethod
    def clear(self) -> None:
        """Reset every pixel to fully transparent."""


class RasterSurface(Surface):
    """In-memory RGBA surface backed by a numpy array.

    Attributes
    ----------
    width, height : int
        Surface size in px
    """

    def __init__(self, width: int, height: int):
        if width <= 0 or height <= 0:
            raise ValueError(f"Surface size must be positive, got {width}×{height}")
        self.width = int(width)
        self.height = int(height)
        self._rgba = np.zeros((self.height, self.width, 4), dtype=np.float32)

    @property
    def pixels(self) -> np.ndarray:
        """Read-only view of the RGBA buffer, shape (H, W, 4)."""
        view = self._rgba.view()
        view.flags.writeable = False
        return view

    def clear(self) -> None:
        self._rgba.fill(0.0)

    def fill_background(self, color: ColorSpec) -> None:
        rgba = to_unit_rgba(color)
        coverage = np.ones((self.height, self.width), dtype=np.float32)
        self._composite(coverage, rgba, (0, self.height, 0, self.width))

    def fill_discs(self, centers: np.ndarray, radii: np.ndarray, color: ColorSpec) -> None:
        centers = np.asarray(centers, dtype=np.float64).reshape(-1, 2)
        radii = np.asarray(radii, dtype=np.float64).reshape(-1)
        if centers.shape[0] == 0:
            return
        if centers.shape[0] != radii.shape[0]:
            raise ValueError(
                f"Got {centers.shape[0]} disc centers but {radii.shape[0]} radii"
            )

        # ROI covering every disc plus the anti-aliasing fringe
        reach = radii + 1.0
        x_min = max(0, int(math.floor((centers[:, 0] - reach).min())))
        x_max = min(self.width, int(math.ceil((centers[:, 0] + reach).max())))
        y_min = max(0, int(math.floor((centers[:, 1] - reach).min())))
        y_max = min(self.height, int(math.ceil((centers[:, 1] + reach).max())))
        if x_max <= x_min or y_max <= y_min:
            return

        coverage = np.zeros((y_max - y_min, x_max - x_min), dtype=np.float32)
        for (cx, cy), r in zip(centers, radii):
            self._accumulate_disc(coverage, (y_min, x_min), cx, cy, r)

        self._composite(coverage, to_unit_rgba(color), (y_min, y_max, x_min, x_max))

    def _accumulate_disc(
        self,
        coverage: np.ndarray,
        origin: Tuple[int, int],
        cx: float,
        cy: float,
        r: float
    ) -> None:
        """Max-merge one anti-aliased disc into the ROI coverage buffer."""
        oy, ox = origin
        h, w = coverage.shape
        x0 = max(0, int(math.floor(cx - r - 1.0)) - ox)
        x1 = min(w, int(math.ceil(cx + r + 1.0)) - ox)
        y0 = max(0, int(math.floor(cy - r - 1.0)) - oy)
        y1 = min(h, int(math.ceil(cy + r + 1.0)) - oy)
        if x1 <= x0 or y1 <= y0:
            return

        ys = np.arange(y0, y1, dtype=np.float32) + oy + 0.5
        xs = np.arange(x0, x1, dtype=np.float32) + ox + 0.5
        dist = np.hypot(xs[np.newaxis, :] - cx, ys[:, np.newaxis] - cy)

        disc = np.clip(r + 0.5 - dist, 0.0, 1.0).astype(np.float32)
        np.maximum(coverage[y0:y1, x0:x1], disc, out=coverage[y0:y1, x0:x1])

    def _composite(
        self,
        coverage: np.ndarray,
        rgba: np.ndarray,
        roi: Tuple[int, int, int, int]
    ) -> None:
        """Source-over composite a solid color through a coverage mask."""
        src_a = (coverage * rgba[3])[..., np.newaxis]
        self._blend(rgba[:3], src_a, roi)

    def _blend(
        self,
        src_rgb: np.ndarray,
        src_a: np.ndarray,
        roi: Tuple[int, int, int, int]
    ) -> None:
        """Straight-alpha source-over: src over the ROI, in place."""
        y_min, y_max, x_min, x_max = roi
        dst = self._rgba[y_min:y_max, x_min:x_max]

        dst_a = dst[..., 3:4]
        out_a = src_a + dst_a * (1.0 - src_a)

        out_rgb = src_rgb * src_a + dst[..., :3] * dst_a * (1.0 - src_a)
        safe_a = np.where(out_a > 0.0, out_a, 1.0)
        out_rgb = np.where(out_a > 0.0, out_rgb / safe_a, 0.0)

        dst[..., :3] = np.clip(out_rgb, 0.0, 1.0)
        dst[..., 3:4] = np.clip(out_a, 0.0, 1.0)

    # ------------------------------------------------------------------
    # Pillow adapters (export / import)
    # ------------------------------------------------------------------

    def to_uint8(self) -> np.ndarray:
        """RGBA uint8 copy, shape (H, W, 4)."""
        return np.round(self._rgba * 255.0).astype(np.uint8)

    def to_image(self) -> Image.Image:
        # (H, W, 4) uint8 is inferred as RGBA
        return Image.fromarray(self.to_uint8())

    def draw_image(self, image: Image.Image) -> None:
        """Composite an image over the surface, scaled to the surface size."""
        src = image.convert("RGBA")
        if src.size != (self.width, self.height):
            logger.debug(
                f"Resizing imported image {src.width}×{src.height} → {self.width}×{self.height}"
            )
            src = src.resize((self.width, self.height), Image.Resampling.LANCZOS)
        arr = np.asarray(src, dtype=np.float32) / 255.0
        self._blend(arr[..., :3], arr[..., 3:4], (0, self.height, 0, self.width))


# ---------------------------------------------------------------------------
# Curve / dot rasterization
# ---------------------------------------------------------------------------


def draw_curve(
    surface: Surface,
    curve: Curve,
    start_width: float,
    end_width: float,
    color: ColorSpec
) -> int:
    """Rasterize one curve as a disc train with cubic width blending.

    Parameters
    ----------
    surface : Surface
        Target surface
    curve : Curve
        Fitted segment
    start_width, end_width : float
        Stroke width (diameter, px) at t=0 and t=1
    color : ColorSpec
        Pen color

    Returns
    -------
    int
        Number of discs painted (0 for curves shorter than 1 px)

    Notes
    -----
    Width follows t³, not t: most of the width change happens near the
    curve's end. Output shape depends on it; keep it.
    """
    steps = int(math.floor(curve.length() + STEP_TOLERANCE))
    if steps <= 0:
        return 0

    t = np.arange(steps, dtype=np.float64) / steps
    centers = curve.points_at(t)
    widths = start_width + (t ** 3) * (end_width - start_width)

    surface.fill_discs(centers, widths / 2.0, color)
    return steps


def draw_dot(surface: Surface, at: Point, size: float, color: ColorSpec) -> int:
    """Paint a single disc of diameter ``size`` at a point; returns 1."""
    surface.fill_discs(
        np.array([[at.x, at.y]], dtype=np.float64),
        np.array([size / 2.0], dtype=np.float64),
        color,
    )
    return 1
