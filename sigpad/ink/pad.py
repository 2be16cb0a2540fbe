"""SignaturePad: binds stroke transitions to a surface and listeners.

The pad owns the current StrokeState and an "is empty" flag. Each input
call runs the matching pure transition, rasterizes its segments (and the
fallback dot) onto the surface, then dispatches lifecycle events to the
on_begin / on_end listeners.

Input adapters (mouse, touch, stylus bridges) translate device events into
surface-local Samples and call begin/update/end; they are also responsible
for serializing pointers so only one stroke is active at a time.

Usage:
    pad = SignaturePad(RasterSurface(600, 200), PadConfig(max_width=3.0),
                       on_end=lambda ev: submit_button.enable())
    pad.begin(Sample(12, 40, 0.0))
    pad.update(Sample(18, 42, 16.0))
    pad.end(Sample(25, 45, 33.0))
    pad.save_png("signature.png")
"""

import base64
import binascii
import io
from pathlib import Path
from typing import Callable, Optional, Union

import numpy as np
from PIL import Image, UnidentifiedImageError

from sigpad.utils import fs
from sigpad.utils.logging_config import get_logger
from sigpad.utils.validators import PadConfig

from . import strokes
from .cpu_raster import RasterSurface, Surface, draw_curve, draw_dot
from .samples import Sample
from .strokes import StrokeBegan, StrokeEnded, StrokeEvent, StrokeState, StrokeStep

logger = get_logger(__name__)

Listener = Callable[[StrokeEvent], None]

_DATA_URL_PREFIX = "data:image/png;base64,"


def _noop(event: StrokeEvent) -> None:
    return None


class SignaturePad:
    """Stateful driver around the pure stroke transitions.

    Attributes
    ----------
    surface : Surface
        Raster target (shared, mutated only through fill operations)
    config : PadConfig
        Validated ink parameters
    state : StrokeState
        Current stroke controller state
    curves_drawn : int
        Segments rasterized in the current stroke (diagnostics)
    """

    def __init__(
        self,
        surface: Surface,
        config: Optional[PadConfig] = None,
        *,
        on_begin: Optional[Listener] = None,
        on_end: Optional[Listener] = None
    ):
        self.surface = surface
        self.config = config if config is not None else PadConfig()
        self.on_begin = on_begin or _noop
        self.on_end = on_end or _noop
        self.state = StrokeState()
        self.curves_drawn = 0
        self._is_empty = True

        self.clear()

        logger.info(
            f"SignaturePad initialized: widths=[{self.config.min_width}, {self.config.max_width}] px, "
            f"velocity_filter_weight={self.config.velocity_filter_weight}"
        )

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def begin(self, sample: Sample) -> None:
        """Pointer down: start a new stroke at sample."""
        self.curves_drawn = 0
        self._apply(strokes.begin(self.state, sample, self.config))

    def update(self, sample: Sample) -> None:
        """Pointer move while a stroke is active."""
        self._apply(strokes.update(self.state, sample, self.config))

    def end(self, sample: Sample) -> None:
        """Pointer up: final sample of the stroke."""
        self._apply(strokes.end(self.state, sample, self.config))

    def _apply(self, step: StrokeStep) -> None:
        self.state = step.state
        color = self.config.pen_color

        for segment in step.segments:
            painted = draw_curve(
                self.surface, segment.curve,
                segment.start_width, segment.end_width, color
            )
            self.curves_drawn += 1
            if painted:
                self._is_empty = False

        if step.dot is not None:
            draw_dot(self.surface, step.dot.at, step.dot.size, color)
            self._is_empty = False

        for event in step.events:
            if isinstance(event, StrokeBegan):
                logger.debug(f"Stroke began at ({event.sample.x:.1f}, {event.sample.y:.1f})")
                self.on_begin(event)
            elif isinstance(event, StrokeEnded):
                logger.debug(f"Stroke ended (curves={self.curves_drawn})")
                self.on_end(event)

    # ------------------------------------------------------------------
    # Query / reset
    # ------------------------------------------------------------------

    def is_empty(self) -> bool:
        """True until the first disc is painted after clear()."""
        return self._is_empty

    def clear(self) -> None:
        """Repaint the background and drop any stroke in progress."""
        self.surface.clear()
        self.surface.fill_background(self.config.background_color)
        self.state = StrokeState()
        self._is_empty = True

    def off(self) -> None:
        """Detach the on_begin / on_end listeners."""
        self.on_begin = _noop
        self.on_end = _noop

    # ------------------------------------------------------------------
    # Raster export / import (RasterSurface only)
    # ------------------------------------------------------------------

    def _raster(self) -> RasterSurface:
        if not isinstance(self.surface, RasterSurface):
            raise TypeError(
                f"Image export/import needs a RasterSurface, got {type(self.surface).__name__}"
            )
        return self.surface

    def to_image(self) -> Image.Image:
        """Copy of the surface as an RGBA Pillow image."""
        return self._raster().to_image()

    def trimmed_image(self) -> Optional[Image.Image]:
        """Copy cropped to the non-transparent pixels; None if fully transparent."""
        image = self.to_image()
        bbox = image.getchannel("A").getbbox()
        if bbox is None:
            return None
        return image.crop(bbox)

    def to_data_url(self) -> str:
        """PNG data URL of the surface (data:image/png;base64,...)."""
        buf = io.BytesIO()
        self.to_image().save(buf, format="PNG")
        return _DATA_URL_PREFIX + base64.b64encode(buf.getvalue()).decode("ascii")

    def save_png(self, path: Union[str, Path]) -> None:
        """Write the surface to a PNG file atomically."""
        fs.atomic_save_image(self._raster().to_uint8(), path)
        logger.debug(f"Saved signature PNG: {path}")

    def from_image(self, image: Image.Image) -> None:
        """Draw an image scaled to the surface; the pad becomes non-empty.

        Any stroke in progress is dropped. The image is composited over the
        current content, as drawing it onto a canvas would.
        """
        raster = self._raster()
        self.state = StrokeState()
        raster.draw_image(image)
        self._is_empty = False

    def from_data_url(self, data_url: str) -> None:
        """Decode a base64 image data URL and draw it (see from_image)."""
        header, sep, payload = data_url.partition(",")
        if not sep or not header.startswith("data:image/") or ";base64" not in header:
            raise ValueError("Expected a base64 image data URL (data:image/...;base64,...)")
        try:
            raw = base64.b64decode(payload, validate=True)
        except binascii.Error as e:
            raise ValueError(f"Invalid base64 payload in data URL: {e}") from e

        try:
            image = Image.open(io.BytesIO(raw))
            image.load()
        except (UnidentifiedImageError, OSError) as e:
            raise ValueError(f"Data URL payload is not a decodable image: {e}") from e

        with image:
            self.from_image(image)

    def pixels(self) -> np.ndarray:
        """Read-only RGBA float view of the surface, shape (H, W, 4)."""
        return self._raster().pixels
