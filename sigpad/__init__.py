"""sigpad: smooth, velocity-sensitive signature ink on a raster surface.

Layers:
    - utils: config validation, color parsing, geometry, atomic I/O, logging
    - ink: curve fitting, width filtering, rasterization, stroke lifecycle

Quick start:
    from sigpad.ink import RasterSurface, Sample, SignaturePad
    pad = SignaturePad(RasterSurface(600, 200))
"""

__version__ = "0.1.0"
