"""Cross-cutting utilities (lowest dependency layer).

This package provides shared primitives for:
    - Config validation (validators)
    - Color parsing (color)
    - Bézier geometry (geometry)
    - Atomic I/O (fs)
    - Unified logging (logging_config)

No module in utils/ may import from sigpad.ink.

Convenience imports:
    from sigpad.utils import fs, geometry, validators
    from sigpad.utils.logging_config import setup_logging, get_logger
"""

from . import color
from . import fs
from . import geometry
from . import logging_config
from . import validators

from .logging_config import get_logger, push_context, setup_logging

__all__ = [
    # Modules
    'color',
    'fs',
    'geometry',
    'logging_config',
    'validators',
    # Direct exports
    'setup_logging',
    'get_logger',
    'push_context',
]
