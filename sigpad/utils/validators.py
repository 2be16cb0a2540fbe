"""YAML schema validation and config loading.

Provides centralized validation for pad configuration using pydantic:
    - PadConfig: ink synthesis parameters (velocity filter, width range,
      dot size policy, pen/background colors)
    - SurfaceConfig: raster surface size in px
    - PadFileV1 (pad.v1.yaml): both of the above under a schema tag

Invalid configuration (inverted width bounds, filter weight outside [0, 1],
unknown colors) fails here, at setup time, never mid-stroke.

Units:
    - Widths and dot size: px (diameter)
    - Velocity filter weight: dimensionless in [0, 1]
    - Colors: normalized to (r, g, b, a) ints in [0, 255]

Usage:
    from sigpad.utils import validators

    cfg = validators.PadConfig(min_width=0.8, max_width=3.0)
    pad_file = validators.load_pad_config("configs/pad.v1.yaml")
"""

from pathlib import Path
from typing import Any, Callable, Tuple, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PositiveFloat,
    field_validator,
    model_validator,
)

from .color import parse_rgba
from .logging_config import get_logger

logger = get_logger(__name__)

RGBA = Tuple[int, int, int, int]


def average_width(min_width: float, max_width: float) -> float:
    """Default dot size policy: midpoint of the width range."""
    return (min_width + max_width) / 2


# ============================================================================
# PAD CONFIG
# ============================================================================

class PadConfig(BaseModel):
    """Ink synthesis parameters.

    ``dot_size`` is either a constant diameter or a callable
    ``f(min_width, max_width) -> float``; it sizes the single dot painted for
    strokes too short to fit a curve.
    """
    model_config = ConfigDict(frozen=True, extra='forbid')

    velocity_filter_weight: float = Field(
        0.7, ge=0.0, le=1.0,
        description="Weight of the newest velocity in the exponential filter"
    )
    min_width: PositiveFloat = Field(0.5, description="Thinnest stroke width (px)")
    max_width: PositiveFloat = Field(2.5, description="Stroke width at zero velocity (px)")
    dot_size: Union[PositiveFloat, Callable[[float, float], float]] = Field(
        default=average_width,
        description="Single-dot diameter (px) or f(min_width, max_width)"
    )
    pen_color: RGBA = Field("black", validate_default=True)
    background_color: RGBA = Field("rgba(0,0,0,0)", validate_default=True)

    @field_validator('pen_color', 'background_color', mode='before')
    @classmethod
    def validate_color(cls, v: Any) -> RGBA:
        return parse_rgba(v)

    @model_validator(mode='after')
    def validate_width_range(self) -> 'PadConfig':
        if self.min_width > self.max_width:
            raise ValueError(
                f"min_width ({self.min_width}) must not exceed max_width ({self.max_width})"
            )
        return self


# ============================================================================
# SURFACE CONFIG
# ============================================================================

class SurfaceConfig(BaseModel):
    """Raster surface size in px."""
    model_config = ConfigDict(frozen=True, extra='forbid')

    width: int = Field(600, gt=0, le=16384)
    height: int = Field(200, gt=0, le=16384)


# ============================================================================
# PAD FILE V1 (pad.v1.yaml)
# ============================================================================

class PadFileV1(BaseModel):
    """Container for a pad config file (pad.v1.yaml schema)."""
    model_config = ConfigDict(populate_by_name=True, extra='forbid')

    schema_version: str = Field("pad.v1", alias="schema", description="Schema version")
    pad: PadConfig = Field(default_factory=PadConfig)
    surface: SurfaceConfig = Field(default_factory=SurfaceConfig)

    @field_validator('schema_version')
    @classmethod
    def validate_schema(cls, v: str) -> str:
        if v != "pad.v1":
            raise ValueError(f"Expected schema 'pad.v1', got '{v}'")
        return v


# ============================================================================
# PUBLIC API
# ============================================================================

def load_pad_config(path: Union[str, Path]) -> PadFileV1:
    """Load and validate a pad config from YAML.

    Parameters
    ----------
    path : Union[str, Path]
        Path to pad.v1.yaml file

    Returns
    -------
    PadFileV1
        Validated pad and surface configuration

    Raises
    ------
    FileNotFoundError
        If path doesn't exist
    ValueError
        If validation fails (message names the file and the offending field)
    """
    from . import fs

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Pad config not found: {path}")

    data = fs.load_yaml(path)
    try:
        return PadFileV1(**data)
    except Exception as e:
        logger.error(f"Pad config validation failed at {path}: {e}")
        raise ValueError(f"Pad config validation failed at {path}: {e}") from e
