"""Stroke lifecycle as pure transitions over an explicit state value.

States: IDLE → ACTIVE → IDLE. Each transition takes the previous
StrokeState plus one sample and returns a StrokeStep describing:
    - the next state
    - segments to rasterize (curve + start/end width)
    - an optional fallback dot (single taps, 2-sample strokes)
    - lifecycle events (StrokeBegan / StrokeEnded)

Nothing here touches a surface or calls listeners; SignaturePad applies
a step to its surface and dispatches its events. This keeps curve emission
testable without any raster or input plumbing.

Usage:
    state = StrokeState()
    step = begin(state, Sample(10, 10, 0), cfg)
    step = update(step.state, Sample(14, 11, 16), cfg)
    step = end(step.state, Sample(20, 13, 32), cfg)
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from sigpad.utils.logging_config import get_logger
from sigpad.utils.validators import PadConfig

from . import curve_fit
from .filters import estimate_velocity, resolve_dot_size, smooth_velocity, width_for_velocity
from .samples import Curve, FilterState, Sample

logger = get_logger(__name__)


class Phase(enum.Enum):
    IDLE = "idle"
    ACTIVE = "active"


# ---------------------------------------------------------------------------
# Step outputs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Segment:
    """One curve with the widths at its two ends."""

    curve: Curve
    start_width: float
    end_width: float


@dataclass(frozen=True)
class Dot:
    """Fallback mark for a stroke that never produced a curve."""

    at: Sample
    size: float


@dataclass(frozen=True)
class StrokeBegan:
    sample: Sample


@dataclass(frozen=True)
class StrokeEnded:
    sample: Sample


StrokeEvent = Union[StrokeBegan, StrokeEnded]


@dataclass(frozen=True)
class StrokeState:
    """Stroke controller state; FilterState is only meaningful while ACTIVE."""

    phase: Phase = Phase.IDLE
    window: curve_fit.Window = ()
    filter: Optional[FilterState] = None

    @property
    def active(self) -> bool:
        return self.phase is Phase.ACTIVE


@dataclass(frozen=True)
class StrokeStep:
    state: StrokeState
    segments: Tuple[Segment, ...] = ()
    dot: Optional[Dot] = None
    events: Tuple[StrokeEvent, ...] = ()


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------


def begin(state: StrokeState, sample: Sample, config: PadConfig) -> StrokeStep:
    """Start a new stroke (restarts any stroke already in progress)."""
    if state.active:
        logger.debug("Stroke restarted before end; discarding pending window")

    fresh = StrokeState(
        phase=Phase.ACTIVE,
        window=(),
        filter=FilterState.initial(config.min_width, config.max_width),
    )
    step = _advance(fresh, sample, config)
    return StrokeStep(
        state=step.state,
        segments=step.segments,
        events=(StrokeBegan(sample),),
    )


def update(state: StrokeState, sample: Sample, config: PadConfig) -> StrokeStep:
    """Feed one sample into the active stroke; no-op while IDLE."""
    if not state.active:
        return StrokeStep(state=state)
    return _advance(state, sample, config)


def end(state: StrokeState, sample: Sample, config: PadConfig) -> StrokeStep:
    """Finish the stroke: final update, fallback dot if no curve was possible.

    Returns to IDLE; no-op when no stroke is active.
    """
    if not state.active:
        return StrokeStep(state=state)

    step = _advance(state, sample, config)
    window = step.state.window

    dot = None
    if 0 < len(window) < 3:
        dot = Dot(at=window[0], size=resolve_dot_size(config))
        logger.debug(f"Short stroke ({len(window)} samples), painting fallback dot")

    return StrokeStep(
        state=StrokeState(),
        segments=step.segments,
        dot=dot,
        events=(StrokeEnded(sample),),
    )


def _advance(state: StrokeState, sample: Sample, config: PadConfig) -> StrokeStep:
    """Append a sample; turn an emitted curve into a width-annotated segment."""
    window, curve = curve_fit.add_sample(state.window, sample)
    if curve is None:
        return StrokeStep(state=StrokeState(state.phase, window, state.filter))

    last = state.filter
    velocity = smooth_velocity(
        estimate_velocity(curve.start, curve.end),
        last.last_velocity,
        config.velocity_filter_weight,
    )
    width = width_for_velocity(velocity, config.min_width, config.max_width)

    segment = Segment(curve=curve, start_width=last.last_width, end_width=width)
    return StrokeStep(
        state=StrokeState(state.phase, window, FilterState(velocity, width)),
        segments=(segment,),
    )
