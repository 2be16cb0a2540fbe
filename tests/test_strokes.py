"""Test stroke lifecycle transitions.

Tests for sigpad.ink.strokes (no surface involved):
    - Single tap and 2-sample strokes end with one fallback dot
    - 3-sample stroke emits exactly one segment joining the first two samples
    - Consecutive segments share endpoints and widths (C0 + width continuity)
    - Widths stay within [min_width, max_width]
    - Faster replay of the same path never gives wider segments
    - update / end while IDLE are no-ops; begin while ACTIVE restarts

Run:
    pytest tests/test_strokes.py -v
"""

import math

import pytest

from sigpad.ink.strokes import (
    Phase,
    StrokeBegan,
    StrokeEnded,
    StrokeState,
    begin,
    end,
    update,
)
from sigpad.ink.samples import FilterState, Sample
from sigpad.utils.validators import PadConfig


@pytest.fixture
def cfg():
    return PadConfig()


def run_stroke(samples, cfg):
    """Feed samples as begin / update* / end; return every StrokeStep."""
    steps = [begin(StrokeState(), samples[0], cfg)]
    for s in samples[1:-1]:
        steps.append(update(steps[-1].state, s, cfg))
    steps.append(end(steps[-1].state, samples[-1], cfg))
    return steps


def segments_of(steps):
    return [seg for step in steps for seg in step.segments]


def wavy_path(n, dt, t0=0.0):
    return [
        Sample(i * 6.0, 30.0 + 12.0 * math.sin(i * 0.5), t0 + i * dt)
        for i in range(n)
    ]


# ============================================================================
# SHORT STROKES
# ============================================================================

def test_single_tap_paints_one_dot(cfg):
    p = Sample(40, 25, 0.0)
    steps = run_stroke([p, p], cfg)

    assert segments_of(steps) == []
    final = steps[-1]
    assert final.dot is not None
    assert (final.dot.at.x, final.dot.at.y) == (40, 25)
    assert final.dot.size == pytest.approx((cfg.min_width + cfg.max_width) / 2)
    assert final.state.phase is Phase.IDLE


def test_two_sample_stroke_dot_at_first_sample(cfg):
    a, b = Sample(10, 10, 0.0), Sample(30, 12, 16.0)
    steps = run_stroke([a, b], cfg)

    assert segments_of(steps) == []
    assert steps[-1].dot.at == a


def test_three_sample_stroke_emits_first_segment(cfg):
    a, b, c = Sample(0, 0, 0.0), Sample(10, 0, 10.0), Sample(10, 10, 20.0)
    steps = run_stroke([a, b, c], cfg)

    segments = segments_of(steps)
    assert len(segments) == 1
    seg = segments[0]
    assert seg.curve.start == a
    assert seg.curve.end == b
    assert steps[-1].dot is None

    # v = 10 px / 10 ms = 1, smoothed 0.7 * 1 + 0.3 * 0 = 0.7
    assert seg.start_width == pytest.approx(1.5)
    assert seg.end_width == pytest.approx(2.5 / 1.7)


# ============================================================================
# CONTINUITY AND WIDTH RANGE
# ============================================================================

def test_segments_are_continuous(cfg):
    segments = segments_of(run_stroke(wavy_path(30, 12.0), cfg))
    assert len(segments) == 28

    for prev, nxt in zip(segments, segments[1:]):
        assert prev.curve.end == nxt.curve.start
        assert prev.end_width == nxt.start_width


def test_widths_within_configured_range():
    cfg = PadConfig(min_width=0.8, max_width=3.0)
    # Mix of slow and very fast sections
    samples = wavy_path(20, 25.0) + wavy_path(20, 1.0, t0=500.0)[1:]
    for seg in segments_of(run_stroke(samples, cfg)):
        assert cfg.min_width <= seg.start_width <= cfg.max_width
        assert cfg.min_width <= seg.end_width <= cfg.max_width


def test_faster_replay_never_wider(cfg):
    slow = segments_of(run_stroke(wavy_path(25, 20.0), cfg))
    fast = segments_of(run_stroke(wavy_path(25, 5.0), cfg))

    assert len(slow) == len(fast)
    for s, f in zip(slow, fast):
        assert f.end_width <= s.end_width
    # Somewhere the difference must actually show
    assert any(f.end_width < s.end_width for s, f in zip(slow, fast))


def test_first_segment_starts_at_average_width():
    cfg = PadConfig(min_width=1.0, max_width=5.0)
    segments = segments_of(run_stroke(wavy_path(6, 10.0), cfg))
    assert segments[0].start_width == pytest.approx(3.0)


# ============================================================================
# LIFECYCLE
# ============================================================================

class TestLifecycle:
    def test_begin_activates_and_emits_event(self, cfg) -> None:
        s = Sample(1, 2, 0.0)
        step = begin(StrokeState(), s, cfg)

        assert step.state.active
        assert step.state.window == (s,)
        assert step.state.filter == FilterState.initial(cfg.min_width, cfg.max_width)
        assert step.events == (StrokeBegan(s),)

    def test_end_returns_to_idle_with_event(self, cfg) -> None:
        steps = run_stroke(wavy_path(5, 10.0), cfg)
        final = steps[-1]
        assert final.state == StrokeState()
        assert len(final.events) == 1
        assert isinstance(final.events[0], StrokeEnded)

    def test_update_while_idle_is_noop(self, cfg) -> None:
        idle = StrokeState()
        step = update(idle, Sample(5, 5, 0.0), cfg)
        assert step.state is idle
        assert step.segments == () and step.dot is None and step.events == ()

    def test_end_while_idle_is_noop(self, cfg) -> None:
        step = end(StrokeState(), Sample(5, 5, 0.0), cfg)
        assert step.events == ()
        assert step.dot is None

    def test_begin_while_active_restarts(self, cfg) -> None:
        steps = run_stroke(wavy_path(5, 10.0), cfg)[:-1]
        active = steps[-1].state
        assert active.active and active.filter != FilterState.initial(cfg.min_width, cfg.max_width)

        s = Sample(100, 100, 999.0)
        step = begin(active, s, cfg)
        assert step.state.window == (s,)
        assert step.state.filter == FilterState.initial(cfg.min_width, cfg.max_width)
        assert step.segments == ()

    def test_window_bounded_during_long_stroke(self, cfg) -> None:
        for step in run_stroke(wavy_path(80, 8.0), cfg):
            assert len(step.state.window) <= 4
