#!/usr/bin/env python3
"""Signature preview tool for visual validation of ink synthesis.

Replays a synthetic, time-stamped signature gesture through SignaturePad and
writes the resulting surface as PNG. Useful for eyeballing width modulation
after changing velocity_filter_weight or the width range.

The gesture has three strokes:
    - a looping cursive body drawn at varying speed
    - a fast underline (thin ink)
    - a single tap (fallback dot)

Usage:
    python scripts/preview_signature.py --output outputs/preview/signature.png

    # Custom config, trimmed to the ink, slow hand
    python scripts/preview_signature.py --config configs/pad.v1.yaml \
        --trim --speed 0.5 --output outputs/preview/slow.png

    # Keep the config that produced the preview (writes signature.yaml)
    python scripts/preview_signature.py --save-config
"""

import argparse
import logging
import math
import sys
import time
from pathlib import Path
from typing import List

import numpy as np

from sigpad.ink import RasterSurface, Sample, SignaturePad, resolve_dot_size
from sigpad.utils import fs, logging_config, validators

# Input device report interval (ms)
FRAME_MS = 16.0


def parse_args():
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render a synthetic signature through the ink pipeline",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    parser.add_argument(
        '--config',
        type=str,
        default=None,
        help='Path to pad.v1.yaml (defaults are used when omitted)'
    )
    parser.add_argument(
        '--output',
        type=str,
        default='outputs/preview/signature.png',
        help='Output PNG path, default: outputs/preview/signature.png'
    )
    parser.add_argument(
        '--speed',
        type=float,
        default=1.0,
        help='Hand speed multiplier (>1 = faster, thinner ink), default: 1.0'
    )
    parser.add_argument(
        '--jitter',
        type=float,
        default=0.4,
        help='Positional noise std-dev in px, default: 0.4'
    )
    parser.add_argument(
        '--seed',
        type=int,
        default=7,
        help='Noise seed, default: 7'
    )
    parser.add_argument(
        '--trim',
        action='store_true',
        help='Crop the output to the inked area'
    )
    parser.add_argument(
        '--save-config',
        action='store_true',
        help='Also write the effective pad.v1 config next to the PNG (same name, .yaml)'
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable verbose logging'
    )
    return parser.parse_args()


def synth_gesture(
    width: int,
    height: int,
    speed: float,
    jitter: float,
    rng: np.random.RandomState
) -> List[List[Sample]]:
    """Build stroke sample lists for a cursive-like signature.

    Parameters
    ----------
    width, height : int
        Surface size in px
    speed : float
        Hand speed multiplier (scales the time between reports)
    jitter : float
        Positional noise std-dev in px
    rng : np.random.RandomState
        Noise source

    Returns
    -------
    List[List[Sample]]
        One list per stroke, in drawing order
    """
    dt = FRAME_MS / max(speed, 1e-3)
    cx, cy = width * 0.5, height * 0.45
    span = width * 0.7
    clock = 0.0

    # Body: prolate cycloid loops travelling left → right
    body = []
    n = 140
    for i in range(n):
        u = i / (n - 1)
        phase = u * 6.0 * math.pi
        x = cx - span / 2 + span * u - 0.08 * span * math.sin(phase)
        y = cy - 0.22 * height * math.cos(phase) * (0.6 + 0.4 * math.sin(u * math.pi))
        # Slower through the loop tops, faster on the connecting strokes
        clock += dt * (0.6 + 0.8 * abs(math.cos(phase)))
        body.append(Sample(x + rng.randn() * jitter, y + rng.randn() * jitter, clock))

    # Underline: long and quick
    clock += 250.0
    underline = []
    n = 25
    for i in range(n):
        u = i / (n - 1)
        x = cx - span / 2 + span * u
        y = height * 0.8 + 4.0 * math.sin(u * math.pi)
        clock += dt * 0.5
        underline.append(Sample(x + rng.randn() * jitter, y + rng.randn() * jitter, clock))

    # Dot: a single tap
    clock += 300.0
    dot = [Sample(cx + span * 0.42, cy - 0.3 * height, clock)]

    return [body, underline, dot]


def replay(pad: SignaturePad, stroke_samples: List[Sample]) -> None:
    """Feed one stroke: begin on the first sample, end on the last."""
    first, last = stroke_samples[0], stroke_samples[-1]
    pad.begin(first)
    for sample in stroke_samples[1:-1]:
        pad.update(sample)
    pad.end(last)


def effective_config(pad_file: validators.PadFileV1) -> dict:
    """pad.v1 mapping of pad_file with dot_size resolved to a number."""
    data = pad_file.model_dump(mode="json", by_alias=True, exclude={"pad": {"dot_size"}})
    data["pad"]["dot_size"] = resolve_dot_size(pad_file.pad)
    return data


def main():
    """Main entry point."""
    args = parse_args()

    log_level = "DEBUG" if args.verbose else "INFO"
    logging_config.setup_logging(log_level=log_level, log_file=None, context={"app": "preview"})
    logging_config.install_excepthook()
    logger = logging.getLogger(__name__)

    if args.config:
        pad_file = validators.load_pad_config(args.config)
        logger.info(f"Loaded config: {args.config}")
    else:
        pad_file = validators.PadFileV1()
        logger.info("Using default pad config")

    surface = RasterSurface(pad_file.surface.width, pad_file.surface.height)
    ended = []
    pad = SignaturePad(surface, pad_file.pad, on_end=ended.append)

    rng = np.random.RandomState(args.seed)
    gesture = synth_gesture(surface.width, surface.height, args.speed, args.jitter, rng)

    start_time = time.time()
    for stroke_samples in gesture:
        replay(pad, stroke_samples)
    render_time = time.time() - start_time
    logger.info(f"Rendered {len(ended)} stroke(s) in {render_time:.3f}s")

    if pad.is_empty():
        logger.error("Nothing was painted; check the width range and surface size")
        return 1

    output = Path(args.output)
    fs.ensure_dir(output.parent)
    if args.trim:
        trimmed = pad.trimmed_image()
        fs.atomic_save_image(trimmed, output)
        logger.info(f"Saved trimmed signature ({trimmed.width}×{trimmed.height}): {output}")
    else:
        pad.save_png(output)
        logger.info(f"Saved signature ({surface.width}×{surface.height}): {output}")

    if args.save_config:
        config_path = output.with_suffix(".yaml")
        fs.atomic_yaml_dump(effective_config(pad_file), config_path)
        logger.info(f"Saved effective config: {config_path}")

    return 0


if __name__ == '__main__':
    sys.exit(main())
