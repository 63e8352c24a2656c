"""
CLI entry point for a headless particle backdrop run.

Usage:
    rosebloom-particles [--mode ambient|falling] [options]
"""

import argparse
import logging
import math
import random
import sys
import time
from pathlib import Path

from rosebloom.io.exporter import LayoutExporter
from rosebloom.logging_config import setup_logging
from rosebloom.particles.simulator import (
    Bounds,
    Particle,
    ParticleConfig,
    ParticleMode,
    ParticleSimulator,
)


def _progress_bar(current: int, total: int, width: int = 35):
    """Print a progress bar to stdout."""
    pct = current / max(total, 1) * 100
    filled = int(width * current / max(total, 1))
    bar = "#" * filled + "-" * (width - filled)
    if sys.stdout.isatty():
        sys.stdout.write(f"\r[{bar}] {pct:5.1f}%  tick {current}/{total}")
        sys.stdout.flush()
        if current >= total:
            sys.stdout.write("\n")
    else:
        if current % max(1, total // 20) == 0 or current >= total:
            print(f"{pct:5.1f}%  tick {current}/{total}", flush=True)


def _snapshot(pool):
    return [Particle(**vars(p)) for p in pool]


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="rosebloom-particles",
        description="Headless particle backdrop simulation",
    )

    parser.add_argument(
        "-m", "--mode", type=str, default="ambient",
        choices=[m.value for m in ParticleMode],
        help="Particle behavior (default: ambient)",
    )
    parser.add_argument("-n", "--count", type=int, default=30, help="Pool size (default: 30)")
    parser.add_argument("--width", type=float, default=800, help="Surface width (default: 800)")
    parser.add_argument("--height", type=float, default=600, help="Surface height (default: 600)")

    # Timing
    parser.add_argument("-t", "--ticks", type=int, default=1000, help="Host ticks to run (default: 1000)")
    parser.add_argument("--delta-ms", type=float, default=16.0, help="Elapsed ms per host tick (default: 16)")
    parser.add_argument("--max-fps", type=float, default=30.0, help="Simulation step cap (default: 30)")

    parser.add_argument(
        "-o", "--output",
        type=Path,
        default=None,
        help="Write recorded frames to this JSON file",
    )
    parser.add_argument("--record-every", type=int, default=1, help="Record every Nth step (default: 1)")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args(argv)

    if args.verbose:
        setup_logging(logging.DEBUG)

    bounds = Bounds(args.width, args.height)
    if not bounds.is_valid:
        print(f"Error: invalid surface size {args.width}x{args.height}", file=sys.stderr)
        sys.exit(1)
    if args.ticks < 0 or args.record_every < 1 or args.max_fps <= 0:
        print("Error: --ticks must be >= 0, --record-every >= 1 and --max-fps > 0", file=sys.stderr)
        sys.exit(1)

    config = ParticleConfig(max_fps=args.max_fps)
    sim = ParticleSimulator(config, rng=random.Random(args.seed))
    mode = ParticleMode(args.mode)
    pool = sim.spawn(args.count, mode, bounds)

    print(f"Simulating {len(pool)} {mode.value} particles on {args.width:g}x{args.height:g}")
    print(f"  {args.ticks} ticks @ {args.delta_ms:g} ms, capped at {args.max_fps:g} steps/s")

    t0 = time.time()
    frames = []
    steps = 0
    for i in range(args.ticks):
        if sim.tick(pool, args.delta_ms, bounds):
            steps += 1
            if args.output is not None and steps % args.record_every == 0:
                frames.append(_snapshot(pool))
        _progress_bar(i + 1, args.ticks)
    elapsed = time.time() - t0

    finite = all(math.isfinite(p.x) and math.isfinite(p.y) for p in pool)
    print(f"\nDone! {steps} steps in {elapsed:.2f}s")
    print(f"  Simulated time: {args.ticks * args.delta_ms / 1000:.1f}s")
    print(f"  All positions finite: {finite}")
    if pool:
        alphas = [p.alpha for p in pool]
        print(f"  Alpha range: {min(alphas):.3f} - {max(alphas):.3f}")

    if args.output is not None:
        exporter = LayoutExporter()
        manifest = exporter.build_particle_frames(frames, bounds, fps=args.max_fps)
        path = exporter.export_json(manifest, args.output)
        print(f"  Output: {path} ({len(frames)} frames)")


if __name__ == "__main__":
    main()
