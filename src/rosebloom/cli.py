"""
CLI entry point for bouquet layout generation.

Usage:
    rosebloom-layout [--width 1920] [options]
    python -m rosebloom [options]
"""

import argparse
import logging
import sys
import time
from collections import Counter
from pathlib import Path

import numpy as np

from rosebloom.io.exporter import LayoutExporter
from rosebloom.layout.bouquet import generate_bouquet
from rosebloom.layout.config import BouquetConfig
from rosebloom.layout.density import DensityPolicy, DensityProfile
from rosebloom.logging_config import setup_logging


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="rosebloom-layout",
        description="Spiral bouquet layout generator",
    )

    parser.add_argument(
        "-w", "--width", type=float, default=1920,
        help="Viewport width used to pick the density profile (default: 1920)",
    )
    parser.add_argument(
        "-o", "--output",
        type=Path,
        default=None,
        help="Write the layout manifest here (.json or .npz)",
    )

    # Density overrides
    parser.add_argument("--breakpoint", type=int, default=768, help="Low/high density breakpoint (default: 768)")
    parser.add_argument("--count", type=int, default=None, help="Stem count (overrides profile)")
    parser.add_argument("--spread", type=float, default=None, help="Dome spread (overrides profile)")

    # Shape
    parser.add_argument("--bulge", type=float, default=1.6, help="Stem midpoint bulge (default: 1.6)")
    parser.add_argument("--segments", type=int, default=12, help="Polyline segments per stem (default: 12)")
    parser.add_argument("--precision", type=int, default=4, help="Decimal places in JSON output (default: 4)")

    parser.add_argument("--seed", type=int, default=None, help="Random seed for a repeatable layout")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args(argv)

    if args.verbose:
        setup_logging(logging.DEBUG)

    if args.count is not None and args.count < 1:
        print(f"Error: --count must be at least 1, got {args.count}", file=sys.stderr)
        sys.exit(1)
    if args.segments < 1:
        print(f"Error: --segments must be at least 1, got {args.segments}", file=sys.stderr)
        sys.exit(1)
    if args.output is not None and args.output.suffix not in (".json", ".npz"):
        print(f"Error: unsupported output format: {args.output.suffix or args.output}", file=sys.stderr)
        sys.exit(1)

    profile = DensityPolicy(breakpoint=args.breakpoint).classify(args.width)
    if args.count is not None or args.spread is not None:
        profile = DensityProfile(
            total_count=args.count if args.count is not None else profile.total_count,
            spread=args.spread if args.spread is not None else profile.spread,
            scale_multiplier=profile.scale_multiplier,
        )

    print(f"Viewport width {args.width:g} -> {profile.total_count} stems, "
          f"spread {profile.spread:g}, scale x{profile.scale_multiplier:g}")

    config = BouquetConfig(bulge=args.bulge)

    t0 = time.time()
    records = generate_bouquet(profile, rng=np.random.default_rng(args.seed), config=config)
    elapsed = time.time() - t0

    colors = Counter(r.color.name for r in records)
    leaves = sum(len(r.leaves) for r in records)
    scales = [r.scale for r in records]

    print(f"  Stems: {len(records)} ({', '.join(f'{k}: {v}' for k, v in sorted(colors.items()))})")
    print(f"  Leaves: {leaves}")
    if scales:
        print(f"  Scale range: {min(scales):.4f} - {max(scales):.4f}")
        print(f"  Last bloom at: {max(r.head.bloom_delay_ms for r in records):.0f} ms")
    print(f"  Generation took {elapsed * 1000:.1f} ms")

    if args.output is not None:
        exporter = LayoutExporter(precision=args.precision, path_segments=args.segments)
        if args.output.suffix == ".npz":
            path = exporter.export_numpy(records, args.output)
        else:
            path = exporter.export_json(exporter.build_manifest(records, profile), args.output)
        print(f"  Output: {path}")


if __name__ == "__main__":
    main()
