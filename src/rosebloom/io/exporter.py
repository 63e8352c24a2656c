"""
Layout and particle serialization.

Writes bouquet layouts and recorded particle frames to JSON so renderers in
any environment can draw them without running the generators.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional, Sequence, Union

import numpy as np

from rosebloom.layout.density import DensityProfile
from rosebloom.layout.ornaments import StemRecord, leaf_pose
from rosebloom.particles.simulator import Bounds, Particle


@dataclass
class LayoutMetadata:
    """Metadata header for a bouquet manifest."""

    total_count: int
    spread: float
    scale_multiplier: float
    path_segments: int
    schema_version: str = "1.0"


class LayoutExporter:
    """
    Exports bouquet layouts and particle frames as JSON-ready dictionaries.
    """

    def __init__(self, precision: int = 4, path_segments: int = 12):
        """
        Args:
            precision: Decimal places for floating point values.
            path_segments: Polyline segments sampled per stem.
        """
        self.precision = precision
        self.path_segments = path_segments

    def _round(self, value: float) -> float:
        return round(float(value), self.precision)

    def _vec(self, v: Sequence[float]) -> List[float]:
        return [self._round(c) for c in v]

    def _build_stem(self, record: StemRecord) -> dict[str, Any]:
        curve = record.curve
        leaves = []
        for leaf in record.leaves:
            position, orientation = leaf_pose(curve, leaf)
            leaves.append({
                "position_param": self._round(leaf.position_param),
                "angle": self._round(leaf.angle),
                "scale": self._round(leaf.scale),
                "delay_ms": self._round(leaf.delay_ms),
                "position": self._vec(position),
                "quaternion": self._vec(orientation.quaternion),
            })

        return {
            "id": record.id,
            "start": self._vec(curve.start),
            "control": self._vec(curve.control),
            "end": self._vec(curve.end),
            "path": [self._vec(p) for p in curve.sample(self.path_segments)],
            "delay_ms": self._round(record.delay_ms),
            "scale": self._round(record.scale),
            "color": record.color.value,
            "head": {
                "position": self._vec(record.head.position),
                "quaternion": self._vec(record.head.orientation.quaternion),
                "euler": self._vec(record.head.orientation.euler),
                "bloom_delay_ms": self._round(record.head.bloom_delay_ms),
            },
            "leaves": leaves,
        }

    def build_manifest(
        self,
        records: Sequence[StemRecord],
        profile: DensityProfile,
    ) -> dict[str, Any]:
        """
        Build the complete bouquet manifest.

        Args:
            records: Stems from generate_bouquet.
            profile: Density profile the bouquet was generated with.

        Returns:
            Dictionary with "metadata" and "stems".
        """
        metadata = LayoutMetadata(
            total_count=len(records),
            spread=self._round(profile.spread),
            scale_multiplier=self._round(profile.scale_multiplier),
            path_segments=self.path_segments,
        )
        return {
            "metadata": {
                "total_count": metadata.total_count,
                "spread": metadata.spread,
                "scale_multiplier": metadata.scale_multiplier,
                "path_segments": metadata.path_segments,
                "schema_version": metadata.schema_version,
            },
            "stems": [self._build_stem(r) for r in records],
        }

    def _build_particle(self, p: Particle) -> dict[str, Any]:
        out = {
            "x": self._round(p.x),
            "y": self._round(p.y),
            "size": self._round(p.size),
            "alpha": self._round(p.alpha),
        }
        if p.hue is not None:
            out["hue"] = self._round(p.hue)
        if p.rotation is not None:
            out["rotation"] = self._round(p.rotation)
        return out

    def build_particle_frames(
        self,
        frames: Sequence[Sequence[Particle]],
        bounds: Bounds,
        fps: Optional[float] = None,
    ) -> dict[str, Any]:
        """
        Build a manifest of recorded particle snapshots.

        Args:
            frames: One sequence of particles per recorded frame.
            bounds: Drawing surface size the frames were simulated in.
            fps: Step rate the frames were recorded at.
        """
        mode = None
        for frame in frames:
            if frame:
                mode = frame[0].mode.value
                break
        return {
            "metadata": {
                "width": self._round(bounds.width),
                "height": self._round(bounds.height),
                "fps": fps,
                "mode": mode,
                "n_frames": len(frames),
            },
            "frames": [
                [self._build_particle(p) for p in frame]
                for frame in frames
            ],
        }

    def export_json(
        self,
        manifest: dict[str, Any],
        output_path: Union[str, Path],
        indent: int = 2,
    ) -> Path:
        """Write a manifest built by this exporter to a JSON file."""
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(manifest, f, indent=indent)

        return output_path

    def export_numpy(
        self,
        records: Sequence[StemRecord],
        output_path: Union[str, Path],
    ) -> Path:
        """
        Export stem control points and attributes as a NumPy .npz archive.

        Arrays: control_points (N, 3, 3), delay_ms, scale, color (str), leaf_count.
        """
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        if records:
            control_points = np.stack([r.curve.control_points() for r in records])
        else:
            control_points = np.zeros((0, 3, 3), dtype=np.float64)

        np.savez_compressed(
            output_path,
            control_points=control_points,
            delay_ms=np.array([r.delay_ms for r in records], dtype=np.float64),
            scale=np.array([r.scale for r in records], dtype=np.float64),
            color=np.array([r.color.value for r in records], dtype=str),
            leaf_count=np.array([len(r.leaves) for r in records], dtype=np.int32),
        )

        return output_path
