"""
Ambient particle backdrop.

Two behaviors share one pool type:
- Ambient: glowing points with jittered, clamped velocity and twinkling alpha.
  The field is closed: particles leaving any edge re-enter at the opposite one.
- Falling: petals that spin, sway with height and fall at constant speed.
  Petals leaving the bottom respawn above the top at a fresh x.

The simulator advances in fixed frames. Hosts call `tick` with elapsed
milliseconds at whatever rate they like; a frame limiter runs at most one
step per 1/max_fps seconds. Physics increments are per step, not scaled by
elapsed time, so motion speed is tied to the capped step rate.
"""

import logging
import math
import random
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

logger = logging.getLogger(__name__)


class ParticleMode(str, Enum):
    AMBIENT = "ambient"
    FALLING = "falling"


@dataclass
class Particle:
    """One point of the backdrop. Mutated in place every step."""
    x: float
    y: float
    vx: float
    vy: float
    size: float
    alpha: float
    mode: ParticleMode
    hue: Optional[float] = None  # falling only, degrees
    rotation: Optional[float] = None
    rotation_speed: Optional[float] = None


@dataclass(frozen=True)
class Bounds:
    width: float
    height: float

    @property
    def is_valid(self) -> bool:
        return (
            math.isfinite(self.width) and math.isfinite(self.height)
            and self.width > 0 and self.height > 0
        )


@dataclass
class ParticleConfig:
    """Configuration for the backdrop simulation."""
    max_fps: float = 30.0
    margin: float = 50.0  # distance past an edge before wrap/respawn

    # Ambient
    ambient_initial_speed: float = 0.25
    ambient_size_range: tuple = (1.0, 3.0)
    ambient_alpha_range: tuple = (0.3, 0.8)
    velocity_jitter: float = 0.025
    max_speed: float = 0.5
    alpha_jitter: float = 0.025
    alpha_min: float = 0.2
    alpha_max: float = 0.8

    # Falling
    falling_drift: float = 0.5
    fall_speed_range: tuple = (1.0, 2.0)
    falling_size_range: tuple = (5.0, 15.0)
    falling_alpha_range: tuple = (0.7, 1.0)
    hue_range: tuple = (330.0, 360.0)  # pink to red
    max_rotation_speed: float = 0.025
    sway_frequency: float = 0.01
    sway_amplitude: float = 0.5


class FrameLimiter:
    """
    Accumulates elapsed time and admits at most one frame per interval.

    The remainder past the interval is carried into the next frame, so the
    admitted rate converges on `max_fps` under any callback rate at or above it.
    """

    def __init__(self, max_fps: float = 30.0):
        self.interval_ms = 1000.0 / max_fps if max_fps > 0 else 0.0
        self.accumulated_ms = 0.0

    def advance(self, delta_ms: float) -> bool:
        if not math.isfinite(delta_ms) or delta_ms < 0:
            return False
        self.accumulated_ms += delta_ms
        if self.accumulated_ms < self.interval_ms:
            return False
        if self.interval_ms > 0:
            self.accumulated_ms %= self.interval_ms
        else:
            self.accumulated_ms = 0.0
        return True

    def reset(self):
        self.accumulated_ms = 0.0


class ParticleSimulator:
    """
    Steps a particle pool. Holds only a frame limiter and a random source;
    the pool itself belongs to the caller.
    """

    def __init__(
        self,
        config: Optional[ParticleConfig] = None,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ):
        self.cfg = config or ParticleConfig()
        self.rng = rng if rng is not None else random.Random(seed)
        self.limiter = FrameLimiter(self.cfg.max_fps)
        self.frame = 0

    def reset(self):
        self.limiter.reset()
        self.frame = 0

    def spawn_particle(self, mode: ParticleMode, bounds: Bounds) -> Particle:
        cfg = self.cfg
        rng = self.rng
        w, h = bounds.width, bounds.height

        if mode == ParticleMode.AMBIENT:
            s = cfg.ambient_initial_speed
            return Particle(
                x=rng.uniform(0, w),
                y=rng.uniform(0, h),
                vx=rng.uniform(-s, s),
                vy=rng.uniform(-s, s),
                size=rng.uniform(*cfg.ambient_size_range),
                alpha=rng.uniform(*cfg.ambient_alpha_range),
                mode=mode,
            )

        # Falling petals start anywhere in the screen-height band above the top
        return Particle(
            x=rng.uniform(0, w),
            y=rng.uniform(-h, 0),
            vx=rng.uniform(-cfg.falling_drift, cfg.falling_drift),
            vy=rng.uniform(*cfg.fall_speed_range),
            size=rng.uniform(*cfg.falling_size_range),
            alpha=rng.uniform(*cfg.falling_alpha_range),
            mode=mode,
            hue=rng.uniform(*cfg.hue_range),
            rotation=rng.uniform(0, 2 * math.pi),
            rotation_speed=rng.uniform(-cfg.max_rotation_speed, cfg.max_rotation_speed),
        )

    def spawn(self, count: int, mode: ParticleMode, bounds: Bounds) -> List[Particle]:
        """Create `count` particles. Invalid counts or bounds give an empty pool."""
        if count < 1 or not bounds.is_valid:
            logger.debug("Not spawning: count=%s bounds=%s", count, bounds)
            return []
        return [self.spawn_particle(ParticleMode(mode), bounds) for _ in range(count)]

    def tick(self, pool: List[Particle], delta_ms: float, bounds: Bounds) -> bool:
        """
        Feed elapsed time to the simulator.

        Returns True when a step ran. Invalid bounds or deltas are ignored.
        """
        if not bounds.is_valid:
            logger.debug("Skipping tick for invalid bounds %s", bounds)
            return False
        if not self.limiter.advance(delta_ms):
            return False
        self.step(pool, bounds)
        return True

    def step(self, pool: List[Particle], bounds: Bounds):
        """Advance every particle by one frame, ignoring the frame limiter."""
        if not bounds.is_valid:
            return
        for p in pool:
            p.x += p.vx
            p.y += p.vy
            if p.mode == ParticleMode.AMBIENT:
                self._update_ambient(p)
            else:
                self._update_falling(p)
            self._apply_edges(p, bounds)
        self.frame += 1

    def _update_ambient(self, p: Particle):
        cfg = self.cfg
        j = cfg.velocity_jitter
        p.vx = _clamp(p.vx + self.rng.uniform(-j, j), -cfg.max_speed, cfg.max_speed)
        p.vy = _clamp(p.vy + self.rng.uniform(-j, j), -cfg.max_speed, cfg.max_speed)

        a = cfg.alpha_jitter
        p.alpha = _clamp(p.alpha + self.rng.uniform(-a, a), cfg.alpha_min, cfg.alpha_max)

    def _update_falling(self, p: Particle):
        cfg = self.cfg
        p.rotation = (p.rotation or 0.0) + (p.rotation_speed or 0.0)
        p.x += math.sin(p.y * cfg.sway_frequency) * cfg.sway_amplitude

    def _apply_edges(self, p: Particle, bounds: Bounds):
        m = self.cfg.margin
        w, h = bounds.width, bounds.height

        if p.x < -m:
            p.x = w + m
        elif p.x > w + m:
            p.x = -m

        if p.mode == ParticleMode.AMBIENT:
            if p.y < -m:
                p.y = h + m
            elif p.y > h + m:
                p.y = -m
        elif p.y > h + m:
            p.y = -m
            p.x = self.rng.uniform(0, w)


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def create_particle_pool(
    mode: ParticleMode,
    count: int,
    bounds: Bounds,
    rng: Optional[random.Random] = None,
    config: Optional[ParticleConfig] = None,
) -> List[Particle]:
    """Spawn a pool without keeping a simulator around."""
    return ParticleSimulator(config, rng=rng).spawn(count, mode, bounds)
