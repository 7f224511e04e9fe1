"""Character particle disintegration.

On activation every visible character of the last rendered grid becomes a
particle that drifts outward, wobbles, falls and fades. Particle state is
kept as parallel numpy arrays so the whole swarm updates in a few vector
operations per frame.
"""

from typing import Optional, List
from dataclasses import dataclass
import logging
import math
import numpy as np
from numpy.typing import NDArray

from asciitorus.graphics.ascii import BLANK, blank_lines

logger = logging.getLogger(__name__)


@dataclass
class Particle:
    """A single character particle (grid coordinates, velocity per 16ms)."""

    x: float
    y: float
    vx: float
    vy: float
    char: str
    seed: float


@dataclass(frozen=True)
class ExplosionConfig:
    """Tuning for the disintegration."""

    duration_ms: float = 1450.0
    max_particles: int = 2200

    # Launch
    speed_min: float = 0.05
    speed_max: float = 0.10
    jitter: float = 0.02

    # Physics, per normalized 16ms step
    frame_ms: float = 16.0
    step_min: float = 0.25
    step_max: float = 2.2
    damping: float = 0.992
    gravity: float = 0.0022
    wobble: float = 0.006

    # Fade
    cull_start: float = 0.42
    fade_start: float = 0.72
    opacity: float = 0.96


def stride_sample(count: int, cap: int) -> NDArray[np.int64]:
    """Indices of at most ``cap`` items spread evenly over ``count``."""
    if count <= cap:
        return np.arange(count, dtype=np.int64)
    return np.floor(np.arange(cap) * (count / cap)).astype(np.int64)


def visible_cells(lines: List[str]):
    """(cols, rows, chars) for every non-blank cell, in row-major order."""
    xs: List[int] = []
    ys: List[int] = []
    chars: List[str] = []
    for row, line in enumerate(lines):
        for col, char in enumerate(line):
            if char.isspace():
                continue
            xs.append(col)
            ys.append(row)
            chars.append(char)
    return xs, ys, chars


class DisintegrationEngine:
    """Turns a character grid into particles and animates them to nothing.

    Idle until start(). While running, update() returns one grid per frame;
    once progress reaches 1 it returns a blank grid and stops simulating
    until the next start().
    """

    def __init__(
        self,
        config: Optional[ExplosionConfig] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        self.config = config or ExplosionConfig()
        self.rng = rng or np.random.default_rng()

        self.cols = 0
        self.rows = 0
        self.start_time = 0.0
        self.opacity = 0.0
        self._progress = 0.0
        self._running = False
        self._done = False
        self._clear_particles()

    def _clear_particles(self) -> None:
        self.x = np.zeros(0)
        self.y = np.zeros(0)
        self.vx = np.zeros(0)
        self.vy = np.zeros(0)
        self.seed = np.zeros(0)
        self.chars = np.zeros(0, dtype="<U1")

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def is_done(self) -> bool:
        return self._done

    @property
    def progress(self) -> float:
        return self._progress

    @property
    def count(self) -> int:
        return len(self.x)

    @property
    def particles(self) -> List[Particle]:
        """Snapshot of the swarm as Particle records."""
        return [
            Particle(float(x), float(y), float(vx), float(vy), str(c), float(s))
            for x, y, vx, vy, c, s in zip(
                self.x, self.y, self.vx, self.vy, self.chars, self.seed
            )
        ]

    def start(self, lines: List[str], now: float) -> int:
        """Spawn particles from ``lines`` and reset the clock to ``now``.

        Returns the number of particles created.
        """
        cfg = self.config
        self.rows = len(lines)
        self.cols = max((len(line) for line in lines), default=0)

        xs, ys, chars = visible_cells(lines)
        keep = stride_sample(len(chars), cfg.max_particles)

        self.x = np.asarray(xs, dtype=np.float64)[keep] if xs else np.zeros(0)
        self.y = np.asarray(ys, dtype=np.float64)[keep] if ys else np.zeros(0)
        self.chars = np.asarray(chars, dtype="<U1")[keep] if chars else np.zeros(0, dtype="<U1")

        count = len(self.x)
        dx = self.x - self.cols * 0.5
        dy = self.y - self.rows * 0.5
        dist = np.maximum(np.hypot(dx, dy), 1.0)
        speed = self.rng.uniform(cfg.speed_min, cfg.speed_max, count)

        self.vx = dx / dist * speed + self.rng.uniform(-cfg.jitter, cfg.jitter, count)
        self.vy = dy / dist * speed + self.rng.uniform(-cfg.jitter, cfg.jitter, count)
        self.seed = self.rng.uniform(0.0, math.tau, count)

        self.start_time = now
        self.opacity = cfg.opacity
        self._progress = 0.0
        self._running = True
        self._done = False

        if len(chars) > count:
            logger.debug(f"Sampled {count} of {len(chars)} cells for explosion")
        logger.debug(f"Explosion started with {count} particles")
        return count

    def _advance_progress(self, now: float) -> float:
        elapsed = now - self.start_time
        progress = min(1.0, max(0.0, elapsed / self.config.duration_ms))
        self._progress = max(self._progress, progress)
        return self._progress

    def opacity_at(self, progress: float) -> float:
        cfg = self.config
        if progress <= cfg.fade_start:
            return cfg.opacity
        fade = (progress - cfg.fade_start) / (1.0 - cfg.fade_start)
        return max(0.0, cfg.opacity * (1.0 - fade))

    def _step(self, now: float, delta_ms: float, progress: float) -> None:
        cfg = self.config
        dt = min(cfg.step_max, max(cfg.step_min, delta_ms / cfg.frame_ms))
        amp = cfg.wobble * (1.0 - progress)

        self.vx *= cfg.damping
        self.vy *= cfg.damping
        self.vy += cfg.gravity * dt
        self.vx += np.sin(now * 0.006 + self.seed) * amp * dt
        self.vy += np.cos(now * 0.0045 + self.seed * 1.7) * amp * dt

        self.x += self.vx * dt
        self.y += self.vy * dt

    def _rasterize(self, progress: float) -> List[str]:
        cfg = self.config
        grid = np.full((self.rows, self.cols), BLANK, dtype="<U1")
        if self.count == 0 or self.rows == 0 or self.cols == 0:
            return ["".join(row) for row in grid]

        alive = np.ones(self.count, dtype=bool)
        if progress > cfg.cull_start:
            cull = (progress - cfg.cull_start) / (1.0 - cfg.cull_start)
            alive &= self.rng.random(self.count) >= cull

        gx = np.floor(self.x + 0.5).astype(np.int64)
        gy = np.floor(self.y + 0.5).astype(np.int64)
        alive &= (gx >= 0) & (gx < self.cols) & (gy >= 0) & (gy < self.rows)

        grid[gy[alive], gx[alive]] = self.chars[alive]
        return ["".join(row) for row in grid]

    def update(self, now: float, delta_ms: float) -> List[str]:
        """Simulate one frame and return the grid to display."""
        if not self._running:
            self.opacity = 0.0
            return blank_lines(self.cols, self.rows)

        progress = self._advance_progress(now)
        if progress >= 1.0:
            self._finish()
            return blank_lines(self.cols, self.rows)

        self._step(now, delta_ms, progress)
        self.opacity = self.opacity_at(progress)
        return self._rasterize(progress)

    def _finish(self) -> None:
        self._running = False
        self._done = True
        self.opacity = 0.0
        self._clear_particles()
        logger.info("Explosion complete")
