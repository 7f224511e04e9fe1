"""Per-frame animation driver.

Owns the grid buffers and simulation state, and routes every frame either
through the torus pipeline (rasterize, smooth, mask, quantize) or through
the disintegration engine, depending on the current phase.
"""

from typing import Optional, List
import logging
import numpy as np

from asciitorus.core.events import Event, EventBus, EventType
from asciitorus.core.state import Phase, PhaseMachine, SimulationState
from asciitorus.graphics.ascii import DEFAULT_RAMP, blank_lines, join_lines, quantize
from asciitorus.graphics.buffers import GridBuffers
from asciitorus.graphics.filters import smooth
from asciitorus.graphics.mask import MaskCompositor
from asciitorus.graphics.rasterizer import TorusGeometry, TorusRasterizer, rotation_angles
from asciitorus.animation.particles import DisintegrationEngine, ExplosionConfig
from asciitorus.settings import Settings

logger = logging.getLogger(__name__)


class AnimationDriver:
    """Frame-driven ASCII torus with a one-way explosion.

    The host calls frame() once per display refresh and reads ``text`` and
    ``opacity`` afterwards. Input setters may be called between frames.
    """

    def __init__(
        self,
        cols: int,
        rows: int,
        event_bus: Optional[EventBus] = None,
        label: str = "stvn.wang",
        ramp: str = DEFAULT_RAMP,
        background: float = 242.0,
        outside_glyph: float = 250.0,
        pointer_smoothing: float = 0.045,
        max_frame_delta_ms: float = 34.0,
        geometry: Optional[TorusGeometry] = None,
        explosion: Optional[ExplosionConfig] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        if not ramp:
            raise ValueError("Character ramp must not be empty")

        self.event_bus = event_bus or EventBus()
        self.ramp = ramp
        self.background = background
        self.pointer_smoothing = pointer_smoothing
        self.max_frame_delta_ms = max_frame_delta_ms

        self.buffers = GridBuffers(cols, rows)
        self.state = SimulationState(cols=self.buffers.cols, rows=self.buffers.rows)
        self.state.scroll.reset(self.buffers.cols)
        self.phases = PhaseMachine(self.state)

        self.rasterizer = TorusRasterizer(geometry)
        self.mask = MaskCompositor(label, outside_glyph)
        self.explosion = DisintegrationEngine(explosion, rng)

        self._lines: List[str] = blank_lines(self.buffers.cols, self.buffers.rows)
        self._opacity = 1.0
        self._completion_sent = False

        logger.info(f"AnimationDriver initialized: {cols}x{rows}, label={label!r}")

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        cols: int,
        rows: int,
        event_bus: Optional[EventBus] = None,
    ) -> "AnimationDriver":
        """Build a driver from application settings."""
        render = settings.render
        boom = settings.explosion
        return cls(
            cols,
            rows,
            event_bus=event_bus,
            label=render.label,
            ramp=render.ramp,
            background=render.background,
            outside_glyph=render.outside_glyph,
            pointer_smoothing=render.pointer_smoothing,
            max_frame_delta_ms=render.max_frame_delta_ms,
            explosion=ExplosionConfig(
                duration_ms=boom.duration_ms,
                max_particles=boom.max_particles,
            ),
            rng=np.random.default_rng(boom.seed),
        )

    # Outputs
    @property
    def phase(self) -> Phase:
        return self.state.phase

    @property
    def lines(self) -> List[str]:
        return list(self._lines)

    @property
    def text(self) -> str:
        return join_lines(self._lines)

    @property
    def opacity(self) -> float:
        return self._opacity

    @property
    def is_done(self) -> bool:
        return self.explosion.is_done

    # Inputs
    def resize(self, cols: int, rows: int) -> None:
        """Reallocate every grid buffer and forget the mask offset."""
        self.buffers.resize(cols, rows)
        self.state.cols = self.buffers.cols
        self.state.rows = self.buffers.rows
        self.state.scroll.reset(self.buffers.cols)
        if not self.state.is_exploding:
            self._lines = blank_lines(self.buffers.cols, self.buffers.rows)

        logger.info(f"Grid resized to {cols}x{rows}")
        self.event_bus.emit(Event(
            EventType.RESIZED,
            data={"cols": self.buffers.cols, "rows": self.buffers.rows},
            source="driver",
        ))

    def set_pointer(self, x: float, y: float) -> None:
        """Set the raw pointer, normalized to [0, 1]. Frozen once exploding."""
        if self.state.is_exploding:
            return
        self.state.pointer.x = x
        self.state.pointer.y = y

    def add_scroll_impulse(self, amount: float) -> None:
        """Push the mask scroll; positive amounts move the label left."""
        if self.state.is_exploding:
            return
        self.state.scroll.velocity -= amount

    def activate(self, now: float) -> bool:
        """Start the explosion from the last rendered grid.

        Returns False (and does nothing) if already exploding.
        """
        if not self.phases.transition(Phase.EXPLODING):
            return False

        count = self.explosion.start(self._lines, now)
        self._completion_sent = False

        self.event_bus.emit(Event(
            EventType.ACTIVATED,
            data={"time": now, "particles": count},
            source="driver",
        ))
        return True

    # Frame
    def _frame_delta(self, now: float) -> float:
        last = self.state.last_frame_time
        self.state.last_frame_time = now
        if last is None:
            return 0.0
        return min(self.max_frame_delta_ms, max(0.0, now - last))

    def render_surface(self, now: float, delta_ms: float) -> List[str]:
        """Run the torus pipeline once and return the quantized grid."""
        buffers = self.buffers
        pointer = self.state.pointer

        buffers.clear(self.background)
        pointer.smooth(self.pointer_smoothing)
        rot_x, rot_y = rotation_angles(
            now, pointer.smooth_x, pointer.smooth_y, self.rasterizer.geometry
        )
        self.rasterizer.render(buffers, rot_x, rot_y)
        smooth(buffers)
        self.mask.apply(buffers, self.state.scroll, delta_ms)
        return quantize(buffers.brightness, buffers.cols, buffers.rows, self.ramp)

    def frame(self, now: float) -> str:
        """Advance one frame at timestamp ``now`` (ms) and return the text."""
        delta_ms = self._frame_delta(now)

        if self.state.phase == Phase.EXPLODING:
            self._lines = self.explosion.update(now, delta_ms)
            self._opacity = self.explosion.opacity
            if self.explosion.is_done and not self._completion_sent:
                self._completion_sent = True
                self.event_bus.emit(Event(
                    EventType.EXPLOSION_COMPLETE,
                    data={"time": now},
                    source="driver",
                ))
        else:
            self._opacity = 1.0
            self._lines = self.render_surface(now, delta_ms)

        return self.text
