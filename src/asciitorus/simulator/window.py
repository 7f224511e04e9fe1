"""
Desktop host window using pygame.

Turns mouse, wheel and keyboard input into driver calls, picks the grid
size from the window size, and draws the driver's character grid.

Controls:
    Mouse move: tilt the torus
    Wheel / horizontal drag: push the text mask
    Click, SPACE or RETURN: explode
    ESC or Q: quit
"""

import asyncio
import logging
from typing import Optional

import pygame

from asciitorus.animation.engine import AnimationDriver
from asciitorus.core.events import Event, EventBus, EventType
from asciitorus.settings import Settings, get_settings
from asciitorus.simulator.geometry import GridGeometry, grid_geometry

logger = logging.getLogger(__name__)

# Input gains, in mask columns per ms
WHEEL_GAIN = 0.018
DRAG_GAIN = 0.0009
DRAG_THRESHOLD_PX = 2

MONO_FONTS = "dejavusansmono,menlo,consolas,couriernew,monospace"


class TorusWindow:
    """Pygame window hosting one AnimationDriver."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        event_bus: Optional[EventBus] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.config = self.settings.window
        self.event_bus = event_bus or EventBus()

        self.geometry: GridGeometry = grid_geometry(self.config.width, self.config.height)
        self.driver = AnimationDriver.from_settings(
            self.settings, self.geometry.cols, self.geometry.rows, self.event_bus
        )

        self._screen: Optional[pygame.Surface] = None
        self._clock: Optional[pygame.time.Clock] = None
        self._font: Optional[pygame.font.Font] = None
        self._title_font: Optional[pygame.font.Font] = None
        self._running = False

        # Drag tracking
        self._drag_last_x: Optional[int] = None
        self._dragged = False

        # View handoff
        self._handoff_at: Optional[float] = None
        self._show_content = False

        self.event_bus.subscribe(EventType.ACTIVATED, self._on_activated)
        self.event_bus.subscribe(EventType.EXPLOSION_COMPLETE, self._on_complete)

        logger.info("TorusWindow created")

    def _init_pygame(self) -> None:
        """Initialize pygame and create window."""
        pygame.init()
        pygame.display.set_caption(self.config.title)

        flags = pygame.RESIZABLE
        if self.config.fullscreen:
            flags |= pygame.FULLSCREEN

        self._screen = pygame.display.set_mode((self.config.width, self.config.height), flags)
        self._clock = pygame.time.Clock()
        pygame.font.init()
        self._load_fonts()

        logger.info(f"Pygame initialized: {self.config.width}x{self.config.height}")

    def _load_fonts(self) -> None:
        self._font = pygame.font.SysFont(MONO_FONTS, self.geometry.font_size)
        self._title_font = pygame.font.SysFont(MONO_FONTS, max(24, self.geometry.font_size * 4), bold=True)

    def _apply_resize(self, width: int, height: int) -> None:
        geometry = grid_geometry(width, height)
        if geometry == self.geometry:
            return
        self.geometry = geometry
        self.driver.resize(geometry.cols, geometry.rows)
        self._load_fonts()

    # Events
    def _on_activated(self, event: Event) -> None:
        if self._handoff_at is not None:
            return
        self._handoff_at = event.data["time"] + self.settings.explosion.handoff_delay_ms
        logger.info(f"Explosion started with {event.data['particles']} particles")

    def _on_complete(self, event: Event) -> None:
        logger.info("Explosion finished")

    def _handle_events(self) -> None:
        """Process pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._running = False

            elif event.type == pygame.KEYDOWN:
                if event.key in (pygame.K_ESCAPE, pygame.K_q):
                    self._running = False
                elif event.key in (pygame.K_SPACE, pygame.K_RETURN):
                    self.driver.activate(pygame.time.get_ticks())

            elif event.type == pygame.VIDEORESIZE:
                self._apply_resize(event.w, event.h)

            elif event.type == pygame.MOUSEMOTION:
                self._handle_motion(event)

            elif event.type == pygame.MOUSEWHEEL:
                self.driver.add_scroll_impulse(event.y * WHEEL_GAIN)

            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                self._drag_last_x = event.pos[0]
                self._dragged = False

            elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
                if not self._dragged:
                    self.driver.activate(pygame.time.get_ticks())
                self._drag_last_x = None

    def _handle_motion(self, event: pygame.event.Event) -> None:
        width, height = self._screen.get_size()
        self.driver.set_pointer(event.pos[0] / width, event.pos[1] / height)

        if self._drag_last_x is None:
            return
        delta_x = event.pos[0] - self._drag_last_x
        if abs(delta_x) > DRAG_THRESHOLD_PX:
            self.driver.add_scroll_impulse(delta_x * DRAG_GAIN)
            self._dragged = True
        self._drag_last_x = event.pos[0]

    # Rendering
    def _render(self) -> None:
        self._screen.fill(self.config.bg_color)
        if self._show_content:
            self._render_content()
        else:
            self._render_grid()
        pygame.display.flip()

    def _render_grid(self) -> None:
        width = self._screen.get_width()
        cell_h = self.geometry.cell_height
        layer = pygame.Surface(self._screen.get_size(), pygame.SRCALPHA)

        for row, line in enumerate(self.driver.lines):
            surface = self._font.render(line, True, self.config.fg_color)
            if surface.get_width() != width:
                surface = pygame.transform.smoothscale(surface, (width, surface.get_height()))
            layer.blit(surface, (0, round(row * cell_h)))

        layer.set_alpha(round(self.driver.opacity * 255))
        self._screen.blit(layer, (0, 0))

    def _render_content(self) -> None:
        label = self._title_font.render(self.settings.render.label, True, self.config.fg_color)
        self._screen.blit(label, label.get_rect(center=self._screen.get_rect().center))

    async def run(self) -> None:
        """Main window loop."""
        self._init_pygame()
        self._running = True
        logger.info("Window started")

        while self._running:
            self._handle_events()

            now = pygame.time.get_ticks()
            if not self.driver.is_done:
                self.driver.frame(now)

            if self._handoff_at is not None and not self._show_content and now >= self._handoff_at:
                self._show_content = True
                self.event_bus.emit(Event(EventType.HANDOFF, data={"time": now}, source="window"))
                logger.info("Handed off to content view")

            self._render()
            self._clock.tick(self.config.fps)

            # Yield to other tasks
            await asyncio.sleep(0)

        self._cleanup()

    def _cleanup(self) -> None:
        pygame.quit()
        logger.info("Window stopped")

    def stop(self) -> None:
        self._running = False
