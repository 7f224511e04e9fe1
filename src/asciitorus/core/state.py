"""
Per-frame simulation state for the ASCII torus.

States:
    RENDERING: Torus is rasterized, masked and quantized every frame
    EXPLODING: The last rendered grid is breaking apart into particles

The only transition is RENDERING -> EXPLODING, triggered once by activation.
"""

from enum import Enum, auto
from dataclasses import dataclass, field
from typing import Optional
import logging

logger = logging.getLogger(__name__)


class Phase(Enum):
    """Animation phases."""
    RENDERING = auto()
    EXPLODING = auto()


@dataclass
class PointerState:
    """Raw and smoothed pointer position, both normalized to [0, 1]."""
    x: float = 0.5
    y: float = 0.5
    smooth_x: float = 0.5
    smooth_y: float = 0.5

    def smooth(self, factor: float) -> None:
        """Move the smoothed position one step toward the raw one."""
        self.smooth_x += (self.x - self.smooth_x) * factor
        self.smooth_y += (self.y - self.smooth_y) * factor


@dataclass
class MaskScrollState:
    """Horizontal scroll of the text mask, in grid columns.

    offset is None until the compositor first measures the label.
    """
    offset: Optional[float] = None
    velocity: float = 0.0
    auto_scroll: float = 0.015

    def reset(self, cols: int) -> None:
        """Forget the offset and rescale the drift rate for a new grid."""
        self.offset = None
        self.auto_scroll = max(0.015, cols * 0.00004)


@dataclass
class SimulationState:
    """Everything the frame stages read or carry between frames."""
    cols: int
    rows: int
    phase: Phase = Phase.RENDERING
    pointer: PointerState = field(default_factory=PointerState)
    scroll: MaskScrollState = field(default_factory=MaskScrollState)
    last_frame_time: Optional[float] = None

    @property
    def is_exploding(self) -> bool:
        return self.phase == Phase.EXPLODING


class PhaseMachine:
    """
    Guards phase changes on a SimulationState.

    Only RENDERING -> EXPLODING is allowed; any other request is
    rejected and logged.
    """

    VALID_TRANSITIONS: list[tuple[Phase, Phase]] = [
        (Phase.RENDERING, Phase.EXPLODING),
    ]

    def __init__(self, state: SimulationState) -> None:
        self._state = state
        self._valid_transitions = set(self.VALID_TRANSITIONS)

    @property
    def phase(self) -> Phase:
        """Get current phase."""
        return self._state.phase

    def can_transition(self, to_phase: Phase) -> bool:
        """Check if transition to given phase is valid."""
        return (self._state.phase, to_phase) in self._valid_transitions

    def transition(self, to_phase: Phase) -> bool:
        """
        Attempt to transition to a new phase.

        Returns:
            True if transition successful, False otherwise
        """
        if not self.can_transition(to_phase):
            logger.debug(
                f"Ignored transition: {self._state.phase.name} -> {to_phase.name}"
            )
            return False

        old_phase = self._state.phase
        self._state.phase = to_phase
        logger.info(f"Phase transition: {old_phase.name} -> {to_phase.name}")
        return True
