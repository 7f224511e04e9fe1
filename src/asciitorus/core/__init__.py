"""Core framework components for the ASCII torus."""

from .state import Phase, PhaseMachine, PointerState, MaskScrollState, SimulationState
from .events import EventBus, Event, EventType

__all__ = [
    "Phase",
    "PhaseMachine",
    "PointerState",
    "MaskScrollState",
    "SimulationState",
    "EventBus",
    "Event",
    "EventType",
]
