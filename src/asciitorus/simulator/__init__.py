"""Host layer: grid geometry policy, headless capture and the pygame window.

The window module imports pygame; import it directly when needed.
"""

from asciitorus.simulator.geometry import GridGeometry, grid_geometry
from asciitorus.simulator.headless import run_frames, print_frames

__all__ = [
    "GridGeometry",
    "grid_geometry",
    "run_frames",
    "print_frames",
]
