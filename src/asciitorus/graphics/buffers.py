"""Grid-sized numeric buffers shared by the rendering stages."""

import logging
import numpy as np
from numpy.typing import NDArray

logger = logging.getLogger(__name__)


class GridBuffers:
    """Four parallel flat buffers, one slot per grid cell.

    Cells are indexed ``row * cols + col``. All four buffers always have
    the same length; resize() replaces them together.
    """

    def __init__(self, cols: int, rows: int):
        self.cols = 0
        self.rows = 0
        self.brightness: NDArray[np.float32] = np.zeros(0, dtype=np.float32)
        self.depth: NDArray[np.float32] = np.zeros(0, dtype=np.float32)
        self.scratch: NDArray[np.float32] = np.zeros(0, dtype=np.float32)
        self.mask_alpha: NDArray[np.uint8] = np.zeros(0, dtype=np.uint8)
        self.resize(cols, rows)

    @property
    def size(self) -> int:
        return self.cols * self.rows

    def resize(self, cols: int, rows: int) -> None:
        """Discard and reallocate every buffer for a new grid."""
        if cols < 1 or rows < 1:
            raise ValueError(f"Grid must be at least 1x1, got {cols}x{rows}")

        self.cols = int(cols)
        self.rows = int(rows)
        size = self.cols * self.rows
        self.brightness = np.zeros(size, dtype=np.float32)
        self.depth = np.zeros(size, dtype=np.float32)
        self.scratch = np.zeros(size, dtype=np.float32)
        self.mask_alpha = np.zeros(size, dtype=np.uint8)
        logger.debug(f"Buffers allocated for {self.cols}x{self.rows} grid")

    def clear(self, background: float = 242.0) -> None:
        """Reset brightness and scratch to background, depth to +inf."""
        self.brightness.fill(background)
        self.scratch.fill(background)
        self.depth.fill(np.inf)

    def as_grid(self, buffer: NDArray) -> NDArray:
        """2D (rows, cols) view of one of the flat buffers."""
        return buffer.reshape(self.rows, self.cols)
