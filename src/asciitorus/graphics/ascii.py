"""Brightness to character quantization."""

from typing import List
import numpy as np
from numpy.typing import NDArray

# Dense glyphs first, space last
DEFAULT_RAMP = "NNN@O$0A869#452I3=7+1/:-.` "

BLANK = " "


def ramp_indices(brightness: NDArray, ramp_length: int) -> NDArray[np.int64]:
    """ceil(clamp(v, 0, 255) / 255 * (ramp_length - 1)) for every value."""
    values = np.clip(brightness.astype(np.float64), 0.0, 255.0)
    return np.ceil(values / 255.0 * (ramp_length - 1)).astype(np.int64)


def quantize(
    brightness: NDArray,
    cols: int,
    rows: int,
    ramp: str = DEFAULT_RAMP,
) -> List[str]:
    """Map a flat brightness buffer to ``rows`` strings of ``cols`` characters."""
    if not ramp:
        raise ValueError("Character ramp must not be empty")

    chars = np.array(list(ramp))
    grid = chars[ramp_indices(brightness, len(ramp))].reshape(rows, cols)
    return ["".join(row) for row in grid]


def blank_lines(cols: int, rows: int) -> List[str]:
    return [BLANK * cols for _ in range(rows)]


def join_lines(lines: List[str]) -> str:
    return "\n".join(lines)
