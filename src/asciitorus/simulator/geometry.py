"""Viewport to character grid policy."""

from dataclasses import dataclass
import math

MIN_COLS = 42
MIN_ROWS = 22


@dataclass(frozen=True)
class GridGeometry:
    """Grid size plus the pixel cell each character occupies."""
    cols: int
    rows: int
    cell_width: float
    cell_height: float

    @property
    def font_size(self) -> int:
        return max(8, round(self.cell_width / 0.62))


def char_width_for(width: int) -> float:
    """Nominal glyph width in pixels for a viewport ``width`` wide."""
    char_width = 7.0
    if width > 900:
        char_width = 8.0
    if width > 1200:
        char_width = 8.8
    if width < 768:
        char_width = 7.8
    return char_width


def grid_geometry(width: int, height: int) -> GridGeometry:
    """Pick cols/rows for a viewport; never smaller than 42x22."""
    char_width = char_width_for(width)
    line_factor = 2.0 if width < 500 else 2.05

    cols = max(MIN_COLS, math.floor(width / char_width))
    rows = max(MIN_ROWS, math.floor((height - char_width * 2) / (char_width * line_factor)))

    return GridGeometry(
        cols=cols,
        rows=rows,
        cell_width=width / cols,
        cell_height=height / rows,
    )
