"""Scrolling text mask.

The label is drawn with Pillow onto an 8-bit image that has exactly one
pixel per grid cell. Its coverage becomes the alpha that gates which
cells of the torus stay visible.
"""

from typing import Tuple
import logging
import numpy as np
from PIL import Image, ImageDraw

from asciitorus.core.state import MaskScrollState
from asciitorus.graphics.buffers import GridBuffers
from asciitorus.graphics.fonts import load_bold_font

logger = logging.getLogger(__name__)

# Stroke fattening: the label is stamped at these horizontal offsets
FAT_OFFSETS = (-0.5, 0.0, 0.5)

SCROLL_MARGIN = 6.0
VELOCITY_DECAY = 0.95


def font_size_for(rows: int) -> int:
    return max(12, int(rows * 0.95))


def wrap_width(cols: int, text_width: float) -> float:
    """Distance after which the scrolling label repeats."""
    return cols + text_width + 2 * SCROLL_MARGIN


def wrap_offset(offset: float, cols: int, text_width: float) -> float:
    """Fold offset back into [-text_width - 6, cols + 6]."""
    low = -text_width - SCROLL_MARGIN
    high = cols + SCROLL_MARGIN
    span = wrap_width(cols, text_width)

    if offset < low:
        offset = low + (offset - low) % span
    elif offset > high:
        offset = high - (high - offset) % span
    return offset


def advance_scroll(
    scroll: MaskScrollState,
    cols: int,
    text_width: float,
    delta_ms: float,
) -> float:
    """Step the scroll state by one frame and return the new offset.

    An unset offset starts with the label centred on the grid.
    """
    if scroll.offset is None:
        scroll.offset = (cols - text_width) * 0.5

    offset = scroll.offset
    offset -= scroll.auto_scroll * delta_ms
    offset += scroll.velocity * delta_ms
    scroll.velocity *= VELOCITY_DECAY

    scroll.offset = wrap_offset(offset, cols, text_width)
    return scroll.offset


class MaskCompositor:
    """Renders the label mask and applies it to brightness."""

    def __init__(
        self,
        label: str = "stvn.wang",
        outside_brightness: float = 250.0,
    ):
        self.label = label
        self.outside_brightness = outside_brightness
        self._font = None
        self._font_size = 0
        self._text_width = 0.0

    def _ensure_font(self, rows: int) -> None:
        size = font_size_for(rows)
        if size == self._font_size and self._font is not None:
            return
        self._font = load_bold_font(size)
        self._font_size = size
        self._text_width = float(self._font.getlength(self.label))
        logger.debug(f"Mask label {self.label!r} measures {self._text_width:.1f} cols at {size}px")

    def text_width(self, rows: int) -> float:
        """Measured label width in grid columns for a grid of ``rows``."""
        self._ensure_font(rows)
        return self._text_width

    def _draw_fat_text(self, draw: ImageDraw.ImageDraw, x: float, y: float) -> None:
        for dx in FAT_OFFSETS:
            draw.text((x + dx, y), self.label, fill=255, font=self._font, anchor="lm")

    def render_alpha(self, cols: int, rows: int, offset: float) -> np.ndarray:
        """Draw the label copies at ``offset`` and return (rows, cols) alpha."""
        self._ensure_font(rows)
        image = Image.new("L", (cols, rows), 0)
        draw = ImageDraw.Draw(image)

        y = rows * 0.52
        span = wrap_width(cols, self._text_width)
        for x in (offset, offset - span, offset + span):
            self._draw_fat_text(draw, x, y)

        return np.asarray(image, dtype=np.uint8)

    def apply(
        self,
        buffers: GridBuffers,
        scroll: MaskScrollState,
        delta_ms: float,
    ) -> None:
        """Advance the scroll, rebuild mask_alpha and gate brightness."""
        cols, rows = buffers.cols, buffers.rows
        offset = advance_scroll(scroll, cols, self.text_width(rows), delta_ms)

        alpha = self.render_alpha(cols, rows, offset)
        buffers.mask_alpha[:] = alpha.ravel()

        coverage = buffers.mask_alpha.astype(np.float32) / 255.0
        buffers.brightness[:] = np.where(
            buffers.mask_alpha == 0,
            self.outside_brightness,
            buffers.brightness * coverage,
        )

    def mask_bounds(self, cols: int, rows: int) -> Tuple[float, float]:
        """Range the scroll offset is kept in."""
        width = self.text_width(rows)
        return -width - SCROLL_MARGIN, cols + SCROLL_MARGIN
