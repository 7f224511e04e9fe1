"""Graphics module for the ASCII torus rendering pipeline."""

from asciitorus.graphics.buffers import GridBuffers
from asciitorus.graphics.rasterizer import TorusGeometry, TorusRasterizer, rotation_angles
from asciitorus.graphics.filters import smooth
from asciitorus.graphics.mask import MaskCompositor, advance_scroll, wrap_offset
from asciitorus.graphics.ascii import DEFAULT_RAMP, quantize, blank_lines, join_lines

__all__ = [
    # Buffers
    "GridBuffers",
    # Torus
    "TorusGeometry",
    "TorusRasterizer",
    "rotation_angles",
    # Filters
    "smooth",
    # Mask
    "MaskCompositor",
    "advance_scroll",
    "wrap_offset",
    # Quantizer
    "DEFAULT_RAMP",
    "quantize",
    "blank_lines",
    "join_lines",
]
