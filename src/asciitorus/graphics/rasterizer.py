"""Torus rasterizer.

Samples a rotating torus, projects every sample into the character grid
and keeps the nearest sample per cell. Everything is vectorized with numpy:
the unrotated sample grid is built once per grid size, each frame only
rotates, projects and resolves depth.
"""

from dataclasses import dataclass
from typing import Optional, Tuple
import logging
import math
import numpy as np
from numpy.typing import NDArray

from asciitorus.graphics.buffers import GridBuffers

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TorusGeometry:
    """Fixed torus and camera constants."""

    major_radius: float = 1.0
    minor_radius: float = 0.45
    camera_z: float = 2.0
    zoom: float = 8.0  # projection scale per min(cols, rows)
    aspect_y: float = 1.03
    near_clip: float = 0.001

    # Auto-rotation (rad/ms) and pointer tilt (rad per unit offset)
    spin_x: float = 0.00038
    spin_y: float = 0.00031
    tilt_x: float = 1.7
    tilt_y: float = 2.3

    # Lighting: normal z in [-1, 1] maps onto [light_min, light_min + light_range]
    light_min: float = 26.0
    light_range: float = 180.0


def sample_counts(cols: int, rows: int) -> Tuple[int, int]:
    """Angular resolution (u around the ring, v around the tube)."""
    return max(110, int(cols * 0.9)), max(48, int(rows * 0.9))


def rotation_angles(
    time_ms: float,
    pointer_x: float,
    pointer_y: float,
    geometry: TorusGeometry = TorusGeometry(),
) -> Tuple[float, float]:
    """Return (rot_x, rot_y): slow spin plus pointer tilt."""
    rot_x = time_ms * geometry.spin_x + (pointer_y - 0.5) * geometry.tilt_x
    rot_y = time_ms * geometry.spin_y + (pointer_x - 0.5) * geometry.tilt_y
    return rot_x, rot_y


class TorusRasterizer:
    """Writes nearest-surface brightness and depth into GridBuffers."""

    def __init__(self, geometry: Optional[TorusGeometry] = None):
        self.geometry = geometry or TorusGeometry()
        self._samples_for: Optional[Tuple[int, int]] = None
        self._points: NDArray[np.float64] = np.zeros((3, 0))
        self._normals: NDArray[np.float64] = np.zeros((3, 0))

    def _build_samples(self, cols: int, rows: int) -> None:
        """Precompute unrotated positions and normals in u-major order."""
        u_steps, v_steps = sample_counts(cols, rows)
        g = self.geometry

        theta = np.arange(u_steps) / u_steps * math.tau
        phi = np.arange(v_steps) / v_steps * math.tau
        theta, phi = np.meshgrid(theta, phi, indexing="ij")

        c_theta, s_theta = np.cos(theta).ravel(), np.sin(theta).ravel()
        c_phi, s_phi = np.cos(phi).ravel(), np.sin(phi).ravel()

        ring = g.major_radius + g.minor_radius * c_phi
        self._points = np.stack([ring * c_theta, ring * s_theta, g.minor_radius * s_phi])
        self._normals = np.stack([c_phi * c_theta, c_phi * s_theta, s_phi])
        self._samples_for = (cols, rows)
        logger.debug(f"Torus sampled at {u_steps}x{v_steps} for {cols}x{rows} grid")

    @staticmethod
    def _rotate(vectors: NDArray, rot_x: float, rot_y: float) -> NDArray:
        """Rotate about Y, then about X."""
        x, y, z = vectors
        cos_y, sin_y = math.cos(rot_y), math.sin(rot_y)
        cos_x, sin_x = math.cos(rot_x), math.sin(rot_x)

        x, z = x * cos_y + z * sin_y, -x * sin_y + z * cos_y
        y, z = y * cos_x - z * sin_x, y * sin_x + z * cos_x
        return np.stack([x, y, z])

    def render(
        self,
        buffers: GridBuffers,
        rot_x: float,
        rot_y: float,
    ) -> None:
        """Rasterize one frame. Buffers must already be cleared."""
        cols, rows = buffers.cols, buffers.rows
        if self._samples_for != (cols, rows):
            self._build_samples(cols, rows)

        g = self.geometry
        x, y, z = self._rotate(self._points, rot_x, rot_y)
        nz = self._rotate(self._normals, rot_x, rot_y)[2]

        depth = z + g.camera_z
        visible = depth > g.near_clip
        if not visible.any():
            return

        x, y, depth, nz = x[visible], y[visible], depth[visible], nz[visible]

        scale = min(cols, rows) * g.zoom
        inv_depth = 1.0 / depth
        sx = np.floor(cols * 0.5 + x * inv_depth * scale).astype(np.int64)
        sy = np.floor(rows * 0.5 + y * inv_depth * scale * g.aspect_y).astype(np.int64)

        inside = (sx >= 1) & (sy >= 1) & (sx < cols - 1) & (sy < rows - 1)
        if not inside.any():
            return

        idx = sy[inside] * cols + sx[inside]
        depth = depth[inside]
        light = (nz[inside] * 0.5 + 0.5) * g.light_range + g.light_min

        # Nearest wins; lexsort is stable so equal depths keep sample order
        order = np.lexsort((depth, idx))
        sorted_idx = idx[order]
        first = np.ones(len(order), dtype=bool)
        first[1:] = sorted_idx[1:] != sorted_idx[:-1]
        winners = order[first]

        cells = idx[winners]
        closer = depth[winners] < buffers.depth[cells]
        cells = cells[closer]
        winners = winners[closer]
        buffers.depth[cells] = depth[winners]
        buffers.brightness[cells] = light[winners]
