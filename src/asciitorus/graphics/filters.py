"""Spatial filters over grid buffers."""

from asciitorus.graphics.buffers import GridBuffers


def smooth(buffers: GridBuffers) -> None:
    """5-tap blur: (5*center + N + S + E + W) / 9 on interior cells.

    Reads brightness, writes scratch, then copies scratch back over
    brightness. The outer ring of scratch is never written, so after the
    copy it carries whatever the clear pass left there.
    """
    rows, cols = buffers.rows, buffers.cols
    if rows < 3 or cols < 3:
        buffers.brightness[:] = buffers.scratch
        return

    src = buffers.as_grid(buffers.brightness)
    dst = buffers.as_grid(buffers.scratch)

    dst[1:-1, 1:-1] = (
        src[1:-1, 1:-1] * 5
        + src[1:-1, :-2]
        + src[1:-1, 2:]
        + src[:-2, 1:-1]
        + src[2:, 1:-1]
    ) / 9

    buffers.brightness[:] = buffers.scratch
