from __future__ import annotations

import numpy as np
import pytest

from asciitorus.graphics.ascii import (
    DEFAULT_RAMP,
    blank_lines,
    join_lines,
    quantize,
    ramp_indices,
)


def _one(value: float, ramp: str = DEFAULT_RAMP) -> str:
    return quantize(np.array([value], dtype=np.float32), 1, 1, ramp)[0]


def test_ramp_runs_dense_to_blank():
    assert DEFAULT_RAMP[0] == "N"
    assert DEFAULT_RAMP[-1] == " "


def test_extremes_map_to_ramp_ends():
    assert _one(0.0) == DEFAULT_RAMP[0]
    assert _one(255.0) == DEFAULT_RAMP[-1]


def test_out_of_range_values_are_clamped():
    assert _one(-40.0) == DEFAULT_RAMP[0]
    assert _one(900.0) == DEFAULT_RAMP[-1]


def test_background_levels():
    # 242 is the clear value, 250 the outside-glyph value
    assert _one(242.0) == DEFAULT_RAMP[25]
    assert _one(250.0) == " "


def test_index_uses_ceiling():
    assert ramp_indices(np.array([127.5]), 3)[0] == 1
    assert ramp_indices(np.array([127.6]), 3)[0] == 2
    assert ramp_indices(np.array([0.001]), 3)[0] == 1


def test_mapping_is_monotonic():
    values = np.linspace(-10.0, 270.0, 2000)
    indices = ramp_indices(values, len(DEFAULT_RAMP))
    assert np.all(np.diff(indices) >= 0)
    assert indices[0] == 0
    assert indices[-1] == len(DEFAULT_RAMP) - 1


def test_quantize_shapes_rows():
    brightness = np.tile(np.array([0.0, 255.0, 128.0], dtype=np.float32), 4)
    lines = quantize(brightness, 3, 4)
    assert len(lines) == 4
    assert all(len(line) == 3 for line in lines)
    assert lines[0][0] == "N" and lines[0][1] == " "


def test_quantize_is_reproducible(rng):
    brightness = rng.uniform(-20, 280, 50 * 24).astype(np.float32)
    first = join_lines(quantize(brightness, 50, 24))
    second = join_lines(quantize(brightness.copy(), 50, 24))
    assert first == second


def test_custom_ramp():
    assert _one(0.0, "#. ") == "#"
    assert _one(127.0, "#. ") == "."
    assert _one(255.0, "#. ") == " "


def test_empty_ramp_is_rejected():
    with pytest.raises(ValueError):
        quantize(np.zeros(1), 1, 1, "")


def test_blank_lines_join():
    assert join_lines(blank_lines(3, 2)) == "   \n   "
