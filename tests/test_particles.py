from __future__ import annotations

import numpy as np
import pytest

from asciitorus.animation.particles import (
    DisintegrationEngine,
    ExplosionConfig,
    stride_sample,
    visible_cells,
)


def _grid_with(cells: dict[tuple[int, int], str], cols: int = 30, rows: int = 12) -> list[str]:
    lines = [[" "] * cols for _ in range(rows)]
    for (col, row), char in cells.items():
        lines[row][col] = char
    return ["".join(line) for line in lines]


def _blank(lines: list[str]) -> bool:
    return all(not line.strip() for line in lines)


def _run(engine: DisintegrationEngine, start: float, frames: int, frame_ms: float = 16.0):
    outputs = []
    for i in range(1, frames + 1):
        now = start + i * frame_ms
        outputs.append((now, engine.update(now, frame_ms), engine.progress, engine.opacity))
    return outputs


def test_visible_cells_skip_blanks():
    xs, ys, chars = visible_cells(["a b", "  c"])
    assert list(zip(xs, ys, chars)) == [(0, 0, "a"), (2, 0, "b"), (2, 1, "c")]


def test_ten_characters_give_ten_particles_at_their_cells(rng):
    cells = {(i * 2, i % 12): "#" for i in range(10)}
    engine = DisintegrationEngine(rng=rng)

    count = engine.start(_grid_with(cells), now=0.0)

    assert count == 10
    positions = {(p.x, p.y) for p in engine.particles}
    assert positions == {(float(c), float(r)) for c, r in cells}
    assert all(p.char == "#" for p in engine.particles)
    assert all(0.0 <= p.seed < 2 * np.pi for p in engine.particles)


def test_stride_sample_keeps_everything_under_cap():
    assert np.array_equal(stride_sample(5, 10), np.arange(5))


def test_stride_sample_spreads_over_whole_list():
    picked = stride_sample(2300, 2200)
    assert len(picked) == 2200
    assert len(np.unique(picked)) == 2200
    assert picked[0] == 0
    assert picked[-1] == 2298
    assert not np.array_equal(picked, np.arange(2200))


def test_overfull_grid_is_capped_by_stride(rng):
    lines = ["X" * 50 for _ in range(46)]  # 2300 cells
    engine = DisintegrationEngine(rng=rng)

    assert engine.start(lines, now=0.0) == 2200
    ys = {p.y for p in engine.particles}
    # A prefix of 2200 would never reach the last row
    assert 45.0 in ys


def test_particle_count_never_exceeds_cap(rng):
    config = ExplosionConfig(max_particles=300)
    engine = DisintegrationEngine(config, rng=rng)
    lines = ["".join(rng.choice(["@", " "], 80)) for _ in range(40)]
    assert engine.start(lines, now=0.0) <= 300


def test_velocity_points_away_from_center(rng):
    lines = _grid_with({(29, 6): "R", (0, 6): "L", (15, 0): "U", (15, 11): "D"})
    engine = DisintegrationEngine(rng=rng)
    engine.start(lines, now=0.0)

    by_char = {p.char: p for p in engine.particles}
    assert by_char["R"].vx > 0
    assert by_char["L"].vx < 0
    assert by_char["U"].vy < 0
    assert by_char["D"].vy > 0


def test_particle_on_center_uses_floored_distance(rng):
    lines = _grid_with({(15, 6): "o"})
    engine = DisintegrationEngine(rng=rng)
    engine.start(lines, now=0.0)
    p = engine.particles[0]
    assert np.isfinite(p.vx) and np.isfinite(p.vy)
    assert abs(p.vx) <= 0.12 and abs(p.vy) <= 0.12


def test_explosion_finishes_blank_and_stays_blank(rng):
    lines = _grid_with({(c, r): "@" for c in range(5, 25) for r in range(3, 9)})
    engine = DisintegrationEngine(rng=rng)
    engine.start(lines, now=1000.0)

    outputs = _run(engine, 1000.0, 100)

    progresses = [progress for _, _, progress, _ in outputs]
    assert all(b >= a for a, b in zip(progresses, progresses[1:]))
    assert progresses[-1] == 1.0

    for now, frame, progress, opacity in outputs:
        assert len(frame) == 12 and all(len(line) == 30 for line in frame)
        if now >= 1000.0 + 1450.0:
            assert _blank(frame)
            assert opacity == 0.0

    assert engine.is_done
    assert engine.count == 0
    assert _blank(engine.update(5000.0, 16.0))
    assert engine.count == 0


def test_early_frames_keep_every_particle_visible(rng):
    lines = _grid_with({(10, 6): "a", (20, 6): "b"})
    engine = DisintegrationEngine(rng=rng)
    engine.start(lines, now=0.0)

    frame = engine.update(16.0, 16.0)
    text = "".join(frame)
    assert "a" in text and "b" in text


def test_opacity_holds_then_fades():
    engine = DisintegrationEngine()
    assert engine.opacity_at(0.1) == pytest.approx(0.96)
    assert engine.opacity_at(0.72) == pytest.approx(0.96)
    assert engine.opacity_at(0.86) == pytest.approx(0.48)
    assert engine.opacity_at(1.0) == pytest.approx(0.0)


def test_late_frames_cull_some_particles():
    lines = ["#" * 40 for _ in range(20)]
    engine = DisintegrationEngine(rng=np.random.default_rng(7))
    engine.start(lines, now=0.0)

    # Jump near the end in one hitch-clamped step
    frame = engine.update(1400.0, 34.0)
    shown = sum(ch == "#" for line in frame for ch in line)
    assert 0 <= shown < 800 * 0.5

    # Culling only hides particles for the frame, the swarm is kept
    assert engine.count == 800
    engine.update(1410.0, 10.0)
    assert engine.count == 800


def _single_particle(rng) -> tuple[DisintegrationEngine, dict[str, float]]:
    engine = DisintegrationEngine(rng=rng)
    engine.start(_grid_with({(25, 9): "*"}), now=0.0)
    p = engine.particles[0]
    return engine, {"x": p.x, "y": p.y, "vx": p.vx, "vy": p.vy, "seed": p.seed}


def test_hitch_step_is_clamped_to_max_dt(rng):
    engine, before = _single_particle(rng)

    engine._step(now=0.0, delta_ms=1000.0, progress=0.0)

    dt = 2.2
    amp = 0.006
    vx = before["vx"] * 0.992 + np.sin(before["seed"]) * amp * dt
    vy = before["vy"] * 0.992 + 0.0022 * dt + np.cos(before["seed"] * 1.7) * amp * dt
    after = engine.particles[0]
    assert after.vx == pytest.approx(vx, rel=1e-12, abs=1e-15)
    assert after.vy == pytest.approx(vy, rel=1e-12, abs=1e-15)
    assert after.x == pytest.approx(before["x"] + vx * dt)
    assert after.y == pytest.approx(before["y"] + vy * dt)


def test_tiny_step_is_clamped_to_min_dt_and_wobble_shrinks(rng):
    engine, before = _single_particle(rng)
    now = 500.0

    engine._step(now=now, delta_ms=1.0, progress=0.5)

    dt = 0.25
    amp = 0.006 * 0.5
    vx = before["vx"] * 0.992 + np.sin(now * 0.006 + before["seed"]) * amp * dt
    vy = (
        before["vy"] * 0.992
        + 0.0022 * dt
        + np.cos(now * 0.0045 + before["seed"] * 1.7) * amp * dt
    )
    after = engine.particles[0]
    assert after.vx == pytest.approx(vx, rel=1e-12, abs=1e-15)
    assert after.vy == pytest.approx(vy, rel=1e-12, abs=1e-15)
    assert after.x == pytest.approx(before["x"] + vx * dt)
    assert after.y == pytest.approx(before["y"] + vy * dt)


def test_nominal_frame_uses_unit_step(rng):
    engine, before = _single_particle(rng)

    engine._step(now=0.0, delta_ms=16.0, progress=1.0)

    # No wobble left at full progress: only damping and gravity
    after = engine.particles[0]
    assert after.vx == pytest.approx(before["vx"] * 0.992)
    assert after.vy == pytest.approx(before["vy"] * 0.992 + 0.0022)
    assert after.x == pytest.approx(before["x"] + after.vx)


def test_update_moves_particles_by_physics(rng):
    engine, before = _single_particle(rng)

    engine.update(16.0, 16.0)

    after = engine.particles[0]
    progress = 16.0 / 1450.0
    amp = 0.006 * (1.0 - progress)
    vx = before["vx"] * 0.992 + np.sin(16.0 * 0.006 + before["seed"]) * amp
    assert after.vx == pytest.approx(vx)
    assert after.x == pytest.approx(before["x"] + vx)
    assert engine.progress == pytest.approx(progress)


def test_idle_engine_returns_blank():
    engine = DisintegrationEngine()
    assert engine.update(10.0, 16.0) == []
    assert not engine.is_running
    assert not engine.is_done


def test_restart_discards_previous_particles(rng):
    engine = DisintegrationEngine(rng=rng)
    engine.start(["abc"], now=0.0)
    engine.start(["x  "], now=100.0)
    assert engine.count == 1
    assert engine.particles[0].char == "x"
    assert engine.progress == 0.0
