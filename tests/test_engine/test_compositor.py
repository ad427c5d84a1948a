"""Tests for scene composition and the refresh timer."""

from __future__ import annotations

import asyncio
import logging
import time

import numpy as np
import pytest

from blobtone.engine import compositor as compositor_module
from blobtone.engine.compositor import LayerCompositor
from blobtone.engine.config import CompositorConfig
from blobtone.engine.errors import InvalidParameters, LayerGenerationFailure, MalformedBoundary
from blobtone.engine.presets import Preset, PresetProvider
from blobtone.engine.types import CompositorState, ShapeParams
from tests.conftest import SEED

SMALL_PRESETS = PresetProvider([
    Preset("small", ShapeParams(width=200, height=160, point_count=6, randomness=0.5)),
    Preset("smaller", ShapeParams(width=180, height=200, point_count=8, randomness=0.4)),
])


def _compositor(**config) -> LayerCompositor:
    config.setdefault("size_jitter", 40.0)
    return LayerCompositor(
        config=CompositorConfig(**config),
        presets=SMALL_PRESETS,
        rng=np.random.default_rng(SEED),
    )


def test_default_scene():
    comp = LayerCompositor(rng=np.random.default_rng(SEED))
    assert comp.state is CompositorState.IDLE
    assert comp.scene.is_empty

    scene = comp.regenerate()
    assert comp.state is CompositorState.READY
    assert comp.scene is scene
    assert len(scene) == 5
    assert scene.generation == 1
    assert scene.requested == 5
    assert scene.errors == {}
    assert [layer.id for layer in scene] == [f"blob-{i}-1" for i in range(5)]
    assert [layer.transform.z_index for layer in scene] == [1, 2, 3, 4, 5]
    assert all(len(layer.dot_field) > 0 for layer in scene)


def test_zero_layers_gives_empty_scene():
    comp = _compositor()
    scene = comp.regenerate(layer_count=0)
    assert scene.is_empty
    assert scene.requested == 0
    assert comp.state is CompositorState.READY


@pytest.mark.parametrize("count", [-1, 2.5, True, "3"])
def test_invalid_layer_count(count):
    comp = _compositor()
    with pytest.raises(InvalidParameters):
        comp.regenerate(layer_count=count)
    assert comp.state is CompositorState.IDLE


def test_layers_requested_without_presets():
    comp = _compositor()
    with pytest.raises(InvalidParameters):
        comp.regenerate(layer_count=2, presets=PresetProvider([]))
    assert comp.regenerate(layer_count=0, presets=PresetProvider([])).is_empty


def test_round_robin_presets():
    comp = _compositor(layer_count=5)
    scene = comp.regenerate()
    counts = [layer.shape_params.point_count for layer in scene]
    assert counts == [6, 8, 6, 8, 6]


def test_random_preset_selection():
    comp = _compositor(layer_count=6, preset_selection="random")
    scene = comp.regenerate()
    assert {layer.shape_params.point_count for layer in scene} <= {6, 8}


def test_sampled_values_stay_in_bands():
    cfg = CompositorConfig(size_jitter=40.0, layer_count=8)
    comp = LayerCompositor(config=cfg, presets=SMALL_PRESETS, rng=np.random.default_rng(SEED))
    for i, layer in enumerate(comp.regenerate()):
        base = SMALL_PRESETS.list()[i % 2].shape
        assert abs(layer.shape_params.width - base.width) <= 20
        assert abs(layer.shape_params.height - base.height) <= 20
        assert 0.5 <= layer.shape_params.randomness <= 0.95

        h = layer.halftone_params
        assert 5 <= h.grid_spacing <= 12
        assert 3 <= h.max_dot_radius <= 8
        assert h.dot_color == "#000000"

        t = layer.transform
        assert all(-10 <= p <= 70 for p in t.position_pct)
        assert 0.3 <= t.opacity <= 0.7
        assert -30 <= t.rotation_deg <= 30
        assert 0.6 <= t.scale <= 1.1
        assert t.blend_mode == "multiply"

        assert layer.dot_field.box == layer.size


def test_same_seed_same_scene():
    a = _compositor(layer_count=3).regenerate()
    b = _compositor(layer_count=3).regenerate()
    assert a == b


def test_seed_override_per_call():
    comp = _compositor(layer_count=2)
    a = comp.regenerate(rng=np.random.default_rng(7))
    b = comp.regenerate(rng=np.random.default_rng(7))
    assert [layer.dot_field for layer in a] == [layer.dot_field for layer in b]
    assert b.generation == a.generation + 1


def test_generations_get_fresh_ids():
    comp = _compositor(layer_count=2)
    first = comp.regenerate()
    second = comp.regenerate()
    assert {layer.id for layer in first}.isdisjoint({layer.id for layer in second})


def test_failed_layer_is_skipped(monkeypatch, caplog):
    real = compositor_module.generate_blob
    calls = {"n": 0}

    def flaky(params, rng):
        calls["n"] += 1
        if calls["n"] == 2:
            raise MalformedBoundary("boom")
        return real(params, rng)

    monkeypatch.setattr(compositor_module, "generate_blob", flaky)
    comp = _compositor(layer_count=4)
    with caplog.at_level(logging.WARNING, logger="blobtone.engine.compositor"):
        scene = comp.regenerate()

    assert len(scene) == 3
    assert scene.requested == 4
    assert list(scene.errors) == ["blob-1-1"]
    assert "MalformedBoundary" in scene.errors["blob-1-1"]
    assert "blob-1-1" in caplog.text
    # z_index stays dense over the surviving layers
    assert [layer.transform.z_index for layer in scene] == [1, 2, 3]


def test_every_layer_failing_still_publishes(monkeypatch):
    def broken(params, rng):
        raise MalformedBoundary("nope")

    monkeypatch.setattr(compositor_module, "generate_blob", broken)
    comp = _compositor(layer_count=3)
    scene = comp.regenerate()
    assert scene.is_empty
    assert len(scene.errors) == 3
    assert comp.state is CompositorState.READY


def test_layer_generation_failure_wraps_cause():
    cause = MalformedBoundary("bad path")
    failure = LayerGenerationFailure("blob-0-1", cause)
    assert failure.layer_id == "blob-0-1"
    assert failure.cause is cause
    assert str(failure) == "blob-0-1: MalformedBoundary: bad path"


@pytest.mark.parametrize(
    "config",
    [
        {"layer_count": -1},
        {"refresh_interval_ms": 0},
        {"preset_selection": "shuffle"},
        {"blend_modes": ("darken",)},
        {"dot_colors": ()},
        {"opacity_range": (0.5, 1.5)},
        {"scale_range": (2.0, 1.0)},
    ],
)
def test_invalid_config(config):
    with pytest.raises(InvalidParameters):
        LayerCompositor(config=CompositorConfig(**config))


def test_tick_uses_configured_count():
    comp = _compositor(layer_count=2)
    assert len(comp.tick()) == 2


def test_auto_refresh_regenerates_until_teardown():
    comp = _compositor(layer_count=1, auto_refresh=True, refresh_interval_ms=10)

    async def run() -> int:
        task = comp.start_auto_refresh()
        assert comp.start_auto_refresh() is task
        assert comp.auto_refreshing
        await asyncio.sleep(0.2)
        comp.teardown()
        await asyncio.gather(task, return_exceptions=True)
        assert task.cancelled()
        # A tick already running in the executor may still land
        await asyncio.sleep(0.1)
        generation = comp.scene.generation
        await asyncio.sleep(0.1)
        assert comp.scene.generation == generation
        return generation

    assert asyncio.run(run()) >= 1
    assert not comp.auto_refreshing


def test_teardown_is_idempotent():
    comp = _compositor()
    comp.teardown()
    comp.teardown()
    assert not comp.auto_refreshing


def test_auto_refresh_needs_event_loop():
    with pytest.raises(RuntimeError):
        _compositor().start_auto_refresh()


def test_compositor_keeps_an_empty_preset_provider():
    comp = LayerCompositor(presets=PresetProvider([]), rng=np.random.default_rng(SEED))
    assert len(comp.presets) == 0
    with pytest.raises(InvalidParameters):
        comp.regenerate(layer_count=1)


def test_auto_refresh_runs_off_the_event_loop():
    comp = LayerCompositor(
        config=CompositorConfig(layer_count=5, refresh_interval_ms=1),
        rng=np.random.default_rng(SEED),
    )
    start = time.perf_counter()
    comp.regenerate()
    build_time = time.perf_counter() - start

    async def longest_gap() -> float:
        comp.start_auto_refresh()
        worst = 0.0
        last = time.perf_counter()
        deadline = last + max(0.5, 3 * build_time)
        while time.perf_counter() < deadline:
            await asyncio.sleep(0.001)
            now = time.perf_counter()
            worst = max(worst, now - last)
            last = now
        comp.teardown()
        return worst

    # A tick blocking the loop would stall it for a whole build
    assert asyncio.run(longest_gap()) < max(build_time / 2, 0.03)


def test_auto_refresh_survives_unexpected_errors(monkeypatch, caplog):
    comp = _compositor(layer_count=1, refresh_interval_ms=5)
    calls = {"n": 0}

    def flaky_tick():
        calls["n"] += 1
        if calls["n"] == 1:
            raise RuntimeError("disk on fire")
        return comp.regenerate()

    monkeypatch.setattr(comp, "tick", flaky_tick)

    async def run() -> None:
        task = comp.start_auto_refresh()
        for _ in range(200):
            await asyncio.sleep(0.01)
            if calls["n"] >= 3:
                break
        assert not task.done()
        comp.teardown()
        await asyncio.gather(task, return_exceptions=True)

    with caplog.at_level(logging.ERROR, logger="blobtone.engine.compositor"):
        asyncio.run(run())

    assert calls["n"] >= 3
    assert "Scheduled regeneration failed" in caplog.text
    assert "disk on fire" in caplog.text
