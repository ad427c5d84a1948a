"""LayerCompositor — builds and publishes layered blob-halftone scenes.

Each regeneration draws, per layer and in this order from one sequential RNG
stream: preset (random selection only), size / randomness perturbation,
halftone parameters with the dot color, placement with the blend mode, then the
blob anchors and the rasterization draws. A seeded generator therefore reproduces a scene
exactly.

Generation is synchronous and serialized by a lock. The scene is assembled in
full and published by a single reference swap, so readers see either the
previous scene or the next one. A layer whose generation fails is skipped and
reported in ``Scene.errors``; the rest of the scene is still published.
"""

from __future__ import annotations

import asyncio
import logging
import threading
import time
from dataclasses import replace

import numpy as np

from blobtone.engine.config import CompositorConfig
from blobtone.engine.errors import BlobtoneError, InvalidParameters, LayerGenerationFailure
from blobtone.engine.presets import Preset, PresetProvider
from blobtone.engine.rasterizer import rasterize
from blobtone.engine.shape_generator import generate_blob
from blobtone.engine.types import (
    CompositorState,
    HalftoneParams,
    Layer,
    LayerTransform,
    Scene,
)

logger = logging.getLogger(__name__)


def _uniform(rng: np.random.Generator, bounds: tuple[float, float]) -> float:
    lo, hi = bounds
    return float(lo + rng.random() * (hi - lo))


def _choice(rng: np.random.Generator, items: tuple[str, ...]) -> str:
    return items[int(rng.integers(len(items)))]


class LayerCompositor:
    """Owns the published Scene and the optional auto-refresh timer."""

    def __init__(
        self,
        config: CompositorConfig | None = None,
        presets: PresetProvider | None = None,
        rng: np.random.Generator | None = None,
    ) -> None:
        self.config = (config or CompositorConfig()).validate()
        self.presets = presets if presets is not None else PresetProvider()
        self.rng = rng if rng is not None else np.random.default_rng()
        self._lock = threading.Lock()
        self._state = CompositorState.IDLE
        self._scene = Scene()
        self._generation = 0
        self._refresh_task: asyncio.Task | None = None

    @property
    def state(self) -> CompositorState:
        return self._state

    @property
    def scene(self) -> Scene:
        """Last published scene (empty before the first regeneration)."""
        return self._scene

    @property
    def auto_refreshing(self) -> bool:
        return self._refresh_task is not None and not self._refresh_task.done()

    # ── Generation ──

    def regenerate(
        self,
        layer_count: int | None = None,
        presets: PresetProvider | None = None,
        rng: np.random.Generator | None = None,
    ) -> Scene:
        """Build a new scene, publish it and return it.

        Raises InvalidParameters for a negative/non-integer ``layer_count`` or
        an empty preset list when layers are requested; per-layer failures are
        skipped instead.
        """
        count = self.config.layer_count if layer_count is None else layer_count
        if isinstance(count, bool) or not isinstance(count, int) or count < 0:
            raise InvalidParameters(f"layer_count must be a non-negative integer, got {count!r}")
        provider = presets if presets is not None else self.presets
        templates = provider.list()
        if count and not templates:
            raise InvalidParameters("at least one preset is required to generate layers")
        stream = rng if rng is not None else self.rng

        with self._lock:
            self._state = CompositorState.GENERATING
            try:
                scene = self._build(count, templates, stream)
            except Exception:
                self._state = CompositorState.READY if self._scene.generation else CompositorState.IDLE
                raise
            self._scene = scene
            self._state = CompositorState.READY
        return scene

    def _build(self, count: int, templates: tuple[Preset, ...], rng: np.random.Generator) -> Scene:
        start = time.perf_counter()
        self._generation += 1
        generation = self._generation

        layers: list[Layer] = []
        errors: dict[str, str] = {}
        for i in range(count):
            layer_id = f"blob-{i}-{generation}"
            t0 = time.perf_counter()
            try:
                layer = self._build_layer(layer_id, i, len(layers) + 1, templates, rng)
            except BlobtoneError as e:
                failure = LayerGenerationFailure(layer_id, e)
                errors[layer_id] = str(failure)
                logger.warning("  layer %s skipped: %s", layer_id, e)
                continue
            layers.append(layer)
            logger.debug(
                "  layer %s: %d dots in %.1fms",
                layer_id,
                len(layer.dot_field),
                (time.perf_counter() - t0) * 1000,
            )

        logger.info(
            "Scene %d: %d/%d layers in %.0fms",
            generation,
            len(layers),
            count,
            (time.perf_counter() - start) * 1000,
        )
        return Scene(layers=tuple(layers), generation=generation, requested=count, errors=errors)

    def _build_layer(
        self,
        layer_id: str,
        index: int,
        z_index: int,
        templates: tuple[Preset, ...],
        rng: np.random.Generator,
    ) -> Layer:
        cfg = self.config

        if cfg.preset_selection == "random":
            preset = templates[int(rng.integers(len(templates)))]
        else:
            preset = templates[index % len(templates)]

        base = preset.shape
        shape = replace(
            base,
            width=base.width + (rng.random() - 0.5) * cfg.size_jitter,
            height=base.height + (rng.random() - 0.5) * cfg.size_jitter,
            randomness=_uniform(rng, cfg.randomness_range),
            center_x=None,
            center_y=None,
        )

        halftone = HalftoneParams(
            grid_spacing=_uniform(rng, cfg.grid_spacing_range),
            max_dot_radius=_uniform(rng, cfg.max_dot_radius_range),
            dot_color=_choice(rng, cfg.dot_colors),
            jitter=cfg.jitter,
            visibility_threshold=cfg.visibility_threshold,
        )

        transform = LayerTransform(
            position_pct=(_uniform(rng, cfg.position_range), _uniform(rng, cfg.position_range)),
            rotation_deg=_uniform(rng, cfg.rotation_range),
            scale=_uniform(rng, cfg.scale_range),
            opacity=_uniform(rng, cfg.opacity_range),
            blend_mode=_choice(rng, cfg.blend_modes),
            z_index=z_index,
        )

        path = generate_blob(shape, rng)
        dots = rasterize(
            path,
            (shape.width, shape.height),
            halftone,
            rng,
            tolerance=cfg.flatten_tolerance,
        )
        return Layer(
            id=layer_id,
            shape_params=shape,
            boundary_path=path,
            halftone_params=halftone,
            dot_field=dots,
            transform=transform,
        )

    def tick(self) -> Scene:
        """Timer callback: regenerate with the configured defaults."""
        return self.regenerate()

    # ── Auto refresh ──

    async def _refresh_loop(self) -> None:
        interval = self.config.refresh_interval_ms / 1000.0
        loop = asyncio.get_running_loop()
        while True:
            await asyncio.sleep(interval)
            try:
                # Scene builds are CPU-bound and may wait on the generation lock
                await loop.run_in_executor(None, self.tick)
            except Exception:
                logger.exception("Scheduled regeneration failed")

    def start_auto_refresh(self) -> asyncio.Task:
        """Start the cooperative refresh timer on the running event loop."""
        if self.auto_refreshing:
            return self._refresh_task
        self._refresh_task = asyncio.get_running_loop().create_task(self._refresh_loop())
        logger.info("Auto refresh every %dms", self.config.refresh_interval_ms)
        return self._refresh_task

    def teardown(self) -> None:
        """Stop the refresh timer, if any. Safe to call repeatedly."""
        task, self._refresh_task = self._refresh_task, None
        if task is not None and not task.done():
            task.cancel()
            logger.info("Auto refresh stopped")
