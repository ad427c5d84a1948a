"""Scene endpoints: regenerate the shared scene and read it back as JSON, SVG or PNG."""

from __future__ import annotations

import io
import logging
import threading

import numpy as np
from fastapi import APIRouter, HTTPException
from fastapi.responses import Response

from blobtone.dependencies import get_compositor, get_settings
from blobtone.engine.compositor import LayerCompositor
from blobtone.engine.errors import BlobtoneError
from blobtone.engine.types import Scene
from blobtone.models.requests import SceneRequest
from blobtone.models.responses import SceneResponse
from blobtone.render.raster import render_scene_image
from blobtone.render.svg import render_scene_svg

logger = logging.getLogger(__name__)

router = APIRouter()


class SceneKeeper:
    """Holds the last good scene on top of a compositor.

    A regeneration that asked for layers but produced none (every layer
    failed) does not replace what is being shown.
    """

    def __init__(self, compositor: LayerCompositor) -> None:
        self.compositor = compositor
        self._lock = threading.Lock()
        self._good: Scene | None = None

    def _accept(self, scene: Scene) -> bool:
        with self._lock:
            if scene.is_empty and scene.requested > 0 and self._good is not None:
                return False
            if self._good is None or scene.generation >= self._good.generation:
                self._good = scene
            return True

    def regenerate(self, layer_count: int | None = None, seed: int | None = None) -> tuple[Scene, bool]:
        """Regenerate; returns (scene shown, whether the previous one was retained)."""
        rng = np.random.default_rng(seed) if seed is not None else None
        scene = self.compositor.regenerate(layer_count=layer_count, rng=rng)
        if self._accept(scene):
            return scene, False
        logger.warning(
            "Scene %d produced no layers (%d failed), keeping scene %d",
            scene.generation,
            len(scene.errors),
            self._good.generation,
        )
        return self._good, True

    def current(self) -> Scene:
        """Scene to show; generates the first one on demand."""
        if self.compositor.scene.generation == 0 and self._good is None:
            return self.regenerate()[0]
        # Auto refresh publishes straight to the compositor
        self._accept(self.compositor.scene)
        return self._good


_keeper: SceneKeeper | None = None


def get_keeper() -> SceneKeeper:
    global _keeper
    if _keeper is None:
        _keeper = SceneKeeper(get_compositor())
    return _keeper


@router.post("/scene/regenerate", response_model=SceneResponse)
def regenerate_scene(req: SceneRequest) -> SceneResponse:
    try:
        scene, retained = get_keeper().regenerate(layer_count=req.layer_count, seed=req.seed)
    except BlobtoneError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    return SceneResponse.from_scene(scene, retained=retained)


@router.get("/scene", response_model=SceneResponse)
def current_scene() -> SceneResponse:
    return SceneResponse.from_scene(get_keeper().current())


@router.get("/scene.svg")
def current_scene_svg() -> Response:
    scene = get_keeper().current()
    cfg = get_settings()
    svg = render_scene_svg(
        scene,
        cfg.blobtone_render_width,
        cfg.blobtone_render_height,
        title=f"Blob halftone scene {scene.generation}",
    )
    return Response(content=svg, media_type="image/svg+xml")


@router.get("/scene.png")
def current_scene_png() -> Response:
    scene = get_keeper().current()
    cfg = get_settings()
    img = render_scene_image(scene, cfg.blobtone_render_width, cfg.blobtone_render_height)
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return Response(content=buf.getvalue(), media_type="image/png")
