"""FastAPI dependency injection."""

from __future__ import annotations

import numpy as np

from blobtone.config import Settings, settings
from blobtone.engine.compositor import LayerCompositor

_compositor: LayerCompositor | None = None


def get_settings() -> Settings:
    return settings


def build_compositor(cfg: Settings | None = None) -> LayerCompositor:
    cfg = cfg or settings
    return LayerCompositor(
        config=cfg.compositor_config(),
        rng=np.random.default_rng(cfg.blobtone_seed),
    )


def get_compositor() -> LayerCompositor:
    """Process-wide compositor shared by the scene endpoints and the refresh timer."""
    global _compositor
    if _compositor is None:
        _compositor = build_compositor()
    return _compositor
