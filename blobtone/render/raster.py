"""Pillow raster renderer: dot fields to pixels, scenes composited with blend modes."""

from __future__ import annotations

import logging
import math

import numpy as np
from numpy.typing import NDArray
from PIL import Image, ImageDraw

from blobtone.engine.types import Layer, Scene
from blobtone.render.svg import BACKDROP_FROM, BACKDROP_TO
from blobtone.utils.color import TRANSPARENT, to_rgba8

logger = logging.getLogger(__name__)


def render_layer_image(layer: Layer) -> Image.Image:
    """One layer at its intrinsic size, transparent outside the dots."""
    w, h = layer.size
    size = (max(1, math.ceil(w)), max(1, math.ceil(h)))
    params = layer.halftone_params

    if params.background_color.lower() == TRANSPARENT:
        img = Image.new("RGBA", size, (0, 0, 0, 0))
    else:
        img = Image.new("RGBA", size, to_rgba8(params.background_color))

    draw = ImageDraw.Draw(img)
    fill = to_rgba8(params.dot_color)
    for dot in layer.dot_field:
        draw.ellipse(
            (dot.x - dot.radius, dot.y - dot.radius, dot.x + dot.radius, dot.y + dot.radius),
            fill=fill,
        )
    return img


def _blend(mode: str, base: NDArray[np.float64], src: NDArray[np.float64]) -> NDArray[np.float64]:
    """Separable blend functions on [0, 1] RGB."""
    if mode == "multiply":
        return base * src
    if mode == "screen":
        return 1.0 - (1.0 - base) * (1.0 - src)
    if mode == "overlay":
        return np.where(base <= 0.5, 2.0 * base * src, 1.0 - 2.0 * (1.0 - base) * (1.0 - src))
    if mode == "soft-light":
        return (1.0 - 2.0 * src) * base**2 + 2.0 * src * base
    if mode == "color-dodge":
        with np.errstate(divide="ignore", invalid="ignore"):
            out = np.where(src >= 1.0, 1.0, base / np.maximum(1.0 - src, 1e-12))
        return np.clip(np.where(base <= 0.0, 0.0, out), 0.0, 1.0)
    return src


def backdrop(width: int, height: int) -> NDArray[np.float64]:
    """Diagonal light-gray gradient, HxWx3 in [0, 1]."""
    start = np.array(to_rgba8(BACKDROP_FROM)[:3], dtype=np.float64) / 255.0
    end = np.array(to_rgba8(BACKDROP_TO)[:3], dtype=np.float64) / 255.0
    yy, xx = np.mgrid[0:height, 0:width]
    t = (xx / max(width - 1, 1) + yy / max(height - 1, 1)) / 2.0
    return start + t[..., None] * (end - start)


def place_layer(layer: Layer) -> Image.Image:
    """Layer image after scale and rotation about its center."""
    img = render_layer_image(layer)
    t = layer.transform
    if t.scale != 1.0:
        scaled = (max(1, round(img.width * t.scale)), max(1, round(img.height * t.scale)))
        img = img.resize(scaled, Image.Resampling.BILINEAR)
    if t.rotation_deg:
        # Positive degrees turn clockwise on screen; PIL rotates counter-clockwise
        img = img.rotate(-t.rotation_deg, resample=Image.Resampling.BICUBIC, expand=True)
    return img


def composite_layer(canvas: NDArray[np.float64], layer: Layer) -> None:
    """Blend one layer into ``canvas`` (HxWx3, modified in place)."""
    height, width = canvas.shape[:2]
    w, h = layer.size
    t = layer.transform
    img = place_layer(layer)

    cx = t.position_pct[0] / 100.0 * width + w / 2
    cy = t.position_pct[1] / 100.0 * height + h / 2
    x0 = int(round(cx - img.width / 2))
    y0 = int(round(cy - img.height / 2))

    # Visible window, in canvas and in layer coordinates
    cx0, cy0 = max(x0, 0), max(y0, 0)
    cx1, cy1 = min(x0 + img.width, width), min(y0 + img.height, height)
    if cx0 >= cx1 or cy0 >= cy1:
        return

    src = np.asarray(img, dtype=np.float64)[cy0 - y0:cy1 - y0, cx0 - x0:cx1 - x0] / 255.0
    region = canvas[cy0:cy1, cx0:cx1]
    alpha = src[..., 3:4] * t.opacity
    blended = _blend(t.blend_mode, region, src[..., :3])
    canvas[cy0:cy1, cx0:cx1] = region * (1.0 - alpha) + blended * alpha


def render_scene_image(scene: Scene, width: int = 1200, height: int = 800) -> Image.Image:
    """Composite a scene over the backdrop into an RGB image."""
    canvas = backdrop(width, height)
    for layer in scene.ordered():
        composite_layer(canvas, layer)
    logger.debug("Rendered scene %d: %d layers at %dx%d", scene.generation, len(scene), width, height)
    return Image.fromarray(np.clip(canvas * 255.0 + 0.5, 0, 255).astype(np.uint8))
