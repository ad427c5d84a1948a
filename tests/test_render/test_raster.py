"""Tests for the Pillow renderer."""

from __future__ import annotations

import numpy as np
import pytest

from blobtone.engine.compositor import LayerCompositor
from blobtone.engine.config import CompositorConfig
from blobtone.engine.path import BoundaryPath
from blobtone.engine.types import (
    Dot,
    DotField,
    HalftoneParams,
    Layer,
    LayerTransform,
    Scene,
    ShapeParams,
)
from blobtone.render.raster import _blend, backdrop, render_layer_image, render_scene_image
from tests.conftest import SEED, SQUARE_D


def _single_dot_layer(blend_mode: str = "normal", opacity: float = 1.0) -> Layer:
    params = HalftoneParams(dot_color="#000000")
    return Layer(
        id="blob-0-1",
        shape_params=ShapeParams(width=100, height=100),
        boundary_path=BoundaryPath.from_svg_d(SQUARE_D),
        halftone_params=params,
        dot_field=DotField(dots=(Dot(50, 50, 20),), params=params, box=(100, 100)),
        transform=LayerTransform(opacity=opacity, blend_mode=blend_mode),
    )


def test_scene_image_size():
    comp = LayerCompositor(config=CompositorConfig(layer_count=3), rng=np.random.default_rng(SEED))
    img = render_scene_image(comp.regenerate(), 320, 240)
    assert img.size == (320, 240)
    assert img.mode == "RGB"


def test_empty_scene_is_backdrop():
    img = np.asarray(render_scene_image(Scene(), 50, 40))
    assert tuple(img[0, 0]) == (0xF9, 0xFA, 0xFB)
    assert tuple(img[-1, -1]) == (0xF3, 0xF4, 0xF6)


def test_layer_image_transparent_outside_dots():
    img = render_layer_image(_single_dot_layer())
    assert img.size == (100, 100)
    px = np.asarray(img)
    assert px[0, 0, 3] == 0
    assert tuple(px[50, 50]) == (0, 0, 0, 255)


def test_opacity_blends_dots_with_backdrop():
    solid = np.asarray(render_scene_image(Scene(layers=(_single_dot_layer(),)), 100, 100))
    faded = np.asarray(render_scene_image(Scene(layers=(_single_dot_layer(opacity=0.5),)), 100, 100))
    assert tuple(solid[50, 50]) == (0, 0, 0)
    assert 100 < faded[50, 50, 0] < 150
    # Outside the dot the backdrop shows through
    assert solid[5, 5, 0] > 200


@pytest.mark.parametrize(
    "mode, expected",
    [
        ("normal", 0.2),
        ("multiply", 0.1),
        ("screen", 0.6),
        ("overlay", 0.2),
    ],
)
def test_blend_modes(mode, expected):
    base = np.array([[[0.5, 0.5, 0.5]]])
    src = np.array([[[0.2, 0.2, 0.2]]])
    assert _blend(mode, base, src)[0, 0, 0] == pytest.approx(expected)


def test_backdrop_shape():
    assert backdrop(30, 20).shape == (20, 30, 3)
