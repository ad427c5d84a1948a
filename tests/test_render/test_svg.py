"""Tests for SVG scene output."""

from __future__ import annotations

import xml.etree.ElementTree as ET

import numpy as np

from blobtone.engine.compositor import LayerCompositor
from blobtone.engine.config import CompositorConfig
from blobtone.engine.types import Scene
from blobtone.render.svg import layer_placement, render_layer_svg, render_scene_svg
from tests.conftest import SEED

SVG_NS = "{http://www.w3.org/2000/svg}"


def _scene(layers: int = 2) -> Scene:
    comp = LayerCompositor(config=CompositorConfig(layer_count=layers), rng=np.random.default_rng(SEED))
    return comp.regenerate()


def test_scene_document_parses():
    scene = _scene()
    root = ET.fromstring(render_scene_svg(scene, 1200, 800, title="test").split("\n", 1)[1])
    assert root.tag == f"{SVG_NS}svg"
    assert root.get("viewBox") == "0 0 1200 800"
    assert root.find(f"{SVG_NS}title").text == "test"

    groups = [g for g in root.iter(f"{SVG_NS}g") if g.get("id", "").startswith("blob-")]
    assert [g.get("id") for g in groups] == [layer.id for layer in scene.ordered()]
    for g, layer in zip(groups, scene.ordered()):
        assert f"mix-blend-mode: {layer.transform.blend_mode}" in g.get("style")
        assert len(list(g.iter(f"{SVG_NS}circle"))) == len(layer.dot_field)


def test_title_markup_is_escaped():
    title = "a < b & c > d"
    svg = render_scene_svg(Scene(), title=title)
    assert "<title>a &lt; b &amp; c &gt; d</title>" in svg
    root = ET.fromstring(svg.split("\n", 1)[1])
    assert root.find(f"{SVG_NS}title").text == title


def test_backdrop_gradient():
    svg = render_scene_svg(Scene())
    assert 'id="backdrop"' in svg
    assert "#f9fafb" in svg and "#f3f4f6" in svg
    assert "<circle" not in svg

    bare = render_scene_svg(Scene(), backdrop=False)
    assert "backdrop" not in bare


def test_layer_outline_optional():
    layer = _scene(1).layers[0]
    assert not any("<path" in line for line in render_layer_svg(layer))
    outlined = render_layer_svg(layer, outline=True)
    assert outlined[-1].startswith(f'<path d="{layer.boundary_path.to_svg_d()}"')


def test_layer_placement_order():
    layer = _scene(1).layers[0]
    transform = layer_placement(layer, 1000, 1000)
    assert transform.startswith("translate(")
    assert transform.index("rotate(") < transform.index("scale(")
