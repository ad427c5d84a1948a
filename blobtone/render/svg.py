"""Write SVG markup for layers and scenes."""

from __future__ import annotations

from xml.sax.saxutils import escape

from blobtone.engine.types import Layer, Scene
from blobtone.utils.color import TRANSPARENT

# Page backdrop: top-left → bottom-right gradient, light gray.
BACKDROP_FROM = "#f9fafb"
BACKDROP_TO = "#f3f4f6"


def _num(v: float) -> str:
    return f"{v:.2f}".rstrip("0").rstrip(".")


def layer_placement(layer: Layer, container_w: float, container_h: float) -> str:
    """SVG transform placing a layer: offset, then rotate/scale about its center."""
    w, h = layer.size
    t = layer.transform
    left = t.position_pct[0] / 100.0 * container_w
    top = t.position_pct[1] / 100.0 * container_h
    return (
        f"translate({_num(left + w / 2)} {_num(top + h / 2)})"
        f" rotate({_num(t.rotation_deg)})"
        f" scale({_num(t.scale)})"
        f" translate({_num(-w / 2)} {_num(-h / 2)})"
    )


def render_layer_svg(layer: Layer, *, outline: bool = False) -> list[str]:
    """Dots (and optionally the boundary outline) of one layer, unplaced."""
    params = layer.halftone_params
    w, h = layer.size
    lines: list[str] = []
    if params.background_color.lower() != TRANSPARENT:
        lines.append(f'<rect width="{_num(w)}" height="{_num(h)}" fill="{params.background_color}" />')
    lines.append(f'<g fill="{params.dot_color}">')
    for dot in layer.dot_field:
        lines.append(f'  <circle cx="{_num(dot.x)}" cy="{_num(dot.y)}" r="{_num(dot.radius)}" />')
    lines.append("</g>")
    if outline:
        lines.append(
            f'<path d="{layer.boundary_path.to_svg_d()}" fill="none"'
            f' stroke="{params.dot_color}" stroke-width="1" />'
        )
    return lines


def render_scene_svg(
    scene: Scene,
    width: float = 1200.0,
    height: float = 800.0,
    *,
    backdrop: bool = True,
    outline: bool = False,
    title: str = "",
) -> str:
    """Generate a standalone SVG document for a scene."""
    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        f'<svg viewBox="0 0 {_num(width)} {_num(height)}" width="{_num(width)}"'
        f' height="{_num(height)}" xmlns="http://www.w3.org/2000/svg" role="img">',
    ]
    if title:
        lines.append(f"  <title>{escape(title)}</title>")

    if backdrop:
        lines.extend([
            "  <defs>",
            '    <linearGradient id="backdrop" x1="0" y1="0" x2="1" y2="1">',
            f'      <stop offset="0" stop-color="{BACKDROP_FROM}" />',
            f'      <stop offset="1" stop-color="{BACKDROP_TO}" />',
            "    </linearGradient>",
            "  </defs>",
            f'  <rect width="{_num(width)}" height="{_num(height)}" fill="url(#backdrop)" />',
        ])

    # blend modes apply within this group only
    lines.append('  <g style="isolation: isolate">')
    for layer in scene.ordered():
        t = layer.transform
        lines.append(
            f'    <g id="{layer.id}" transform="{layer_placement(layer, width, height)}"'
            f' opacity="{_num(t.opacity)}" style="mix-blend-mode: {t.blend_mode}">'
        )
        lines.extend(f"      {line}" for line in render_layer_svg(layer, outline=outline))
        lines.append("    </g>")
    lines.append("  </g>")

    lines.append("</svg>")
    return "\n".join(lines)
