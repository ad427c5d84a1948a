"""
Blobtone CLI — render a layered blob halftone scene to a file.

Usage:
  blobtone                              # prints SVG to terminal
  blobtone -o scene.svg                 # writes SVG
  blobtone -o scene.png --seed 7        # writes a reproducible PNG
  blobtone --layers 8 --width 1600 --height 900 -o big.png
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import numpy as np

from blobtone.config import settings
from blobtone.engine.compositor import LayerCompositor
from blobtone.engine.errors import BlobtoneError
from blobtone.render.raster import render_scene_image
from blobtone.render.svg import render_scene_svg


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Blobtone — layered blob halftone scenes")
    parser.add_argument("-o", "--output", help="Output file (.svg or .png); SVG to stdout if omitted")
    parser.add_argument("--layers", type=int, default=settings.blobtone_layer_count, help="Number of layers")
    parser.add_argument("--seed", type=int, default=settings.blobtone_seed, help="RNG seed")
    parser.add_argument("--width", type=int, default=settings.blobtone_render_width, help="Canvas width")
    parser.add_argument("--height", type=int, default=settings.blobtone_render_height, help="Canvas height")
    parser.add_argument("--outline", action="store_true", help="Also draw blob outlines (SVG only)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    level = logging.DEBUG if args.verbose else getattr(logging, settings.blobtone_log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, format="%(asctime)s %(name)s %(levelname)s %(message)s")

    if args.width <= 0 or args.height <= 0:
        print("  ERROR: width and height must be positive", file=sys.stderr)
        return 2

    compositor = LayerCompositor(
        config=settings.compositor_config(),
        rng=np.random.default_rng(args.seed),
    )
    try:
        scene = compositor.regenerate(layer_count=args.layers)
    except BlobtoneError as e:
        print(f"  ERROR: {e}", file=sys.stderr)
        return 1

    for layer_id, message in scene.errors.items():
        print(f"  skipped {layer_id}: {message}", file=sys.stderr)

    if not args.output:
        print(render_scene_svg(scene, args.width, args.height, outline=args.outline))
        return 0

    out = Path(args.output)
    if out.suffix.lower() == ".png":
        render_scene_image(scene, args.width, args.height).save(out, format="PNG")
    else:
        out.write_text(
            render_scene_svg(scene, args.width, args.height, outline=args.outline),
            encoding="utf-8",
        )
    print(f"  → Saved: {out} ({len(scene)} layers)", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
