"""ShapeGenerator — randomized closed blob outline.

Anchors sit at equal angular steps on an ellipse (radii = radius_ratio × box
side); each anchor's radius is scaled by 1 + (u − 0.5)·randomness, u ~ U[0, 1).
Consecutive anchors are joined with Catmull-Rom splines expressed as cubic
Béziers, so the outline has no corners.

With randomness close to 1 the outline can poke past the nominal
width × height box: anchors reach 1.5 × radius_ratio of the side and the spline
overshoots between them. That overshoot is left in place, never cropped.
"""

from __future__ import annotations

import logging

import numpy as np

from blobtone.engine.path import BoundaryPath, ClosePath, CubicCurveTo, MoveTo
from blobtone.engine.types import ShapeParams
from blobtone.utils.bezier import catmull_rom_controls

logger = logging.getLogger(__name__)


def anchor_points(params: ShapeParams, rng: np.random.Generator) -> np.ndarray:
    """Perturbed anchors, Nx2. Consumes exactly ``point_count`` uniform draws."""
    n = params.point_count
    cx, cy = params.center
    rx = params.width * params.radius_ratio
    ry = params.height * params.radius_ratio

    angles = np.arange(n) * (2.0 * np.pi / n)
    factors = 1.0 + (rng.random(n) - 0.5) * params.randomness

    return np.column_stack([
        cx + np.cos(angles) * rx * factors,
        cy + np.sin(angles) * ry * factors,
    ])


def generate_blob(params: ShapeParams, rng: np.random.Generator) -> BoundaryPath:
    """Generate a closed blob outline.

    Output is ``MoveTo``, one ``CubicCurveTo`` per anchor (the last one ends on
    the start point), then ``ClosePath``. Raises InvalidParameters before any
    random draw if ``params`` is invalid.
    """
    params.validate()

    pts = anchor_points(params, rng)
    cp1, cp2 = catmull_rom_controls(pts, params.tension)
    ends = np.roll(pts, -1, axis=0)

    segments: list = [MoveTo(float(pts[0, 0]), float(pts[0, 1]))]
    for (c1x, c1y), (c2x, c2y), (ex, ey) in zip(cp1, cp2, ends):
        segments.append(
            CubicCurveTo(float(c1x), float(c1y), float(c2x), float(c2y), float(ex), float(ey))
        )
    segments.append(ClosePath())

    logger.debug(
        "Generated blob: %d anchors, %.0f×%.0f, randomness %.2f",
        params.point_count,
        params.width,
        params.height,
        params.randomness,
    )
    return BoundaryPath(tuple(segments))
