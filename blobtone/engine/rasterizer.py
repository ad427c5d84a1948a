"""RegionRasterizer — halftone dots inside a boundary.

Grid points step ``grid_spacing`` over [0, width) × [0, height), row-major from
the top-left. Each point is jittered by U[−jitter, jitter] per axis and clamped
to the box, then classified against the flattened boundary. Radius is
(1 − u)·max_dot_radius with u ~ U[0, 1): uniformly random per dot, not a
brightness mapping. Dots at or below ``visibility_threshold`` are dropped.

Random draws per call: 2·G jitter values, then G radius values (G = grid
points), regardless of the boundary. Identical seeds give identical fields.
"""

from __future__ import annotations

import logging
import math
import time

import numpy as np

from blobtone.engine.errors import InvalidParameters, MalformedBoundary
from blobtone.engine.path import DEFAULT_TOLERANCE, BoundaryPath
from blobtone.engine.types import Dot, DotField, HalftoneParams
from blobtone.utils.geometry import points_in_rings

logger = logging.getLogger(__name__)


def _validate_box(box: tuple[float, float]) -> tuple[float, float]:
    try:
        width, height = (float(v) for v in box)
    except (TypeError, ValueError) as e:
        raise InvalidParameters(f"box must be a (width, height) pair, got {box!r}") from e
    if not (math.isfinite(width) and math.isfinite(height)) or width <= 0 or height <= 0:
        raise InvalidParameters(f"box dimensions must be positive, got {box!r}")
    return width, height


def grid_points(width: float, height: float, spacing: float) -> np.ndarray:
    """Regular grid, Gx2, row-major (y outer, x inner)."""
    xs = np.arange(0.0, width, spacing)
    ys = np.arange(0.0, height, spacing)
    gx, gy = np.meshgrid(xs, ys)
    return np.column_stack([gx.ravel(), gy.ravel()])


def rasterize(
    path: BoundaryPath,
    box: tuple[float, float],
    params: HalftoneParams,
    rng: np.random.Generator,
    *,
    tolerance: float = DEFAULT_TOLERANCE,
) -> DotField:
    """Rasterize ``path`` into a DotField.

    Raises InvalidParameters for bad params/box and MalformedBoundary when the
    path cannot be flattened; both are raised before any dot is produced.
    """
    params.validate()
    width, height = _validate_box(box)
    rings = path.flatten(tolerance)

    t0 = time.perf_counter()
    grid = grid_points(width, height, params.grid_spacing)
    count = len(grid)

    jitter = rng.uniform(-params.jitter, params.jitter, size=(count, 2))
    radii = (1.0 - rng.random(count)) * params.max_dot_radius

    pts = np.clip(grid + jitter, (0.0, 0.0), (width, height))

    inside = points_in_rings(pts, rings, params.fill_rule)
    keep = inside & (radii > params.visibility_threshold)

    dots = tuple(
        Dot(float(x), float(y), float(r))
        for (x, y), r in zip(pts[keep], radii[keep])
    )

    logger.debug(
        "Rasterized %d/%d grid points (%d inside) in %.1fms",
        len(dots),
        count,
        int(inside.sum()),
        (time.perf_counter() - t0) * 1000,
    )
    return DotField(dots=dots, params=params, box=(width, height))


def rasterize_or_empty(
    path: BoundaryPath,
    box: tuple[float, float],
    params: HalftoneParams,
    rng: np.random.Generator,
    *,
    tolerance: float = DEFAULT_TOLERANCE,
) -> DotField:
    """Like :func:`rasterize`, but a malformed path yields an empty field.

    Lets a caller keep showing its previous frame. InvalidParameters still
    propagates.
    """
    try:
        return rasterize(path, box, params, rng, tolerance=tolerance)
    except MalformedBoundary as e:
        logger.warning("Malformed boundary, returning empty dot field: %s", e)
        return DotField.empty(params, _validate_box(box))
