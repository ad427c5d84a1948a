"""Leaf-node geometry helpers. No engine imports."""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

FILL_RULES = ("nonzero", "evenodd")


def bbox(points: NDArray[np.float64]) -> tuple[float, float, float, float]:
    """Compute (xmin, ymin, xmax, ymax) bounding box."""
    if len(points) == 0:
        return (0.0, 0.0, 0.0, 0.0)
    return (
        float(np.min(points[:, 0])),
        float(np.min(points[:, 1])),
        float(np.max(points[:, 0])),
        float(np.max(points[:, 1])),
    )


def close_ring(ring: NDArray[np.float64]) -> NDArray[np.float64]:
    """Append the first vertex if the ring is not explicitly closed."""
    if len(ring) and not np.array_equal(ring[0], ring[-1]):
        return np.vstack([ring, ring[:1]])
    return ring


def winding_numbers(
    points: NDArray[np.float64],
    ring: NDArray[np.float64],
) -> NDArray[np.int64]:
    """Winding number of every point w.r.t. one polygon ring.

    Vectorized over points; loops over edges. Upward crossings with the point
    strictly left of the edge count +1, downward crossings with the point
    strictly right count -1.
    """
    px = points[:, 0]
    py = points[:, 1]
    closed = close_ring(np.asarray(ring, dtype=np.float64))
    wn = np.zeros(len(points), dtype=np.int64)

    for (x0, y0), (x1, y1) in zip(closed[:-1], closed[1:]):
        if y0 == y1:
            continue
        cross = (x1 - x0) * (py - y0) - (px - x0) * (y1 - y0)
        if y0 <= y1:
            # Upward crossing
            wn += ((y0 <= py) & (py < y1) & (cross > 0)).astype(np.int64)
        else:
            # Downward crossing
            wn -= ((y1 <= py) & (py < y0) & (cross < 0)).astype(np.int64)
    return wn


def points_in_rings(
    points: NDArray[np.float64],
    rings: list[NDArray[np.float64]],
    fill_rule: str = "nonzero",
) -> NDArray[np.bool_]:
    """Inside test of points against a multi-ring region.

    Winding numbers are summed across rings; ``nonzero`` keeps any non-zero
    total, ``evenodd`` keeps odd totals (crossing parity).
    """
    if fill_rule not in FILL_RULES:
        raise ValueError(f"Unknown fill rule: {fill_rule!r}")
    pts = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    total = np.zeros(len(pts), dtype=np.int64)
    for ring in rings:
        if len(ring) < 3:
            continue
        total += winding_numbers(pts, ring)
    if fill_rule == "evenodd":
        return (total % 2) != 0
    return total != 0
