"""Bézier evaluation and uniform flattening. No engine imports.

Piece counts come from the second-difference error bound of uniform
subdivision: a cubic with control points P0..P3 deviates from its chord
polyline by at most 3/4 · D / n², D = max(|P0 − 2P1 + P2|, |P1 − 2P2 + P3|);
a quadratic by at most D / (4n²), D = |P0 − 2P1 + P2|.
"""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import NDArray

# Upper bound on pieces per curve; keeps pathological control points from
# exploding the ring size.
MAX_PIECES = 512


def _pieces(error_scale: float, tolerance: float) -> int:
    if error_scale <= 0.0:
        return 1
    n = math.ceil(math.sqrt(error_scale / tolerance))
    return max(1, min(MAX_PIECES, n))


def cubic_pieces(p0, p1, p2, p3, tolerance: float) -> int:
    """Number of uniform pieces keeping a cubic within ``tolerance`` of its polyline."""
    p0, p1, p2, p3 = (np.asarray(p, dtype=np.float64) for p in (p0, p1, p2, p3))
    d = max(
        float(np.linalg.norm(p0 - 2 * p1 + p2)),
        float(np.linalg.norm(p1 - 2 * p2 + p3)),
    )
    return _pieces(0.75 * d, tolerance)


def quadratic_pieces(p0, p1, p2, tolerance: float) -> int:
    """Number of uniform pieces keeping a quadratic within ``tolerance`` of its polyline."""
    p0, p1, p2 = (np.asarray(p, dtype=np.float64) for p in (p0, p1, p2))
    d = float(np.linalg.norm(p0 - 2 * p1 + p2))
    return _pieces(0.25 * d, tolerance)


def cubic_points(p0, p1, p2, p3, t: NDArray[np.float64]) -> NDArray[np.float64]:
    """Evaluate a cubic Bézier at parameters ``t`` → Nx2."""
    t = np.asarray(t, dtype=np.float64)[:, None]
    mt = 1.0 - t
    return (
        mt**3 * np.asarray(p0, dtype=np.float64)
        + 3 * mt**2 * t * np.asarray(p1, dtype=np.float64)
        + 3 * mt * t**2 * np.asarray(p2, dtype=np.float64)
        + t**3 * np.asarray(p3, dtype=np.float64)
    )


def quadratic_points(p0, p1, p2, t: NDArray[np.float64]) -> NDArray[np.float64]:
    """Evaluate a quadratic Bézier at parameters ``t`` → Nx2."""
    t = np.asarray(t, dtype=np.float64)[:, None]
    mt = 1.0 - t
    return (
        mt**2 * np.asarray(p0, dtype=np.float64)
        + 2 * mt * t * np.asarray(p1, dtype=np.float64)
        + t**2 * np.asarray(p2, dtype=np.float64)
    )


def flatten_cubic(p0, p1, p2, p3, tolerance: float) -> NDArray[np.float64]:
    """Polyline for a cubic, excluding the start point (it belongs to the previous segment)."""
    n = cubic_pieces(p0, p1, p2, p3, tolerance)
    t = np.linspace(0.0, 1.0, n + 1)[1:]
    return cubic_points(p0, p1, p2, p3, t)


def flatten_quadratic(p0, p1, p2, tolerance: float) -> NDArray[np.float64]:
    """Polyline for a quadratic, excluding the start point."""
    n = quadratic_pieces(p0, p1, p2, tolerance)
    t = np.linspace(0.0, 1.0, n + 1)[1:]
    return quadratic_points(p0, p1, p2, t)


def catmull_rom_controls(
    points: NDArray[np.float64],
    tension: float = 0.5,
) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """Cubic control points for a closed Catmull-Rom spline through ``points``.

    Segment i runs from points[i] to points[i + 1] (wrapping); returns the
    (cp1, cp2) arrays, each Nx2.
    """
    prev_pts = np.roll(points, 1, axis=0)
    next_pts = np.roll(points, -1, axis=0)
    next2_pts = np.roll(points, -2, axis=0)
    cp1 = points + (next_pts - prev_pts) * tension / 3.0
    cp2 = next_pts - (next2_pts - points) * tension / 3.0
    return cp1, cp2
