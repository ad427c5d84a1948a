"""BoundaryPath — tagged segment sequence with absolute coordinates.

Segments:  MoveTo · LineTo · CubicCurveTo · QuadraticCurveTo · ClosePath

Paths are immutable. SVG path data is the interchange format: ``to_svg_d``
writes it, ``from_svg_d`` reads it through svgpathtools (shorthand, relative and
arc commands are resolved there; arcs are sampled into line segments).
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Union

import numpy as np
from numpy.typing import NDArray
from shapely.geometry import Polygon
from svgpathtools import Arc, CubicBezier, Line, QuadraticBezier, parse_path

from blobtone.engine.errors import MalformedBoundary
from blobtone.utils.bezier import flatten_cubic, flatten_quadratic
from blobtone.utils.geometry import bbox as points_bbox

logger = logging.getLogger(__name__)

# Flattening tolerance in length units (max chord deviation).
DEFAULT_TOLERANCE = 0.25

# Line pieces per elliptical arc when importing SVG path data.
_ARC_SAMPLES = 24

# Vertices closer than this on both axes are merged when flattening.
_JOIN_EPS = 1e-9


@dataclass(frozen=True)
class MoveTo:
    x: float
    y: float


@dataclass(frozen=True)
class LineTo:
    x: float
    y: float


@dataclass(frozen=True)
class CubicCurveTo:
    x1: float
    y1: float
    x2: float
    y2: float
    x: float
    y: float


@dataclass(frozen=True)
class QuadraticCurveTo:
    x1: float
    y1: float
    x: float
    y: float


@dataclass(frozen=True)
class ClosePath:
    pass


Segment = Union[MoveTo, LineTo, CubicCurveTo, QuadraticCurveTo, ClosePath]

_SEGMENT_TYPES = (MoveTo, LineTo, CubicCurveTo, QuadraticCurveTo, ClosePath)


def _fmt(v: float) -> str:
    return f"{v:.3f}".rstrip("0").rstrip(".")


@dataclass(frozen=True)
class BoundaryPath:
    """A closed (by construction) region boundary."""

    segments: tuple[Segment, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "segments", tuple(self.segments))

    def __len__(self) -> int:
        return len(self.segments)

    def __iter__(self):
        return iter(self.segments)

    @property
    def is_closed(self) -> bool:
        return bool(self.segments) and isinstance(self.segments[-1], ClosePath)

    @property
    def curve_count(self) -> int:
        return sum(1 for s in self.segments if isinstance(s, (CubicCurveTo, QuadraticCurveTo)))

    # ── SVG path data ──

    def to_svg_d(self) -> str:
        parts: list[str] = []
        for seg in self.segments:
            if isinstance(seg, MoveTo):
                parts.append(f"M {_fmt(seg.x)} {_fmt(seg.y)}")
            elif isinstance(seg, LineTo):
                parts.append(f"L {_fmt(seg.x)} {_fmt(seg.y)}")
            elif isinstance(seg, CubicCurveTo):
                parts.append(
                    f"C {_fmt(seg.x1)} {_fmt(seg.y1)} {_fmt(seg.x2)} {_fmt(seg.y2)}"
                    f" {_fmt(seg.x)} {_fmt(seg.y)}"
                )
            elif isinstance(seg, QuadraticCurveTo):
                parts.append(f"Q {_fmt(seg.x1)} {_fmt(seg.y1)} {_fmt(seg.x)} {_fmt(seg.y)}")
            elif isinstance(seg, ClosePath):
                parts.append("Z")
        return " ".join(parts)

    @classmethod
    def from_svg_d(cls, d: str) -> "BoundaryPath":
        """Parse SVG path data. Raises MalformedBoundary on anything unusable."""
        if not isinstance(d, str) or not d.strip():
            raise MalformedBoundary("empty path data")
        try:
            parsed = parse_path(d)
        except Exception as e:
            raise MalformedBoundary(f"unparsable path data: {e}") from e
        if len(parsed) == 0:
            raise MalformedBoundary("path data contains no drawable segments")

        segments: list[Segment] = []
        for sub in parsed.continuous_subpaths():
            if len(sub) == 0:
                continue
            start = sub[0].start
            segments.append(MoveTo(start.real, start.imag))
            for seg in sub:
                segments.extend(_convert_segment(seg))
            if sub.isclosed():
                segments.append(ClosePath())
        logger.debug("Parsed path data: %d segments", len(segments))
        return cls(tuple(segments))

    # ── Geometry ──

    def flatten(self, tolerance: float = DEFAULT_TOLERANCE) -> list[NDArray[np.float64]]:
        """Flatten into polygon rings (one per subpath, implicitly closed).

        Raises MalformedBoundary for unknown segments, drawing before MoveTo,
        non-finite coordinates or a path with no ring of at least 3 vertices.
        """
        if not (tolerance > 0):
            raise MalformedBoundary(f"flatten tolerance must be positive, got {tolerance}")
        if not self.segments:
            raise MalformedBoundary("path has no segments")

        rings: list[NDArray[np.float64]] = []
        current: list[NDArray[np.float64]] | None = None
        start: NDArray[np.float64] | None = None
        pen: NDArray[np.float64] | None = None

        def _finish() -> None:
            if current:
                rings.append(np.vstack(current))

        for i, seg in enumerate(self.segments):
            if not isinstance(seg, _SEGMENT_TYPES):
                raise MalformedBoundary(f"segment {i}: unknown segment type {type(seg).__name__}")
            coords = [getattr(seg, f) for f in seg.__dataclass_fields__]
            if not all(isinstance(c, (int, float)) and math.isfinite(c) for c in coords):
                raise MalformedBoundary(f"segment {i}: non-finite coordinate in {seg!r}")

            if isinstance(seg, MoveTo):
                _finish()
                pen = np.array([seg.x, seg.y], dtype=np.float64)
                start = pen
                current = [pen[None, :]]
                continue
            if pen is None or current is None:
                raise MalformedBoundary(f"segment {i}: {type(seg).__name__} before MoveTo")

            if isinstance(seg, LineTo):
                end = np.array([seg.x, seg.y], dtype=np.float64)
                current.append(end[None, :])
            elif isinstance(seg, CubicCurveTo):
                end = np.array([seg.x, seg.y], dtype=np.float64)
                current.append(flatten_cubic(pen, (seg.x1, seg.y1), (seg.x2, seg.y2), end, tolerance))
            elif isinstance(seg, QuadraticCurveTo):
                end = np.array([seg.x, seg.y], dtype=np.float64)
                current.append(flatten_quadratic(pen, (seg.x1, seg.y1), end, tolerance))
            else:
                # ClosePath: pen returns to the subpath start
                end = start
            pen = end
        _finish()

        rings = [_dedupe(r) for r in rings]
        rings = [r for r in rings if len(r) >= 3]
        if not rings:
            raise MalformedBoundary("path does not enclose any region (fewer than 3 vertices)")
        return rings

    def bbox(self, tolerance: float = DEFAULT_TOLERANCE) -> tuple[float, float, float, float]:
        """(xmin, ymin, xmax, ymax) of the flattened outline."""
        return points_bbox(np.vstack(self.flatten(tolerance)))

    def polygon(self, tolerance: float = DEFAULT_TOLERANCE) -> Polygon:
        """Shapely view of the outer (first) ring, inner rings as holes."""
        rings = self.flatten(tolerance)
        return Polygon(rings[0], holes=rings[1:])

    def is_simple(self, tolerance: float = DEFAULT_TOLERANCE) -> bool:
        """True when the outline does not self-intersect."""
        return bool(self.polygon(tolerance).exterior.is_simple)


def _dedupe(ring: NDArray[np.float64]) -> NDArray[np.float64]:
    """Drop consecutive duplicates and an explicit closing vertex."""
    if len(ring) == 0:
        return ring
    keep = np.ones(len(ring), dtype=bool)
    keep[1:] = np.any(np.abs(np.diff(ring, axis=0)) > _JOIN_EPS, axis=1)
    ring = ring[keep]
    if len(ring) > 1 and np.all(np.abs(ring[0] - ring[-1]) <= _JOIN_EPS):
        ring = ring[:-1]
    return ring


def _convert_segment(seg) -> list[Segment]:
    """svgpathtools segment → engine segments."""
    if isinstance(seg, Line):
        return [LineTo(seg.end.real, seg.end.imag)]
    if isinstance(seg, CubicBezier):
        return [
            CubicCurveTo(
                seg.control1.real, seg.control1.imag,
                seg.control2.real, seg.control2.imag,
                seg.end.real, seg.end.imag,
            )
        ]
    if isinstance(seg, QuadraticBezier):
        return [QuadraticCurveTo(seg.control.real, seg.control.imag, seg.end.real, seg.end.imag)]
    if isinstance(seg, Arc):
        out: list[Segment] = []
        for t in np.linspace(0.0, 1.0, _ARC_SAMPLES + 1)[1:]:
            pt = seg.point(t)
            out.append(LineTo(pt.real, pt.imag))
        return out
    raise MalformedBoundary(f"unsupported SVG segment: {type(seg).__name__}")
