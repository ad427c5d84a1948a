"""Engine data model — immutable values flowing generator → rasterizer → compositor."""

from __future__ import annotations

import enum
import math
import numbers
from dataclasses import dataclass, field
from typing import Mapping

import numpy as np
from numpy.typing import NDArray

from blobtone.engine.errors import InvalidParameters
from blobtone.engine.path import BoundaryPath
from blobtone.utils.color import TRANSPARENT, is_color
from blobtone.utils.geometry import FILL_RULES

# Mix-blend modes a renderer is expected to understand.
BLEND_MODES = ("normal", "multiply", "screen", "overlay", "soft-light", "color-dodge")


def _positive(name: str, value: float) -> None:
    if not isinstance(value, (int, float)) or not math.isfinite(value) or value <= 0:
        raise InvalidParameters(f"{name} must be a positive finite number, got {value!r}")


@dataclass(frozen=True)
class ShapeParams:
    """Generative envelope of one blob."""

    width: float
    height: float
    point_count: int = 8
    randomness: float = 0.3
    # Anchor ellipse radii as a fraction of width / height
    radius_ratio: float = 0.35
    center_x: float | None = None
    center_y: float | None = None
    # Catmull-Rom tension; 0.5 gives the classic (p2 - p0) / 2 tangents
    tension: float = 0.5

    @property
    def center(self) -> tuple[float, float]:
        cx = self.width / 2 if self.center_x is None else self.center_x
        cy = self.height / 2 if self.center_y is None else self.center_y
        return (cx, cy)

    def validate(self) -> "ShapeParams":
        _positive("width", self.width)
        _positive("height", self.height)
        if isinstance(self.point_count, bool) or not isinstance(self.point_count, numbers.Integral):
            raise InvalidParameters(f"point_count must be an integer, got {self.point_count!r}")
        if self.point_count < 3:
            raise InvalidParameters(
                f"point_count must be >= 3 to describe a closed region, got {self.point_count}"
            )
        if not isinstance(self.randomness, (int, float)) or not 0.0 <= self.randomness <= 1.0:
            raise InvalidParameters(f"randomness must be in [0, 1], got {self.randomness!r}")
        _positive("radius_ratio", self.radius_ratio)
        if not isinstance(self.tension, (int, float)) or not math.isfinite(self.tension):
            raise InvalidParameters(f"tension must be finite, got {self.tension!r}")
        for name in ("center_x", "center_y"):
            v = getattr(self, name)
            if v is not None and (not isinstance(v, (int, float)) or not math.isfinite(v)):
                raise InvalidParameters(f"{name} must be finite, got {v!r}")
        return self


@dataclass(frozen=True)
class HalftoneParams:
    """Rasterization density and appearance."""

    grid_spacing: float = 10.0
    max_dot_radius: float = 5.0
    dot_color: str = "#000000"
    background_color: str = TRANSPARENT
    # Max absolute offset applied to each grid point, per axis
    jitter: float = 1.0
    # Dots at or below this radius are dropped
    visibility_threshold: float = 0.5
    fill_rule: str = "nonzero"

    def validate(self) -> "HalftoneParams":
        _positive("grid_spacing", self.grid_spacing)
        _positive("max_dot_radius", self.max_dot_radius)
        if not is_color(self.dot_color):
            raise InvalidParameters(f"dot_color is not a color: {self.dot_color!r}")
        if not is_color(self.background_color, allow_transparent=True):
            raise InvalidParameters(f"background_color is not a color: {self.background_color!r}")
        for name in ("jitter", "visibility_threshold"):
            v = getattr(self, name)
            if not isinstance(v, (int, float)) or not math.isfinite(v) or v < 0:
                raise InvalidParameters(f"{name} must be a non-negative finite number, got {v!r}")
        if self.fill_rule not in FILL_RULES:
            raise InvalidParameters(f"fill_rule must be one of {FILL_RULES}, got {self.fill_rule!r}")
        return self


@dataclass(frozen=True)
class Dot:
    x: float
    y: float
    radius: float

    @property
    def center(self) -> tuple[float, float]:
        return (self.x, self.y)


@dataclass(frozen=True)
class DotField:
    """Rasterization output. Dots are in grid order (row-major, top-left first)."""

    dots: tuple[Dot, ...]
    params: HalftoneParams
    box: tuple[float, float]

    def __len__(self) -> int:
        return len(self.dots)

    def __iter__(self):
        return iter(self.dots)

    @property
    def is_empty(self) -> bool:
        return not self.dots

    def as_array(self) -> NDArray[np.float64]:
        """Nx3 array of (x, y, radius)."""
        if not self.dots:
            return np.empty((0, 3), dtype=np.float64)
        return np.array([(d.x, d.y, d.radius) for d in self.dots], dtype=np.float64)

    @classmethod
    def empty(cls, params: HalftoneParams, box: tuple[float, float]) -> "DotField":
        return cls(dots=(), params=params, box=box)


@dataclass(frozen=True)
class LayerTransform:
    # Top-left offset in percent of the container (x = left, y = top)
    position_pct: tuple[float, float] = (0.0, 0.0)
    rotation_deg: float = 0.0
    scale: float = 1.0
    opacity: float = 1.0
    blend_mode: str = "multiply"
    z_index: int = 1


@dataclass(frozen=True)
class Layer:
    id: str
    shape_params: ShapeParams
    boundary_path: BoundaryPath
    halftone_params: HalftoneParams
    dot_field: DotField
    transform: LayerTransform

    @property
    def size(self) -> tuple[float, float]:
        return (self.shape_params.width, self.shape_params.height)


@dataclass(frozen=True)
class Scene:
    """Composited scene. Replaced wholesale on every regeneration."""

    layers: tuple[Layer, ...] = ()
    generation: int = 0
    requested: int = 0
    # layer id → failure message for skipped layers
    errors: Mapping[str, str] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.layers)

    def __iter__(self):
        return iter(self.layers)

    @property
    def is_empty(self) -> bool:
        return not self.layers

    def ordered(self) -> list[Layer]:
        """Paint order: sequence order, then explicit z_index (stable)."""
        return sorted(self.layers, key=lambda layer: layer.transform.z_index)


class CompositorState(enum.Enum):
    IDLE = "idle"
    GENERATING = "generating"
    READY = "ready"
