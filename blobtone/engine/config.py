"""Compositor configuration — layer count, refresh timer and randomization bands."""

from __future__ import annotations

import math
from dataclasses import dataclass

from blobtone.engine.errors import InvalidParameters
from blobtone.engine.path import DEFAULT_TOLERANCE
from blobtone.engine.types import BLEND_MODES
from blobtone.utils.color import is_color

Range = tuple[float, float]

PRESET_SELECTIONS = ("round_robin", "random")


@dataclass
class CompositorConfig:
    """Controls how many layers are built and how each one is randomized."""

    layer_count: int = 5
    auto_refresh: bool = False
    refresh_interval_ms: int = 5000

    preset_selection: str = "round_robin"

    # Width/height perturbation: preset size + (u - 0.5) * size_jitter
    size_jitter: float = 150.0
    randomness_range: Range = (0.5, 0.95)

    # Halftone sampling
    grid_spacing_range: Range = (5.0, 12.0)
    max_dot_radius_range: Range = (3.0, 8.0)
    dot_colors: tuple[str, ...] = ("#000000",)
    jitter: float = 1.0
    visibility_threshold: float = 0.5
    flatten_tolerance: float = DEFAULT_TOLERANCE

    # Placement, in percent of the container / degrees
    position_range: Range = (-10.0, 70.0)
    opacity_range: Range = (0.3, 0.7)
    rotation_range: Range = (-30.0, 30.0)
    scale_range: Range = (0.6, 1.1)
    blend_modes: tuple[str, ...] = ("multiply",)

    def validate(self) -> "CompositorConfig":
        if isinstance(self.layer_count, bool) or not isinstance(self.layer_count, int):
            raise InvalidParameters(f"layer_count must be an integer, got {self.layer_count!r}")
        if self.layer_count < 0:
            raise InvalidParameters(f"layer_count must be >= 0, got {self.layer_count}")
        if not isinstance(self.refresh_interval_ms, int) or self.refresh_interval_ms <= 0:
            raise InvalidParameters(
                f"refresh_interval_ms must be a positive integer, got {self.refresh_interval_ms!r}"
            )
        if self.preset_selection not in PRESET_SELECTIONS:
            raise InvalidParameters(
                f"preset_selection must be one of {PRESET_SELECTIONS}, got {self.preset_selection!r}"
            )
        for name in (
            "randomness_range",
            "grid_spacing_range",
            "max_dot_radius_range",
            "position_range",
            "opacity_range",
            "rotation_range",
            "scale_range",
        ):
            lo, hi = getattr(self, name)
            if not (math.isfinite(lo) and math.isfinite(hi)) or lo > hi:
                raise InvalidParameters(f"{name} must be an ordered finite (low, high), got {(lo, hi)}")
        if self.randomness_range[0] < 0 or self.randomness_range[1] > 1:
            raise InvalidParameters(f"randomness_range must lie in [0, 1], got {self.randomness_range}")
        if self.opacity_range[0] < 0 or self.opacity_range[1] > 1:
            raise InvalidParameters(f"opacity_range must lie in [0, 1], got {self.opacity_range}")
        if self.size_jitter < 0:
            raise InvalidParameters(f"size_jitter must be >= 0, got {self.size_jitter}")
        if not self.dot_colors or not all(is_color(c) for c in self.dot_colors):
            raise InvalidParameters(f"dot_colors must be a non-empty list of colors, got {self.dot_colors!r}")
        if not self.blend_modes or any(m not in BLEND_MODES for m in self.blend_modes):
            raise InvalidParameters(f"blend_modes must be drawn from {BLEND_MODES}, got {self.blend_modes!r}")
        return self
