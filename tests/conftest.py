"""Shared test fixtures."""

from __future__ import annotations

import numpy as np
import pytest

from blobtone.engine.path import BoundaryPath
from blobtone.engine.types import HalftoneParams, ShapeParams


# Sample path data

SQUARE_D = "M 10 10 L 90 10 L 90 90 L 10 90 Z"

# Circle of radius 40 centered at (50, 50), as two arcs
CIRCLE_D = "M 10 50 A 40 40 0 1 0 90 50 A 40 40 0 1 0 10 50 Z"

# Outer square with a same-direction inner square (a filled hole under evenodd only)
NESTED_SQUARES_D = "M 0 0 L 100 0 L 100 100 L 0 100 Z M 25 25 L 75 25 L 75 75 L 25 75 Z"

# Outer square with an opposite-direction inner square (a hole under both rules)
DONUT_D = "M 0 0 L 100 0 L 100 100 L 0 100 Z M 25 25 L 25 75 L 75 75 L 75 25 Z"

CUBIC_D = "M 0 50 C 0 0 100 0 100 50 C 100 100 0 100 0 50 Z"

SEED = 1234


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(SEED)


@pytest.fixture
def square_path() -> BoundaryPath:
    return BoundaryPath.from_svg_d(SQUARE_D)


@pytest.fixture
def circle_path() -> BoundaryPath:
    return BoundaryPath.from_svg_d(CIRCLE_D)


@pytest.fixture
def shape_params() -> ShapeParams:
    return ShapeParams(width=400, height=300, point_count=8, randomness=0.5)


@pytest.fixture
def halftone_params() -> HalftoneParams:
    return HalftoneParams(grid_spacing=5.0, max_dot_radius=3.0)
