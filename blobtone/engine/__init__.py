"""Blob-halftone graphics engine."""

from blobtone.engine.compositor import LayerCompositor
from blobtone.engine.config import CompositorConfig
from blobtone.engine.errors import (
    BlobtoneError,
    InvalidParameters,
    LayerGenerationFailure,
    MalformedBoundary,
)
from blobtone.engine.path import BoundaryPath
from blobtone.engine.presets import Preset, PresetProvider
from blobtone.engine.rasterizer import rasterize, rasterize_or_empty
from blobtone.engine.shape_generator import generate_blob
from blobtone.engine.types import (
    Dot,
    DotField,
    HalftoneParams,
    Layer,
    LayerTransform,
    Scene,
    ShapeParams,
)

__all__ = [
    "BlobtoneError",
    "BoundaryPath",
    "CompositorConfig",
    "Dot",
    "DotField",
    "HalftoneParams",
    "InvalidParameters",
    "Layer",
    "LayerCompositor",
    "LayerGenerationFailure",
    "LayerTransform",
    "MalformedBoundary",
    "Preset",
    "PresetProvider",
    "Scene",
    "ShapeParams",
    "generate_blob",
    "rasterize",
    "rasterize_or_empty",
]
