"""API request models."""

from __future__ import annotations

from pydantic import BaseModel, Field

from blobtone.engine.types import HalftoneParams, ShapeParams


class ShapeParamsModel(BaseModel):
    width: float = Field(..., description="Bounding box width")
    height: float = Field(..., description="Bounding box height")
    point_count: int = Field(default=8, description="Number of anchor points (>= 3)")
    randomness: float = Field(default=0.3, description="Radial perturbation in [0, 1]")
    radius_ratio: float = Field(default=0.35, description="Anchor radius as a fraction of the box side")
    center_x: float | None = Field(default=None, description="Center x (default: box center)")
    center_y: float | None = Field(default=None, description="Center y (default: box center)")
    tension: float = Field(default=0.5, description="Catmull-Rom tension")

    def to_params(self) -> ShapeParams:
        return ShapeParams(**self.model_dump())


class HalftoneParamsModel(BaseModel):
    grid_spacing: float = Field(default=10.0, description="Distance between grid points")
    max_dot_radius: float = Field(default=5.0, description="Largest dot radius")
    dot_color: str = Field(default="#000000", description="Dot fill color")
    background_color: str = Field(default="transparent", description="Layer background color")
    jitter: float = Field(default=1.0, description="Max positional jitter per axis")
    visibility_threshold: float = Field(default=0.5, description="Dots at or below this radius are dropped")
    fill_rule: str = Field(default="nonzero", description="Inside test: nonzero or evenodd")

    def to_params(self) -> HalftoneParams:
        return HalftoneParams(**self.model_dump())


class BlobRequest(BaseModel):
    shape: ShapeParamsModel
    seed: int | None = Field(default=None, description="RNG seed for a reproducible blob")


class HalftoneRequest(BaseModel):
    d: str | None = Field(default=None, description="SVG path data of the region to fill")
    shape: ShapeParamsModel | None = Field(
        default=None,
        description="Generate a blob instead of supplying path data",
    )
    width: float | None = Field(default=None, description="Raster box width (default: shape width)")
    height: float | None = Field(default=None, description="Raster box height (default: shape height)")
    halftone: HalftoneParamsModel = Field(default_factory=HalftoneParamsModel)
    seed: int | None = Field(default=None, description="RNG seed")


class SceneRequest(BaseModel):
    layer_count: int | None = Field(default=None, description="Layers to generate (default from settings)")
    seed: int | None = Field(default=None, description="RNG seed for a reproducible scene")
