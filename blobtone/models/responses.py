"""API response models."""

from __future__ import annotations

from pydantic import BaseModel, Field

from blobtone.engine.path import BoundaryPath
from blobtone.engine.presets import Preset
from blobtone.engine.types import DotField, Layer, Scene


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    presets_available: int = 0


class PresetModel(BaseModel):
    name: str
    width: float
    height: float
    point_count: int
    randomness: float

    @classmethod
    def from_preset(cls, preset: Preset) -> PresetModel:
        s = preset.shape
        return cls(
            name=preset.name,
            width=s.width,
            height=s.height,
            point_count=s.point_count,
            randomness=s.randomness,
        )


class BlobResponse(BaseModel):
    d: str
    bbox: tuple[float, float, float, float]
    segment_count: int = 0

    @classmethod
    def from_path(cls, path: BoundaryPath) -> BlobResponse:
        return cls(d=path.to_svg_d(), bbox=path.bbox(), segment_count=len(path))


class DotFieldResponse(BaseModel):
    width: float
    height: float
    dots: list[tuple[float, float, float]] = Field(
        default_factory=list,
        description="(x, y, radius) in grid order",
    )
    dot_count: int = 0
    processing_time_ms: float = 0.0

    @classmethod
    def from_field(cls, field: DotField, elapsed_ms: float = 0.0) -> DotFieldResponse:
        w, h = field.box
        return cls(
            width=w,
            height=h,
            dots=[(d.x, d.y, d.radius) for d in field],
            dot_count=len(field),
            processing_time_ms=round(elapsed_ms, 1),
        )


class LayerModel(BaseModel):
    id: str
    width: float
    height: float
    d: str
    dot_count: int
    dot_color: str
    position_pct: tuple[float, float]
    rotation_deg: float
    scale: float
    opacity: float
    blend_mode: str
    z_index: int

    @classmethod
    def from_layer(cls, layer: Layer) -> LayerModel:
        w, h = layer.size
        t = layer.transform
        return cls(
            id=layer.id,
            width=w,
            height=h,
            d=layer.boundary_path.to_svg_d(),
            dot_count=len(layer.dot_field),
            dot_color=layer.halftone_params.dot_color,
            position_pct=t.position_pct,
            rotation_deg=t.rotation_deg,
            scale=t.scale,
            opacity=t.opacity,
            blend_mode=t.blend_mode,
            z_index=t.z_index,
        )


class SceneResponse(BaseModel):
    generation: int = 0
    requested: int = 0
    layers: list[LayerModel] = Field(default_factory=list)
    errors: dict[str, str] = Field(default_factory=dict)
    retained: bool = Field(
        default=False,
        description="True when the last regeneration produced nothing and the previous scene was kept",
    )

    @classmethod
    def from_scene(cls, scene: Scene, retained: bool = False) -> SceneResponse:
        return cls(
            generation=scene.generation,
            requested=scene.requested,
            layers=[LayerModel.from_layer(layer) for layer in scene.ordered()],
            errors=dict(scene.errors),
            retained=retained,
        )
