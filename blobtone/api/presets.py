"""GET /api/presets — shape templates used for scene layers."""

from __future__ import annotations

from fastapi import APIRouter

from blobtone.dependencies import get_compositor
from blobtone.models.responses import PresetModel

router = APIRouter()


@router.get("/presets", response_model=list[PresetModel])
async def list_presets() -> list[PresetModel]:
    return [PresetModel.from_preset(p) for p in get_compositor().presets.list()]
