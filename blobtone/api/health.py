"""Health check endpoint."""

from __future__ import annotations

from fastapi import APIRouter

from blobtone import __version__
from blobtone.dependencies import get_compositor
from blobtone.models.responses import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse(
        status="ok",
        version=__version__,
        presets_available=len(get_compositor().presets),
    )
