"""API router mounting the endpoint routers under /api."""

from __future__ import annotations

from fastapi import APIRouter

from blobtone.api import health, presets, scene, shapes

api_router = APIRouter(prefix="/api")

api_router.include_router(health.router)
api_router.include_router(presets.router)
api_router.include_router(shapes.router)
api_router.include_router(scene.router)
