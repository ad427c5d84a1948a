"""POST /api/blob and /api/halftone — single shapes, outside any scene."""

from __future__ import annotations

import time

import numpy as np
from fastapi import APIRouter, HTTPException

from blobtone.dependencies import get_settings
from blobtone.engine.errors import BlobtoneError
from blobtone.engine.path import BoundaryPath
from blobtone.engine.rasterizer import rasterize
from blobtone.engine.shape_generator import generate_blob
from blobtone.models.requests import BlobRequest, HalftoneRequest
from blobtone.models.responses import BlobResponse, DotFieldResponse

router = APIRouter()


@router.post("/blob", response_model=BlobResponse)
def create_blob(req: BlobRequest) -> BlobResponse:
    rng = np.random.default_rng(req.seed)
    try:
        path = generate_blob(req.shape.to_params(), rng)
    except BlobtoneError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    return BlobResponse.from_path(path)


@router.post("/halftone", response_model=DotFieldResponse)
def create_halftone(req: HalftoneRequest) -> DotFieldResponse:
    if (req.d is None) == (req.shape is None):
        raise HTTPException(status_code=422, detail="provide exactly one of 'd' or 'shape'")

    start = time.perf_counter()
    rng = np.random.default_rng(req.seed)
    try:
        if req.shape is not None:
            shape = req.shape.to_params()
            path = generate_blob(shape, rng)
            width = req.width if req.width is not None else shape.width
            height = req.height if req.height is not None else shape.height
        else:
            if req.width is None or req.height is None:
                raise HTTPException(
                    status_code=422,
                    detail="'width' and 'height' are required with 'd'",
                )
            path = BoundaryPath.from_svg_d(req.d)
            width, height = req.width, req.height

        field = rasterize(
            path,
            (width, height),
            req.halftone.to_params(),
            rng,
            tolerance=get_settings().blobtone_flatten_tolerance,
        )
    except BlobtoneError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e

    return DotFieldResponse.from_field(field, (time.perf_counter() - start) * 1000)
