"""FastAPI app factory."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from blobtone import __version__
from blobtone.config import settings
from blobtone.dependencies import get_compositor

load_dotenv()

logging.basicConfig(
    level=getattr(logging, settings.blobtone_log_level.upper(), logging.INFO),
    format="%(asctime)s %(name)s %(levelname)s %(message)s",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    compositor = get_compositor()
    if compositor.config.auto_refresh:
        compositor.start_auto_refresh()
    try:
        yield
    finally:
        compositor.teardown()


def create_app() -> FastAPI:
    app = FastAPI(
        title="Blobtone",
        description="Layered blob halftone graphics — random blobs filled with halftone dots",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from blobtone.api.router import api_router

    app.include_router(api_router)

    logger.debug("App created (env=%s)", settings.blobtone_env)
    return app


app = create_app()


def run() -> None:
    """Serve the app with uvicorn (``blobtone-serve``)."""
    import uvicorn

    uvicorn.run(
        "blobtone.main:app",
        host=settings.blobtone_host,
        port=settings.blobtone_port,
        log_level=settings.blobtone_log_level.lower(),
    )
