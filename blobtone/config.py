"""Application configuration from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings

from blobtone.engine.config import CompositorConfig


class Settings(BaseSettings):
    blobtone_env: str = "development"
    blobtone_log_level: str = "info"

    # Server
    blobtone_host: str = "127.0.0.1"
    blobtone_port: int = 8000

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Scene generation
    blobtone_layer_count: int = 5
    blobtone_auto_refresh: bool = False
    blobtone_refresh_interval_ms: int = 5000
    blobtone_preset_selection: str = "round_robin"
    # Fixed seed for reproducible scenes; unset = fresh entropy
    blobtone_seed: int | None = None
    blobtone_flatten_tolerance: float = 0.25

    # Render size for /api/scene.svg and /api/scene.png
    blobtone_render_width: int = 1200
    blobtone_render_height: int = 800

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    def compositor_config(self) -> CompositorConfig:
        return CompositorConfig(
            layer_count=self.blobtone_layer_count,
            auto_refresh=self.blobtone_auto_refresh,
            refresh_interval_ms=self.blobtone_refresh_interval_ms,
            preset_selection=self.blobtone_preset_selection,
            flatten_tolerance=self.blobtone_flatten_tolerance,
        )


settings = Settings()
