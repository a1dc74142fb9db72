"""Application configuration from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    log_level: str = "info"

    # Stroke width used when a stroked path declares none
    default_stroke_width: float = 1.0

    # Raster backend
    curve_samples: int = 16
    background: str = "white"

    model_config = {"env_prefix": "VECSCENE_", "env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
