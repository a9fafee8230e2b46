"""Application configuration and settings management."""

from pathlib import Path
from typing import Any, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="BLOCKROUTE_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Block Route Planner API"
    api_prefix: str = "/api"
    log_level: str = Field(default="INFO", description="Root logging level applied by create_app().")
    data_root: Path = Field(default=Path("data"), description="Root directory for static data files.")
    blocks_file: Path = Field(
        default=Path("data/mapa-carnaval.json"),
        description="Block schedule dataset (JSON array or CSV).",
    )
    default_min_gap_hours: int = Field(
        default=4,
        ge=0,
        description="Minimum gap between consecutive stops when the request does not set one.",
    )
    max_routes: int = Field(default=5, ge=1, description="Number of ranked routes returned per request.")
    max_pairs_considered: int = Field(
        default=100,
        ge=1,
        description="Early-exit cap on (B, C) pairs scored for one start block.",
    )
    distance_cache_max_entries: Optional[int] = Field(
        default=50_000,
        ge=1,
        description="Distance cache bound; the cache resets when it would grow past it. None disables the bound.",
    )
    worker_max_workers: int = Field(default=2, ge=1)
    worker_timeout_seconds: Optional[float] = Field(default=30.0, gt=0.0)
    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:5173",
            "http://127.0.0.1:5173",
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    @field_validator("data_root", "blocks_file", mode="before")
    @classmethod
    def _expand_path(cls, value: Any) -> Path:
        path_value = value if isinstance(value, Path) else Path(str(value))
        return path_value.expanduser().resolve()

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()


settings = Settings()
