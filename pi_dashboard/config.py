from typing import Optional
from pydantic import BaseModel, Field
import os
from functools import lru_cache

_FALSY = {"0", "false", "no", "off"}


class Settings(BaseModel):
    # History / sampler
    history_db_path: str = Field(
        default="metrics.db",
        description="Path of the SQLite file holding the snapshot history",
    )
    sample_interval_seconds: float = Field(
        default=60.0,
        gt=0,
        description="Seconds between two background sampler cycles",
    )
    sampler_enabled: bool = Field(
        default=True,
        description="Start the background sampler together with the app",
    )
    history_default_limit: int = Field(
        default=100,
        ge=1,
        description="Number of rows returned by /history when no limit is given",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Root level of the pi_dashboard logger")
    log_format: str = Field(
        default="text",
        pattern="^(text|json)$",
        description="'text' for human readable lines, 'json' for one JSON object per line",
    )

    # Server
    host: str = Field(default="0.0.0.0", description="Bind address for the HTTP server")
    port: int = Field(default=8080, ge=1, le=65535, description="Bind port for the HTTP server")

    @classmethod
    def from_env(cls) -> "Settings":
        raw_enabled: Optional[str] = os.getenv("SAMPLER_ENABLED")
        sampler_enabled = True
        if raw_enabled is not None:
            sampler_enabled = raw_enabled.strip().lower() not in _FALSY

        return cls(
            history_db_path=os.getenv("HISTORY_DB_PATH", "metrics.db"),
            sample_interval_seconds=float(os.getenv("SAMPLE_INTERVAL_SECONDS", "60")),
            sampler_enabled=sampler_enabled,
            history_default_limit=int(os.getenv("HISTORY_DEFAULT_LIMIT", "100")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            log_format=os.getenv("LOG_FORMAT", "text").lower(),
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "8080")),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()
