"""Conversion and server configuration."""
from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, Field


def _env(name: str) -> str | None:
    value = os.environ.get(name)
    if value is None or value.strip() == "":
        return None
    return value.strip()


class ConversionConfig(BaseModel):
    """Main conversion configuration."""

    # Limits
    timeout_seconds: float | None = 120
    max_file_size_mb: int = 100

    # Workspace handling
    temp_dir: Path | None = None
    workspace_prefix: str = "convert-"

    # Performance
    max_workers: int = 4

    # Providers
    ffmpeg_binary: str = "ffmpeg"
    disabled_strategies: list[str] = Field(default_factory=list)

    @classmethod
    def from_env(cls) -> "ConversionConfig":
        """Build a config from ``ANYCONVERT_*`` environment variables.

        ``ANYCONVERT_TIMEOUT_SECONDS=0`` disables the per-request timeout.
        """
        values: dict[str, object] = {}

        timeout = _env("ANYCONVERT_TIMEOUT_SECONDS")
        if timeout is not None:
            seconds = float(timeout)
            values["timeout_seconds"] = seconds if seconds > 0 else None

        max_size = _env("ANYCONVERT_MAX_FILE_SIZE_MB")
        if max_size is not None:
            values["max_file_size_mb"] = int(max_size)

        temp_dir = _env("ANYCONVERT_TEMP_DIR")
        if temp_dir is not None:
            values["temp_dir"] = Path(temp_dir)

        workers = _env("ANYCONVERT_MAX_WORKERS")
        if workers is not None:
            values["max_workers"] = int(workers)

        ffmpeg_binary = _env("ANYCONVERT_FFMPEG_BINARY")
        if ffmpeg_binary is not None:
            values["ffmpeg_binary"] = ffmpeg_binary

        return cls(**values)

    @property
    def max_file_size_bytes(self) -> int:
        return self.max_file_size_mb * 1024 * 1024


class ServerConfig(BaseModel):
    """HTTP server settings."""

    cors_origin: str = "*"
    port: int = 3001
    conversion: ConversionConfig = Field(default_factory=ConversionConfig)

    @classmethod
    def from_env(cls) -> "ServerConfig":
        return cls(
            cors_origin=_env("CORS_ORIGIN") or "*",
            port=int(_env("PORT") or 3001),
            conversion=ConversionConfig.from_env(),
        )
