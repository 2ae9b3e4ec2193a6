"""Application configuration."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from .controller import MIN_FPS


class Settings(BaseSettings):
    """Application settings, overridable through CFRAMEVIEW_* environment variables."""

    # Playback defaults
    DIRECTORY: Path = Path(".")
    FPS: int = 24
    ONCE: bool = False

    # Seconds to wait for input while paused or finished
    IDLE_POLL_INTERVAL: float = Field(default=0.25, gt=0)

    # Logging
    LOG_FILE: Path | None = None
    LOG_LEVEL: str = "INFO"

    model_config = {"env_prefix": "CFRAMEVIEW_"}

    @field_validator("FPS")
    @classmethod
    def _saturate_fps(cls, v: int) -> int:
        """Clamp fps to the minimum like AnimationController.set_fps."""
        return max(MIN_FPS, v)
