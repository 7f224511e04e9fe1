"""
Application settings using Pydantic.

Settings are loaded from environment variables with .env file support.
"""

from functools import lru_cache
from typing import Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RenderSettings(BaseModel):
    """Torus, mask and quantizer settings."""

    label: str = "stvn.wang"
    ramp: str = "NNN@O$0A869#452I3=7+1/:-.` "

    # Brightness levels
    background: float = 242.0
    outside_glyph: float = 250.0

    pointer_smoothing: float = Field(default=0.045, gt=0.0, le=1.0)
    max_frame_delta_ms: float = 34.0


class ExplosionSettings(BaseModel):
    """Particle disintegration settings."""

    duration_ms: float = Field(default=1450.0, gt=0.0)
    max_particles: int = Field(default=2200, ge=1)

    # Page handoff after activation (host side)
    handoff_delay_ms: float = 1450.0

    seed: Optional[int] = None


class WindowSettings(BaseModel):
    """Pygame host window settings."""

    width: int = 1280
    height: int = 720
    fps: int = 60
    fullscreen: bool = False
    title: str = "ascii torus"

    bg_color: tuple[int, int, int] = (255, 255, 255)
    fg_color: tuple[int, int, int] = (17, 17, 17)


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="ASCIITORUS_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    debug: bool = False

    # Nested settings
    render: RenderSettings = Field(default_factory=RenderSettings)
    explosion: ExplosionSettings = Field(default_factory=ExplosionSettings)
    window: WindowSettings = Field(default_factory=WindowSettings)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
