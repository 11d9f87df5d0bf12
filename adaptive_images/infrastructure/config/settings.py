"""Environment-driven settings for the adaptive image service.

Every field can be set through an ``ADAPTIVE_IMAGES_*`` environment variable
or a ``.env`` file, e.g. ``ADAPTIVE_IMAGES_RESOLUTIONS=1382,992,768,480``.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Annotated, Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from adaptive_images.domain.entities.breakpoints import BreakpointSet
from adaptive_images.domain.entities.config import DEFAULT_BROWSER_CACHE, AdaptiveImageConfig


class AdaptiveImageSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="ADAPTIVE_IMAGES_",
        env_file=".env",
        extra="ignore",
        frozen=True,
    )

    # resolution break-points to use (screen widths, in pixels)
    resolutions: Annotated[tuple[int, ...], NoDecode] = (1382, 992, 768, 480)
    # directory the request paths are mapped onto
    source_root: Path = Path(".")
    # where generated images are stored, relative paths live under source_root
    cache_path: Path = Path("ai-cache")
    jpg_quality: int = Field(80, ge=0, le=100)
    watch_cache: bool = True
    browser_cache: int = Field(DEFAULT_BROWSER_CACHE, ge=0)
    mobile_first: bool = True
    cookie_name: str = "resolution"
    default_raw: bool = False
    log_level: str = "INFO"

    @field_validator("resolutions", mode="before")
    @classmethod
    def _split_resolutions(cls, value: Any) -> Any:
        if isinstance(value, str):
            return tuple(int(part) for part in value.split(",") if part.strip())
        return value

    @field_validator("resolutions")
    @classmethod
    def _check_resolutions(cls, value: tuple[int, ...]) -> tuple[int, ...]:
        if not value:
            raise ValueError("at least one resolution break-point is required")
        if any(v <= 0 for v in value):
            raise ValueError("resolution break-points must be positive")
        return value

    @property
    def cache_root(self) -> Path:
        if self.cache_path.is_absolute():
            return self.cache_path
        return self.source_root / self.cache_path

    def to_config(self) -> AdaptiveImageConfig:
        return AdaptiveImageConfig(
            breakpoints=BreakpointSet.of(self.resolutions),
            source_root=self.source_root,
            cache_root=self.cache_root,
            jpg_quality=self.jpg_quality,
            watch_cache=self.watch_cache,
            browser_cache=self.browser_cache,
            mobile_first=self.mobile_first,
            cookie_name=self.cookie_name,
            default_raw=self.default_raw,
        )


@lru_cache
def get_settings() -> AdaptiveImageSettings:
    return AdaptiveImageSettings()
