from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from adaptive_images.domain.entities.breakpoints import BreakpointSet

DEFAULT_BROWSER_CACHE = 60 * 60 * 24 * 7  # 7 days


@dataclass(frozen=True)
class AdaptiveImageConfig:
    """Immutable settings handed to every core component at construction."""

    breakpoints: BreakpointSet
    source_root: Path
    cache_root: Path
    jpg_quality: int = 80  # 0-100
    watch_cache: bool = True  # compare cache and source mtimes on every hit
    browser_cache: int = DEFAULT_BROWSER_CACHE  # seconds
    mobile_first: bool = True  # without a preference, non-desktop clients get the smallest tier
    cookie_name: str = "resolution"
    default_raw: bool = False  # serve the source when the client is wider than every tier

    def __post_init__(self) -> None:
        if not 0 <= self.jpg_quality <= 100:
            raise ValueError(f"jpg_quality must be within 0-100, got {self.jpg_quality}")
        if self.browser_cache < 0:
            raise ValueError("browser_cache must be >= 0")
        object.__setattr__(self, "source_root", Path(self.source_root))
        object.__setattr__(self, "cache_root", Path(self.cache_root))
