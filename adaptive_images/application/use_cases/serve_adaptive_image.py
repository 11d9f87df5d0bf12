from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from adaptive_images.domain.entities.config import AdaptiveImageConfig
from adaptive_images.domain.errors import AdaptiveImageError, SourceNotFound
from adaptive_images.domain.services.client_signal_resolver import ClientSignalResolver
from adaptive_images.infrastructure.cache.disk_cache import DiskCacheStore, logical_parts

logger = logging.getLogger(__name__)

CONTENT_TYPES = {".png": "image/png", ".gif": "image/gif"}


def content_type_for(path: Path | str) -> str:
    return CONTENT_TYPES.get(Path(path).suffix.lower(), "image/jpeg")


class Stage(str, Enum):
    START = "start"
    SIGNAL_RESOLVED = "signal_resolved"
    BREAKPOINT_SELECTED = "breakpoint_selected"
    CACHE_CHECKED = "cache_checked"
    SERVED = "served"
    FAILED = "failed"


@dataclass(frozen=True)
class ImageOutcome:
    """Result handed back to the transport layer for one request."""

    stage: Stage
    path: Path | None = None
    content_type: str = "image/jpeg"
    max_age: int = 0
    resolution: int | None = None
    clear_preference: bool = False
    error: str | None = None
    not_found: bool = False
    failed_after: Stage | None = None  # last stage reached before a failure

    @property
    def ok(self) -> bool:
        return self.stage is Stage.SERVED


@dataclass
class ServeAdaptiveImageUseCase:
    """
    Serve the variant of an image that suits the requesting client.

    Workflow:
    1. Resolve the client signal (stored width preference or device class)
    2. Pick the breakpoint resolution, or decide to serve the source untouched
    3. Check the source exists before any cache work
    4. Look the variant up in the disk cache, regenerating it if missing or stale
    5. Return the path to stream, or a failed outcome carrying the message

    Failures never escape ``execute``; the caller renders them as a diagnostic
    image.
    """

    config: AdaptiveImageConfig
    resolver: ClientSignalResolver
    cache: DiskCacheStore

    def source_path(self, request_path: str) -> Path:
        try:
            parts = logical_parts(request_path)
        except ValueError as exc:
            raise SourceNotFound("Image not found") from exc
        source = self.config.source_root.joinpath(*parts)
        if not source.is_file():
            raise SourceNotFound("Image not found")
        return source

    def execute(
        self,
        request_path: str,
        preference: str | None = None,
        signature: str | None = None,
    ) -> ImageOutcome:
        stage = Stage.START
        clear = False
        try:
            # resolved first so a mangled preference is expired even on a 404
            signal = self.resolver.signal(preference, signature)
            clear = signal.clear_preference
            stage = Stage.SIGNAL_RESOLVED

            decision = self.resolver.decide(signal)
            stage = Stage.BREAKPOINT_SELECTED

            source = self.source_path(request_path)
            if decision.serve_source:
                logger.debug("Client wider than every breakpoint, serving %s raw", request_path)
                return self._served(source, None, clear)

            path = self.cache.resolve(source, request_path, decision.resolution)
            stage = Stage.CACHE_CHECKED
            return self._served(path, decision.resolution, clear)
        except SourceNotFound as exc:
            logger.warning("Source image missing for %s", request_path)
            return ImageOutcome(
                stage=Stage.FAILED, error=str(exc), clear_preference=clear, not_found=True, failed_after=stage
            )
        except AdaptiveImageError as exc:
            logger.warning("Failed to serve %s after %s: %s", request_path, stage.value, exc)
            return ImageOutcome(stage=Stage.FAILED, error=str(exc), clear_preference=clear, failed_after=stage)
        except Exception as exc:
            logger.error("Unexpected error serving %s after %s", request_path, stage.value, exc_info=True)
            return ImageOutcome(
                stage=Stage.FAILED,
                error=str(exc) or type(exc).__name__,
                clear_preference=clear,
                failed_after=stage,
            )

    def _served(self, path: Path, resolution: int | None, clear: bool) -> ImageOutcome:
        return ImageOutcome(
            stage=Stage.SERVED,
            path=path,
            content_type=content_type_for(path),
            max_age=self.config.browser_cache,
            resolution=resolution,
            clear_preference=clear,
        )
