from __future__ import annotations

from typing import Annotated

from fastapi import Depends

from adaptive_images.application.use_cases.serve_adaptive_image import ServeAdaptiveImageUseCase
from adaptive_images.domain.entities.config import AdaptiveImageConfig
from adaptive_images.domain.services.client_signal_resolver import ClientSignalResolver
from adaptive_images.domain.services.resampler import Resampler
from adaptive_images.infrastructure.cache.disk_cache import DiskCacheStore
from adaptive_images.infrastructure.config.settings import AdaptiveImageSettings, get_settings


def get_config(
    settings: Annotated[AdaptiveImageSettings, Depends(get_settings)],
) -> AdaptiveImageConfig:
    return settings.to_config()


def build_cache_store(config: AdaptiveImageConfig) -> DiskCacheStore:
    return DiskCacheStore(
        config.cache_root,
        Resampler(jpg_quality=config.jpg_quality),
        watch_cache=config.watch_cache,
    )


def get_serve_use_case(
    config: Annotated[AdaptiveImageConfig, Depends(get_config)],
) -> ServeAdaptiveImageUseCase:
    return ServeAdaptiveImageUseCase(
        config=config,
        resolver=ClientSignalResolver(config),
        cache=build_cache_store(config),
    )
