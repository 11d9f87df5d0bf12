"""Disk cache of resized image variants.

Layout is ``{cache_root}/{resolution}/{logical path}``, one directory tree per
breakpoint mirroring the source tree. Existing caches written with this layout
are reused as is.
"""
from __future__ import annotations

import contextlib
import logging
import shutil
from pathlib import Path, PurePosixPath
from uuid import uuid4

from adaptive_images.domain.errors import CacheWriteFailure
from adaptive_images.domain.services.resampler import Resampler

logger = logging.getLogger(__name__)


def logical_parts(logical_path: str) -> tuple[str, ...]:
    """Split a request path into safe relative parts (no root, no ``..``)."""
    parts = tuple(p for p in PurePosixPath("/" + logical_path.lstrip("/")).parts[1:] if p not in ("", "."))
    if not parts or ".." in parts:
        raise ValueError(f"Invalid image path: {logical_path!r}")
    return parts


class DiskCacheStore:
    """Looks up, validates and (re)generates cached variants.

    With ``watch_cache`` disabled, any existing file is trusted. With it
    enabled, a cached file older than its source is deleted and regenerated
    before it is ever returned.
    """

    def __init__(self, cache_root: Path | str, resampler: Resampler, watch_cache: bool = True) -> None:
        self.cache_root = Path(cache_root)
        self.resampler = resampler
        self.watch_cache = watch_cache

    def path_for(self, logical_path: str, resolution: int) -> Path:
        return self.cache_root.joinpath(str(int(resolution)), *logical_parts(logical_path))

    def resolve(self, source_path: Path | str, logical_path: str, resolution: int) -> Path:
        """Return the file to serve for ``logical_path`` at ``resolution``.

        This is either a fresh cache file or ``source_path`` itself when the
        source is not wider than ``resolution``.
        """
        source_path = Path(source_path)
        cache_file = self.path_for(logical_path, resolution)

        if cache_file.exists():
            if not self.watch_cache or self.is_fresh(cache_file, source_path):
                logger.debug("Cache hit %s", cache_file)
                return cache_file
            logger.debug("Stale cache entry %s, removing", cache_file)
            self.invalidate(cache_file)

        return self.generate(source_path, cache_file, resolution)

    @staticmethod
    def is_fresh(cache_file: Path, source_path: Path) -> bool:
        try:
            return cache_file.stat().st_mtime >= source_path.stat().st_mtime
        except FileNotFoundError:
            # removed by a concurrent request between exists() and stat()
            return False

    @staticmethod
    def invalidate(cache_file: Path) -> None:
        try:
            cache_file.unlink(missing_ok=True)
        except OSError as exc:
            raise CacheWriteFailure(f"Cannot remove stale cache file {cache_file}: {exc}") from exc

    def generate(self, source_path: Path, cache_file: Path, resolution: int) -> Path:
        data = self.resampler.resize(source_path, resolution)
        if data is None:
            # source is already narrow enough, serve it and cache nothing
            return source_path
        self._write_atomic(cache_file, data)
        logger.info("Cached %s at %dpx (%d bytes)", source_path.name, resolution, len(data))
        return cache_file

    @staticmethod
    def _write_atomic(cache_file: Path, data: bytes) -> None:
        # temp file + rename so concurrent readers never see a partial image
        tmp_path = cache_file.with_name(f".{cache_file.name}.tmp.{uuid4().hex}")
        try:
            cache_file.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_bytes(data)
            tmp_path.replace(cache_file)
        except OSError as exc:
            with contextlib.suppress(OSError):
                tmp_path.unlink(missing_ok=True)
            raise CacheWriteFailure(f"Cannot write cache file {cache_file}: {exc}") from exc

    def purge(self, logical_path: str | None = None) -> int:
        """Delete cached variants of ``logical_path`` at every resolution.

        Without a path the whole cache is emptied. Returns the number of files
        removed.
        """
        if not self.cache_root.is_dir():
            return 0
        if logical_path is None:
            removed = sum(1 for p in self.cache_root.rglob("*") if p.is_file())
            for child in self.cache_root.iterdir():
                if child.is_dir():
                    shutil.rmtree(child)
                else:
                    child.unlink()
            logger.info("Purged %d cached files from %s", removed, self.cache_root)
            return removed

        parts = logical_parts(logical_path)
        removed = 0
        for tier in self.cache_root.iterdir():
            target = tier.joinpath(*parts)
            if tier.is_dir() and target.is_file():
                target.unlink()
                removed += 1
        logger.info("Purged %d cached variants of %s", removed, logical_path)
        return removed
