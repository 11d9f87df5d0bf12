import io
import os
import sys
from pathlib import Path

import numpy as np
import pytest
from fastapi.testclient import TestClient
from PIL import Image

# Ensure project root is on sys.path so 'adaptive_images' is importable during tests
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from adaptive_images.domain.entities.breakpoints import BreakpointSet  # noqa: E402
from adaptive_images.domain.entities.config import AdaptiveImageConfig  # noqa: E402

BREAKPOINTS = (480, 768, 992, 1382)



def make_image_bytes(w=4, h=4, fmt="PNG", color=(128, 64, 32), noise=False) -> bytes:
    if noise:
        rng = np.random.default_rng(0)
        arr = rng.integers(0, 256, size=(h, w, 3), dtype=np.uint8)
    else:
        arr = np.zeros((h, w, 3), dtype=np.uint8)
        arr[:, :] = color
    img = Image.fromarray(arr)
    if fmt == "GIF":
        img = img.convert("P")
    buf = io.BytesIO()
    img.save(buf, format=fmt)
    return buf.getvalue()


@pytest.fixture()
def site_root(tmp_path) -> Path:
    root = tmp_path / "site"
    root.mkdir()
    return root


@pytest.fixture()
def make_image(site_root):
    """Write an image under the site root and return its path."""

    def _make(rel: str, w=1000, h=500, fmt=None, noise=False) -> Path:
        path = site_root / rel.lstrip("/")
        path.parent.mkdir(parents=True, exist_ok=True)
        if fmt is None:
            fmt = {".png": "PNG", ".gif": "GIF"}.get(path.suffix.lower(), "JPEG")
        path.write_bytes(make_image_bytes(w, h, fmt=fmt, noise=noise))
        return path

    return _make


@pytest.fixture()
def config(site_root) -> AdaptiveImageConfig:
    return AdaptiveImageConfig(
        breakpoints=BreakpointSet.of(BREAKPOINTS),
        source_root=site_root,
        cache_root=site_root / "ai-cache",
    )


@pytest.fixture()
def client(monkeypatch, site_root):
    monkeypatch.setenv("ADAPTIVE_IMAGES_SOURCE_ROOT", str(site_root))
    monkeypatch.setenv("ADAPTIVE_IMAGES_RESOLUTIONS", ",".join(str(b) for b in BREAKPOINTS))
    # lazy import after env configured
    from adaptive_images.infrastructure.config.settings import get_settings
    from adaptive_images.main import create_app

    get_settings.cache_clear()
    app = create_app()
    with TestClient(app) as test_client:
        yield test_client
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    for key in list(os.environ):
        if key.startswith("ADAPTIVE_IMAGES_"):
            monkeypatch.delenv(key)
