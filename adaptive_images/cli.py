"""Command line entry points.

Usage::

    python -m adaptive_images.cli serve --port 8000  # run the image server
    python -m adaptive_images.cli purge              # empty the whole cache
    python -m adaptive_images.cli purge photos/a.jpg # drop every variant of one image
"""
from __future__ import annotations

import argparse
import logging
import sys

import uvicorn

from adaptive_images.infrastructure.api.dependencies import build_cache_store
from adaptive_images.infrastructure.config.settings import AdaptiveImageSettings
from adaptive_images.infrastructure.logging_config import configure_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="adaptive-images", description="Adaptive image server and cache tools")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the adaptive image server")
    serve.add_argument("--host", default="127.0.0.1", help="Interface to bind")
    serve.add_argument("--port", type=int, default=8000, help="Port to listen on")
    serve.add_argument("--reload", action="store_true", help="Restart on code changes (development)")

    purge = sub.add_parser("purge", help="Delete cached image variants")
    purge.add_argument("path", nargs="?", default=None, help="Image path as requested, e.g. /img/a.jpg")
    purge.add_argument("--cache-path", default=None, help="Override the configured cache directory")
    return parser


def _serve(args: argparse.Namespace, settings: AdaptiveImageSettings) -> int:
    uvicorn.run(
        "adaptive_images.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )
    return 0


def _purge(args: argparse.Namespace, settings: AdaptiveImageSettings) -> int:
    store = build_cache_store(settings.to_config())
    try:
        removed = store.purge(args.path)
    except ValueError as exc:
        logger.error("%s", exc)
        return 2
    print(removed)
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    cache_path = getattr(args, "cache_path", None)
    overrides = {"cache_path": cache_path} if cache_path else {}
    settings = AdaptiveImageSettings(**overrides)
    configure_logging(settings.log_level)

    if args.command == "serve":
        return _serve(args, settings)
    return _purge(args, settings)


if __name__ == "__main__":
    sys.exit(main())
