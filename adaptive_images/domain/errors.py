"""Failure kinds raised by the adaptive image core.

Every error here is recoverable: the orchestrator turns them into a failed
outcome that the transport layer renders as a diagnostic image.
"""
from __future__ import annotations


class AdaptiveImageError(RuntimeError):
    """Base class for all recoverable adaptive image failures."""


class SourceNotFound(AdaptiveImageError):
    """The requested source image does not exist under the source root."""


class DecodeFailure(AdaptiveImageError):
    """The source image is unreadable, corrupt or in an unsupported format."""


class EncodeFailure(AdaptiveImageError):
    """No encoder is available for the target format or image mode."""


class CacheWriteFailure(AdaptiveImageError):
    """The cache directory or cache file could not be created or replaced."""
