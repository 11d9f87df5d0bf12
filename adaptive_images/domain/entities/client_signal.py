from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ClientSignal:
    """What a single request tells us about the client's screen."""

    width: int | None  # from a stored preference, None when absent or malformed
    is_desktop: bool
    clear_preference: bool = False  # the stored preference was mangled and should be expired


@dataclass(frozen=True)
class ResolutionDecision:
    """Resolution to serve for a request.

    ``resolution`` is None when the source image must be served untouched.
    """

    resolution: int | None
    signal: ClientSignal

    @property
    def serve_source(self) -> bool:
        return self.resolution is None

    @property
    def clear_preference(self) -> bool:
        return self.signal.clear_preference
