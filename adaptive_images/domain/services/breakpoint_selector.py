from __future__ import annotations

from bisect import bisect_left

from adaptive_images.domain.entities.breakpoints import BreakpointSet


class BreakpointSelector:
    """Maps a client width to one of the configured breakpoints.

    ``select`` returns None, the "use source resolution" sentinel, when the
    client is wider than the largest breakpoint.
    """

    def __init__(self, breakpoints: BreakpointSet) -> None:
        self.breakpoints = breakpoints

    def select(self, width: int) -> int | None:
        widths = self.breakpoints.widths
        idx = bisect_left(widths, width)
        if idx == len(widths):
            return None
        return widths[idx]

    def resolve(self, width: int, default_raw: bool) -> int | None:
        """Like ``select`` but clamps to the largest tier unless ``default_raw``."""
        selected = self.select(width)
        if selected is None and not default_raw:
            return self.breakpoints.maximum
        return selected
