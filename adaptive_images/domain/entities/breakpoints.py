from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True)
class BreakpointSet:
    """Configured resolution tiers (screen widths in pixels).

    Values are kept sorted ascending with duplicates removed, whatever order
    they were configured in.
    """

    widths: tuple[int, ...]

    def __post_init__(self) -> None:
        widths = tuple(sorted({int(w) for w in self.widths}))
        if not widths:
            raise ValueError("at least one breakpoint is required")
        if widths[0] <= 0:
            raise ValueError(f"breakpoints must be positive, got {widths[0]}")
        object.__setattr__(self, "widths", widths)

    @classmethod
    def of(cls, widths: Iterable[int]) -> BreakpointSet:
        return cls(tuple(widths))

    @property
    def minimum(self) -> int:
        return self.widths[0]

    @property
    def maximum(self) -> int:
        return self.widths[-1]

    def __iter__(self):
        return iter(self.widths)

    def __len__(self) -> int:
        return len(self.widths)
