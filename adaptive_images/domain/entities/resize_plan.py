from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ResizePlan:
    source_width: int
    source_height: int
    target_width: int

    # ceil(tw * H / W) in integer arithmetic, so no float rounding creeps in
    @property
    def target_height(self) -> int:
        return -(-self.target_width * self.source_height // self.source_width)

    @property
    def size(self) -> tuple[int, int]:
        return self.target_width, self.target_height
