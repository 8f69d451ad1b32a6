from __future__ import annotations

import math
from dataclasses import dataclass

"""WeightConfiguration model for the three year buckets.

Buckets:
- recent: year >= 2020
- mid:    2000 <= year <= 2019
- old:    year <= 1999
"""

__all__ = [
    "RECENT_FROM_YEAR",
    "MID_FROM_YEAR",
    "WeightConfiguration",
]

RECENT_FROM_YEAR = 2020
MID_FROM_YEAR = 2000


@dataclass(frozen=True)
class WeightConfiguration:
    """Bucket weights supplied by the weighting controls on every recomputation."""
    w_recent: float
    w_mid: float
    w_old: float

    def __post_init__(self) -> None:
        for name in ("w_recent", "w_mid", "w_old"):
            value = getattr(self, name)
            if not math.isfinite(value):
                raise ValueError(f"{name} must be a finite number, got {value}")
            if value < 0:
                raise ValueError(f"{name} must be non-negative, got {value}")

    @property
    def total(self) -> float:
        return self.w_recent + self.w_mid + self.w_old

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.w_recent, self.w_mid, self.w_old)
