from __future__ import annotations

from dataclasses import dataclass

"""Statistics output models handed to the display and chart collaborators."""

__all__ = [
    "NOT_AVAILABLE",
    "WeightedAverageResult",
    "StatisticsSnapshot",
]

# 重み合計が不正な場合の表示値
NOT_AVAILABLE = "N/A"


@dataclass(frozen=True)
class WeightedAverageResult:
    """Weighted average value or the ``"N/A"`` sentinel with its diagnostic."""
    value: float | str
    message: str = ""

    @property
    def available(self) -> bool:
        return self.value != NOT_AVAILABLE


@dataclass(frozen=True)
class StatisticsSnapshot:
    """All statistics outputs, always recomputed and published together.

    The display layer receives one snapshot at a time so it never mixes
    results from different datasets or weight settings.
    """
    median_price: float
    weighted_average: float | str
    diagnostic_message: str
    yearly_series: tuple[tuple[int, float], ...]
    record_count: int = 0

    @property
    def is_empty(self) -> bool:
        return self.record_count == 0
