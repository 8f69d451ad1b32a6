from __future__ import annotations

import logging
import statistics
from collections import defaultdict
from collections.abc import Iterable, Sequence

from ..errors import WeightImbalanceError
from ..models.snapshot import NOT_AVAILABLE, StatisticsSnapshot, WeightedAverageResult
from ..models.transaction import TransactionRecord
from ..models.weights import MID_FROM_YEAR, RECENT_FROM_YEAR, WeightConfiguration

"""Statistics engine: median, weighted bucket average and yearly medians.

All functions are pure and stateless. The session calls compute_snapshot()
whenever the dataset or the weights change so every output is refreshed at once.
"""

__all__ = [
    "WEIGHT_TOLERANCE",
    "WEIGHT_IMBALANCE_MESSAGE",
    "EMPTY_DATASET_MESSAGE",
    "median",
    "check_weights",
    "partition_by_bucket",
    "weighted_average",
    "yearly_median_series",
    "compute_snapshot",
]

logger = logging.getLogger(__name__)

# 浮動小数点誤差の許容幅
WEIGHT_TOLERANCE = 0.001
WEIGHT_IMBALANCE_MESSAGE = "Weightage is not adjusted properly (sum must be 1.0)"
EMPTY_DATASET_MESSAGE = "Please upload an Excel file to perform calculations."


def median(prices: Iterable[float]) -> float:
    """Median of ``prices``; 0 for an empty input.

    Even-length inputs return the mean of the two middle values.
    """
    values = list(prices)
    if not values:
        return 0
    return statistics.median(values)


def check_weights(weights: WeightConfiguration) -> None:
    """Raise WeightImbalanceError unless the weights sum to 1.0 within tolerance."""
    total = weights.total
    if abs(total - 1.0) > WEIGHT_TOLERANCE:
        raise WeightImbalanceError(total, WEIGHT_IMBALANCE_MESSAGE)


def partition_by_bucket(
    dataset: Iterable[TransactionRecord],
) -> tuple[list[float], list[float], list[float]]:
    """Split prices into (recent, mid, old) year buckets."""
    recent: list[float] = []
    mid: list[float] = []
    old: list[float] = []
    for record in dataset:
        if record.year >= RECENT_FROM_YEAR:
            recent.append(record.price)
        elif record.year >= MID_FROM_YEAR:
            mid.append(record.price)
        else:
            old.append(record.price)
    return recent, mid, old


def weighted_average(
    dataset: Sequence[TransactionRecord], weights: WeightConfiguration
) -> WeightedAverageResult:
    """Sum of bucket medians multiplied by their weights.

    A bucket without records contributes nothing, so its weight is lost
    rather than redistributed.
    """
    try:
        check_weights(weights)
    except WeightImbalanceError as e:
        logger.debug("weights rejected total=%.4f", e.total)
        return WeightedAverageResult(value=NOT_AVAILABLE, message=str(e))

    total = 0.0
    for prices, weight in zip(partition_by_bucket(dataset), weights.as_tuple(), strict=True):
        if prices:
            total += median(prices) * weight
    return WeightedAverageResult(value=total)


def yearly_median_series(dataset: Iterable[TransactionRecord]) -> tuple[tuple[int, float], ...]:
    """(year, median price) pairs in ascending year order; empty for no data."""
    by_year: dict[int, list[float]] = defaultdict(list)
    for record in dataset:
        by_year[record.year].append(record.price)
    return tuple((year, median(by_year[year])) for year in sorted(by_year))


def compute_snapshot(
    dataset: Sequence[TransactionRecord], weights: WeightConfiguration
) -> StatisticsSnapshot:
    """Recompute every output for the display layer in one step."""
    if not dataset:
        return StatisticsSnapshot(
            median_price=0,
            weighted_average=0,
            diagnostic_message=EMPTY_DATASET_MESSAGE,
            yearly_series=(),
            record_count=0,
        )

    result = weighted_average(dataset, weights)
    return StatisticsSnapshot(
        median_price=median(r.price for r in dataset),
        weighted_average=result.value,
        diagnostic_message=result.message,
        yearly_series=yearly_median_series(dataset),
        record_count=len(dataset),
    )
