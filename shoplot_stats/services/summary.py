from __future__ import annotations

from typing import Any

from ..models.snapshot import NOT_AVAILABLE, StatisticsSnapshot
from ..models.weights import WeightConfiguration

"""Display rendering for statistics snapshots.

Formats price readouts, weight readouts, the SUMMARY line printed by the CLI
and the chart payload consumed by an external plotting front-end.
"""

__all__ = [
    "CHART_TITLE",
    "CHART_PLACEHOLDER_TITLE",
    "format_price",
    "format_weight",
    "render_summary_line",
    "build_chart_payload",
    "is_not_available",
]

CHART_TITLE = "Median Shop Lot Price Over Time"
CHART_PLACEHOLDER_TITLE = "Upload data to see trends"


def format_price(value: float | str, currency: str = "RM") -> str:
    """Render a price readout such as ``RM 1,234.56``.

    Non-numeric values (the ``"N/A"`` sentinel) are returned unchanged.
    """
    if isinstance(value, str):
        return value
    return f"{currency} {value:,.2f}"


def format_weight(value: float) -> str:
    return f"{value:.2f}"


def _plain(value: float | str) -> str:
    if isinstance(value, str):
        return value
    return f"{value:.2f}"


def render_summary_line(snapshot: StatisticsSnapshot, weights: WeightConfiguration) -> str:
    """Render the SUMMARY line for one snapshot.

    Format:
    SUMMARY records={n} median={x.xx} weighted_avg={x.xx|N/A} years={k} weights={r}/{m}/{o}

    Examples:
        >>> snap = StatisticsSnapshot(150.0, 150.0, "", ((2021, 150.0),), 2)
        >>> render_summary_line(snap, WeightConfiguration(1.0, 0.0, 0.0))
        'SUMMARY records=2 median=150.00 weighted_avg=150.00 years=1 weights=1.00/0.00/0.00'
    """
    weight_str = "/".join(format_weight(w) for w in weights.as_tuple())
    return (
        f"SUMMARY records={snapshot.record_count} "
        f"median={_plain(snapshot.median_price)} "
        f"weighted_avg={_plain(snapshot.weighted_average)} "
        f"years={len(snapshot.yearly_series)} "
        f"weights={weight_str}"
    )


def build_chart_payload(
    series: tuple[tuple[int, float], ...], currency: str = "RM"
) -> dict[str, Any]:
    """Build the trend chart description for the plotting collaborator.

    An empty series yields an explicit empty-state payload with the
    placeholder title instead of an error.
    """
    if not series:
        return {
            "empty": True,
            "title": CHART_PLACEHOLDER_TITLE,
            "x": [],
            "y": [],
        }
    return {
        "empty": False,
        "title": CHART_TITLE,
        "x": [year for year, _ in series],
        "y": [price for _, price in series],
        "mode": "lines+markers",
        "name": "Median Price",
        "xaxis_title": "Transaction Year",
        "yaxis_title": f"Median Price ({currency})",
    }


def is_not_available(value: float | str) -> bool:
    return value == NOT_AVAILABLE
