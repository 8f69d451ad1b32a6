from __future__ import annotations

import re

from shoplot_stats.models.snapshot import NOT_AVAILABLE, StatisticsSnapshot
from shoplot_stats.models.weights import WeightConfiguration
from shoplot_stats.services.summary import (
    CHART_PLACEHOLDER_TITLE,
    CHART_TITLE,
    build_chart_payload,
    format_price,
    format_weight,
    render_summary_line,
)

SUMMARY_RE = re.compile(
    r"^SUMMARY records=\d+ median=\d+\.\d{2} weighted_avg=(\d+\.\d{2}|N/A) years=\d+ "
    r"weights=\d+\.\d{2}/\d+\.\d{2}/\d+\.\d{2}$"
)


def test_format_price_thousands_and_decimals():
    assert format_price(1234567.891) == "RM 1,234,567.89"
    assert format_price(0) == "RM 0.00"
    assert format_price(150, currency="USD") == "USD 150.00"


def test_format_price_passes_sentinel_through():
    assert format_price(NOT_AVAILABLE) == "N/A"


def test_format_weight_two_decimals():
    assert format_weight(0.3333) == "0.33"
    assert format_weight(1) == "1.00"


def test_render_summary_line():
    snap = StatisticsSnapshot(
        median_price=200.0,
        weighted_average=150.0,
        diagnostic_message="",
        yearly_series=((1995, 300.0), (2021, 150.0)),
        record_count=3,
    )
    line = render_summary_line(snap, WeightConfiguration(1.0, 0.0, 0.0))
    assert line == "SUMMARY records=3 median=200.00 weighted_avg=150.00 years=2 weights=1.00/0.00/0.00"
    assert SUMMARY_RE.match(line)


def test_render_summary_line_not_available():
    snap = StatisticsSnapshot(200.0, NOT_AVAILABLE, "Weightage is not adjusted properly (sum must be 1.0)", (), 1)
    line = render_summary_line(snap, WeightConfiguration(0.5, 0.5, 0.5))
    assert "weighted_avg=N/A" in line
    assert SUMMARY_RE.match(line)


def test_chart_payload_with_series():
    payload = build_chart_payload(((1999, 100.0), (2021, 200.0)))
    assert payload["empty"] is False
    assert payload["title"] == CHART_TITLE
    assert payload["x"] == [1999, 2021]
    assert payload["y"] == [100.0, 200.0]
    assert payload["yaxis_title"] == "Median Price (RM)"


def test_chart_payload_empty_state():
    payload = build_chart_payload(())
    assert payload == {"empty": True, "title": CHART_PLACEHOLDER_TITLE, "x": [], "y": []}
