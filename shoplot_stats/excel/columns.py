from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from ..errors import ColumnResolutionError
from ..models.column_map import ColumnMap

"""Column resolver: heuristic, case-insensitive header matching.

Each header cell is trimmed and lower-cased, then tested against fixed synonym
tables. The lowest-index match wins for each category.
"""

__all__ = [
    "PRICE_HEADERS",
    "DATE_HEADERS",
    "LOCATION_HEADERS",
    "resolve_columns",
]

logger = logging.getLogger(__name__)

PRICE_HEADERS = frozenset({"price", "shop lot price", "value", "amount"})
DATE_HEADERS = frozenset({"transaction date", "date", "sales date", "buy date"})
LOCATION_HEADERS = frozenset({"location", "area", "district", "region", "place"})


def resolve_columns(header_row: Sequence[Any]) -> ColumnMap:
    """Locate the price, date and (optional) location columns in ``header_row``.

    Raises:
        ColumnResolutionError: price or date column not found
    """
    price_index: int | None = None
    date_index: int | None = None
    location_index: int | None = None
    location_header: str | None = None

    for index, header in enumerate(header_row):
        if header is None:
            continue
        text = str(header)
        key = text.strip().lower()
        if not key:
            continue
        # 最初に一致した列のみ採用 (重複は無視)
        if price_index is None and key in PRICE_HEADERS:
            price_index = index
        if date_index is None and key in DATE_HEADERS:
            date_index = index
        if location_index is None and key in LOCATION_HEADERS:
            location_index = index
            location_header = text

    if price_index is None or date_index is None:
        raise ColumnResolutionError(
            "Could not find 'Price' or 'Transaction Date' column in the uploaded file. "
            "Please ensure your headers are clear."
        )

    logger.debug(
        "resolved columns price=%s date=%s location=%s", price_index, date_index, location_index
    )
    return ColumnMap(
        price_index=price_index,
        date_index=date_index,
        location_index=location_index,
        location_header=location_header,
    )
