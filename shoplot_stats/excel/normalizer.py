from __future__ import annotations

import logging
import math
import numbers
import re
import warnings
from collections.abc import Iterable, Sequence
from datetime import date, datetime, timedelta
from typing import Any

import pandas as pd

from ..errors import EmptyDatasetError
from ..models.column_map import ColumnMap
from ..models.transaction import UNKNOWN_LOCATION, TransactionRecord

"""Record normalizer: raw spreadsheet rows -> canonical TransactionRecords.

Rows with an undecodable transaction date or a non-positive price are dropped
without raising. Only an entirely empty result is an error.
"""

__all__ = [
    "SPREADSHEET_EPOCH_OFFSET_DAYS",
    "decode_date_cell",
    "parse_price",
    "normalize_row",
    "normalize_rows",
]

logger = logging.getLogger(__name__)

# 1900 系シリアル値と Unix epoch (1970-01-01) の差 (日)
SPREADSHEET_EPOCH_OFFSET_DAYS = 25569
SECONDS_PER_DAY = 86400
_UNIX_EPOCH = datetime(1970, 1, 1)

# parseFloat 互換: 先頭の数値部分のみ採用 ("1500.50 RM" -> 1500.5)
_NUMERIC_PREFIX = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")

# pandas はこれらを現在時刻として解釈するため除外
_RELATIVE_DATE_WORDS = frozenset({"now", "today"})


def _serial_to_datetime(serial: float) -> datetime | None:
    if not math.isfinite(serial):
        return None
    # round half up, not banker's rounding
    seconds = math.floor((serial - SPREADSHEET_EPOCH_OFFSET_DAYS) * SECONDS_PER_DAY + 0.5)
    try:
        return _UNIX_EPOCH + timedelta(seconds=seconds)
    except OverflowError:
        return None


def _parse_date_text(text: str) -> datetime | None:
    text = text.strip()
    if not text or text.lower() in _RELATIVE_DATE_WORDS:
        return None
    try:
        with warnings.catch_warnings():
            # 形式推定失敗時の UserWarning を抑止 (dateutil へフォールバック)
            warnings.simplefilter("ignore", UserWarning)
            parsed = pd.to_datetime(text, errors="coerce")
    except (ValueError, OverflowError, TypeError):
        return None
    if pd.isna(parsed):
        return None
    return parsed.to_pydatetime()


def decode_date_cell(value: Any) -> datetime | None:
    """Decode a transaction date cell by kind.

    - numeric: spreadsheet serial day count (1900 date system)
    - str: general calendar date parsing
    - datetime/date: passed through
    - anything else: no date
    """
    if value is None or value is pd.NaT or isinstance(value, bool):
        return None
    if isinstance(value, pd.Timestamp):
        return value.to_pydatetime()
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, numbers.Real):
        return _serial_to_datetime(float(value))
    if isinstance(value, str):
        return _parse_date_text(value)
    return None


def parse_price(value: Any) -> float:
    """Parse a price cell as a real number; anything unparseable becomes 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, numbers.Real):
        number = float(value)
    elif isinstance(value, str):
        match = _NUMERIC_PREFIX.match(value.strip())
        if match is None:
            return 0.0
        number = float(match.group(0))
    else:
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return number


def _cell(row: Sequence[Any], index: int | None) -> Any:
    if index is None or index >= len(row):
        return None
    return row[index]


def _location(row: Sequence[Any], columns: ColumnMap) -> str:
    if not columns.has_location:
        return UNKNOWN_LOCATION
    value = _cell(row, columns.location_index)
    if isinstance(value, float) and math.isnan(value):
        return UNKNOWN_LOCATION
    if not value:
        return UNKNOWN_LOCATION
    return str(value)


def normalize_row(row: Sequence[Any], columns: ColumnMap) -> TransactionRecord | None:
    """Build a record from one raw row, or return None if the row is rejected."""
    decoded = decode_date_cell(_cell(row, columns.date_index))
    year = decoded.year if decoded is not None else None
    price = parse_price(_cell(row, columns.price_index))
    if year is None or decoded is None or price <= 0:
        return None
    return TransactionRecord(
        date=decoded,
        year=year,
        price=price,
        location=_location(row, columns),
    )


def normalize_rows(
    data_rows: Iterable[Sequence[Any]], columns: ColumnMap
) -> tuple[TransactionRecord, ...]:
    """Normalize data rows (header excluded) preserving their original order.

    Raises:
        EmptyDatasetError: no row survived validation
    """
    records: list[TransactionRecord] = []
    rejected = 0
    for row in data_rows:
        record = normalize_row(row, columns)
        if record is None:
            rejected += 1
            continue
        records.append(record)

    if rejected:
        logger.debug("rejected %d row(s) with invalid date or non-positive price", rejected)
    if not records:
        raise EmptyDatasetError(
            "No valid data rows found after parsing. Check 'Transaction Date' and 'Price' columns."
        )
    return tuple(records)
