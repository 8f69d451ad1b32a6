from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

"""TransactionRecord model: the canonical unit produced by the normalizer."""

__all__ = [
    "UNKNOWN_LOCATION",
    "TransactionRecord",
]

UNKNOWN_LOCATION = "Unknown"


@dataclass(frozen=True)
class TransactionRecord:
    """One validated shop-lot sale.

    ``year`` is always the calendar year of ``date`` and ``price`` is always
    strictly positive. Rows that cannot satisfy both are dropped before a
    record is built.
    """
    date: datetime
    year: int
    price: float
    location: str = UNKNOWN_LOCATION
