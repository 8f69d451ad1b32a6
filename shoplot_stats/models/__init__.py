"""Domain models for the shop-lot statistics dashboard.

Canonical records, resolved column positions, bucket weights and the
statistics snapshot published to the display layer.
"""

from .column_map import ColumnMap
from .error_record import ErrorRecord
from .snapshot import NOT_AVAILABLE, StatisticsSnapshot, WeightedAverageResult
from .transaction import UNKNOWN_LOCATION, TransactionRecord
from .weights import WeightConfiguration

__all__ = [
    # Ingestion models
    "ColumnMap",
    "TransactionRecord",
    "UNKNOWN_LOCATION",
    # Statistics models
    "WeightConfiguration",
    "WeightedAverageResult",
    "StatisticsSnapshot",
    "NOT_AVAILABLE",
    # Logging
    "ErrorRecord",
]
