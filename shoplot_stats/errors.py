from __future__ import annotations

"""Exception taxonomy for upload ingestion and statistics.

Ingestion errors are fatal to an upload: the session reverts to an empty
dataset. WeightImbalanceError is not fatal; it only downgrades the weighted
average to the "N/A" sentinel.
"""

__all__ = [
    "IngestionError",
    "SpreadsheetReadError",
    "ColumnResolutionError",
    "EmptyDatasetError",
    "UploadInProgressError",
    "WeightImbalanceError",
]


class IngestionError(Exception):
    """Base class for errors that abort an upload."""


class SpreadsheetReadError(IngestionError):
    """Raised when the uploaded file cannot be read into header + data rows."""


class ColumnResolutionError(IngestionError):
    """Raised when the header row has no price or no transaction date column."""


class EmptyDatasetError(IngestionError):
    """Raised when every data row was rejected by validation."""


class UploadInProgressError(Exception):
    """Raised when an upload is started while another one is still running."""


class WeightImbalanceError(ValueError):
    """Raised when bucket weights do not sum to 1.0 within tolerance."""

    def __init__(self, total: float, message: str) -> None:
        super().__init__(message)
        self.total = total
