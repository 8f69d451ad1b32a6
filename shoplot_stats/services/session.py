from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from pathlib import Path
from typing import Any

from ..errors import (
    ColumnResolutionError,
    EmptyDatasetError,
    IngestionError,
    SpreadsheetReadError,
    UploadInProgressError,
)
from ..excel.columns import resolve_columns
from ..excel.normalizer import normalize_rows
from ..excel.reader import read_spreadsheet, split_header
from ..logging.error_log import ErrorLogBuffer
from ..models.column_map import ColumnMap
from ..models.error_record import ErrorRecord
from ..models.snapshot import StatisticsSnapshot
from ..models.transaction import TransactionRecord
from ..models.weights import WeightConfiguration
from .statistics import compute_snapshot

"""Dashboard session: owns the dataset, the column map and the last weights.

Every state change (successful upload, failed upload, new weights) republishes
a complete StatisticsSnapshot to subscribers. A failed upload resets the
session to the empty dataset instead of keeping the previous one.
"""

__all__ = [
    "DEFAULT_LOCATION_HEADER",
    "DashboardSession",
]

logger = logging.getLogger(__name__)

DEFAULT_LOCATION_HEADER = "Location"

_ERROR_TYPES: dict[type[IngestionError], str] = {
    SpreadsheetReadError: "SPREADSHEET_READ_ERROR",
    ColumnResolutionError: "COLUMN_RESOLUTION_ERROR",
    EmptyDatasetError: "EMPTY_DATASET",
}

SnapshotCallback = Callable[[StatisticsSnapshot], None]
Reader = Callable[[Path], list[list[Any]]]


class DashboardSession:
    """Single-user dashboard state.

    Uploads are serialized: a second upload while one is being processed is
    rejected with UploadInProgressError and leaves the session untouched.
    """

    def __init__(
        self,
        weights: WeightConfiguration,
        *,
        error_log: ErrorLogBuffer | None = None,
        reader: Reader = read_spreadsheet,
    ) -> None:
        self._weights = weights
        self._error_log = error_log if error_log is not None else ErrorLogBuffer()
        self._reader = reader
        self._dataset: tuple[TransactionRecord, ...] = ()
        self._columns: ColumnMap | None = None
        self._location_header = DEFAULT_LOCATION_HEADER
        self._status_message = ""
        self._subscribers: list[SnapshotCallback] = []
        self._upload_lock = threading.Lock()
        self._snapshot = compute_snapshot(self._dataset, self._weights)

    @property
    def dataset(self) -> tuple[TransactionRecord, ...]:
        return self._dataset

    @property
    def columns(self) -> ColumnMap | None:
        return self._columns

    @property
    def location_header(self) -> str:
        return self._location_header

    @property
    def weights(self) -> WeightConfiguration:
        return self._weights

    @property
    def status_message(self) -> str:
        return self._status_message

    @property
    def snapshot(self) -> StatisticsSnapshot:
        return self._snapshot

    @property
    def error_log(self) -> ErrorLogBuffer:
        return self._error_log

    @property
    def upload_in_progress(self) -> bool:
        return self._upload_lock.locked()

    def subscribe(self, callback: SnapshotCallback) -> None:
        """Register a display callback; it receives every published snapshot."""
        self._subscribers.append(callback)

    def _publish(self) -> StatisticsSnapshot:
        snapshot = compute_snapshot(self._dataset, self._weights)
        self._snapshot = snapshot
        for callback in self._subscribers:
            callback(snapshot)
        return snapshot

    def _reset(self) -> None:
        self._dataset = ()
        self._columns = None
        self._location_header = DEFAULT_LOCATION_HEADER

    def upload(self, path: Path) -> StatisticsSnapshot:
        """Ingest ``path`` and replace the dataset.

        Raises:
            UploadInProgressError: another upload is still being processed
            IngestionError: the file could not be turned into a dataset; the
                session has already been reset to empty when this propagates
        """
        if not self._upload_lock.acquire(blocking=False):
            raise UploadInProgressError(f'upload of "{path.name}" rejected: another upload is in progress')
        try:
            self._status_message = f'Processing "{path.name}"...'
            try:
                header, data_rows = split_header(self._reader(path))
                columns = resolve_columns(header)
                dataset = normalize_rows(data_rows, columns)
            except IngestionError as e:
                logger.error(f"upload {path.name}: {e}")
                self._error_log.append(
                    ErrorRecord.create(
                        file=path.name,
                        row=-1,
                        error_type=_ERROR_TYPES.get(type(e), "INGESTION_ERROR"),
                        message=str(e),
                    )
                )
                self._reset()
                self._status_message = f"Error processing file: {e}"
                self._publish()
                raise

            self._dataset = dataset
            self._columns = columns
            self._location_header = columns.location_header or DEFAULT_LOCATION_HEADER
            self._status_message = f'File "{path.name}" uploaded successfully. Data ready.'
            logger.info(f"loaded {len(dataset)} of {len(data_rows)} row(s) from {path.name}")
            return self._publish()
        finally:
            self._upload_lock.release()

    def set_weights(self, weights: WeightConfiguration) -> StatisticsSnapshot:
        """Apply new bucket weights and republish all statistics."""
        self._weights = weights
        return self._publish()

    def rename_location_header(self, name: str) -> bool:
        """Record a display name for the location column.

        Ignored for blank names or while no dataset is loaded. Statistics are
        not recomputed since location takes no part in them.
        """
        new_header = name.strip()
        if not new_header or not self._dataset:
            return False
        self._location_header = new_header
        self._status_message = f'Location header noted as "{new_header}".'
        return True
