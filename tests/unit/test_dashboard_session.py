from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pytest

from shoplot_stats.errors import (
    ColumnResolutionError,
    EmptyDatasetError,
    SpreadsheetReadError,
    UploadInProgressError,
)
from shoplot_stats.logging.error_log import ErrorLogBuffer
from shoplot_stats.models.snapshot import NOT_AVAILABLE, StatisticsSnapshot
from shoplot_stats.models.weights import WeightConfiguration
from shoplot_stats.services.session import DEFAULT_LOCATION_HEADER, DashboardSession
from shoplot_stats.services.statistics import EMPTY_DATASET_MESSAGE

WEIGHTS = WeightConfiguration(1.0, 0.0, 0.0)

GOOD_ROWS = [
    ["Price", "Year Sold", "Transaction Date", "District"],
    [100, 2021, datetime(2021, 3, 1), "Ipoh"],
    [200, 2021, "2021-08-15", None],
    [300, 1995, 34700, "Klang"],  # 1995-01-01
]


def _reader_for(table: dict[str, list[list[object]]]):
    def _read(path: Path) -> list[list[object]]:
        if path.name not in table:
            raise SpreadsheetReadError(f"file not found: {path}")
        return [list(r) for r in table[path.name]]
    return _read


def _session(table: dict[str, list[list[object]]], weights: WeightConfiguration = WEIGHTS) -> DashboardSession:
    return DashboardSession(weights, error_log=ErrorLogBuffer(), reader=_reader_for(table))


def test_initial_state_is_empty():
    session = _session({})
    assert session.dataset == ()
    assert session.columns is None
    assert session.location_header == DEFAULT_LOCATION_HEADER
    assert session.snapshot.is_empty
    assert session.snapshot.diagnostic_message == EMPTY_DATASET_MESSAGE
    assert not session.upload_in_progress


def test_successful_upload_replaces_dataset():
    session = _session({"good.xlsx": GOOD_ROWS})
    snap = session.upload(Path("good.xlsx"))
    assert len(session.dataset) == 3
    assert session.columns is not None
    assert session.columns.location_header == "District"
    assert session.location_header == "District"
    assert session.status_message == 'File "good.xlsx" uploaded successfully. Data ready.'
    assert snap.weighted_average == 150
    assert snap.median_price == 200
    assert snap is session.snapshot
    assert [r.location for r in session.dataset] == ["Ipoh", "Unknown", "Klang"]


def test_upload_without_price_column_clears_previous_dataset():
    bad = [["Transaction Date", "Location"], ["2021-01-01", "Ipoh"]]
    session = _session({"good.xlsx": GOOD_ROWS, "bad.xlsx": bad})
    session.upload(Path("good.xlsx"))
    assert session.dataset

    with pytest.raises(ColumnResolutionError):
        session.upload(Path("bad.xlsx"))

    assert session.dataset == ()
    assert session.columns is None
    assert session.location_header == DEFAULT_LOCATION_HEADER
    assert session.status_message.startswith("Error processing file: Could not find 'Price'")
    assert session.snapshot.is_empty


def test_upload_with_no_valid_rows_fails():
    rows = [["Price", "Date"], [0, "2020-01-01"], [100, "unknown"]]
    session = _session({"good.xlsx": GOOD_ROWS, "invalid.xlsx": rows})
    session.upload(Path("good.xlsx"))
    with pytest.raises(EmptyDatasetError):
        session.upload(Path("invalid.xlsx"))
    assert session.dataset == ()


def test_failed_upload_is_recorded_in_error_log():
    session = _session({})
    with pytest.raises(SpreadsheetReadError):
        session.upload(Path("missing.xlsx"))
    records = session.error_log.records
    assert len(records) == 1
    assert records[0].file == "missing.xlsx"
    assert records[0].row == -1
    assert records[0].error_type == "SPREADSHEET_READ_ERROR"


def test_header_only_file_is_empty_dataset():
    session = _session({"header.xlsx": [["Price", "Date"]]})
    with pytest.raises(EmptyDatasetError):
        session.upload(Path("header.xlsx"))
    assert session.error_log.records[0].error_type == "EMPTY_DATASET"


def test_set_weights_recomputes():
    session = _session({"good.xlsx": GOOD_ROWS})
    session.upload(Path("good.xlsx"))
    snap = session.set_weights(WeightConfiguration(0.0, 0.0, 1.0))
    assert snap.weighted_average == 300
    assert session.weights == WeightConfiguration(0.0, 0.0, 1.0)

    snap = session.set_weights(WeightConfiguration(0.7, 0.7, 0.0))
    assert snap.weighted_average == NOT_AVAILABLE
    assert snap.median_price == 200
    assert snap.yearly_series == ((1995, 300), (2021, 150))


def test_subscribers_receive_every_snapshot():
    received: list[StatisticsSnapshot] = []
    session = _session({"good.xlsx": GOOD_ROWS})
    session.subscribe(received.append)
    session.upload(Path("good.xlsx"))
    session.set_weights(WeightConfiguration(0.5, 0.3, 0.2))
    with pytest.raises(SpreadsheetReadError):
        session.upload(Path("missing.xlsx"))
    assert len(received) == 3
    assert received[0].record_count == 3
    assert received[1].record_count == 3
    assert received[2].is_empty


def test_concurrent_upload_is_rejected():
    session: DashboardSession | None = None
    raised: list[Exception] = []

    def reentrant_reader(path: Path) -> list[list[object]]:
        assert session is not None
        assert session.upload_in_progress
        try:
            session.upload(Path("second.xlsx"))
        except UploadInProgressError as e:
            raised.append(e)
        return GOOD_ROWS

    session = DashboardSession(WEIGHTS, reader=reentrant_reader)
    session.upload(Path("first.xlsx"))
    assert len(raised) == 1
    assert len(session.dataset) == 3
    assert not session.upload_in_progress


def test_rename_location_header():
    session = _session({"good.xlsx": GOOD_ROWS})
    assert session.rename_location_header("Town") is False  # データ未ロード
    session.upload(Path("good.xlsx"))
    before = session.snapshot
    assert session.rename_location_header("  Town  ") is True
    assert session.location_header == "Town"
    assert session.status_message == 'Location header noted as "Town".'
    assert session.snapshot is before
    assert session.rename_location_header("   ") is False
    assert session.location_header == "Town"
