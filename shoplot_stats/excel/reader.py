from __future__ import annotations

import zipfile
from datetime import datetime
from pathlib import Path
from typing import Any

import pandas as pd

from ..errors import SpreadsheetReadError

"""Spreadsheet reader: uploaded file -> 2D array of typed cells.

1行目をヘッダ行、2行目以降をデータ行として扱う。Only the first sheet of a
workbook is read. Cells come back as ``float | int | str | datetime | None``;
pandas NaN/NaT become ``None`` and numpy scalars become Python scalars.
"""

__all__ = [
    "EXCEL_SUFFIXES",
    "CSV_SUFFIXES",
    "read_spreadsheet",
    "split_header",
]

EXCEL_SUFFIXES = {".xlsx", ".xlsm", ".xls"}
CSV_SUFFIXES = {".csv"}


def _to_cell(value: Any) -> Any:
    """Convert a pandas cell into a plain Python value."""
    if value is None or value is pd.NaT:
        return None
    if isinstance(value, pd.Timestamp):
        return value.to_pydatetime()
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        return value
    try:
        if pd.isna(value):
            return None
    except (TypeError, ValueError):
        return value
    # numpy scalar -> Python scalar
    if hasattr(value, "item"):
        return value.item()
    return value


def _read_csv_rows(path: Path) -> list[tuple[Any, ...]]:
    header = pd.read_csv(path, header=None, nrows=1)
    # ヘッダ行とデータ行を別々に読み、列ごとの型推定を保つ
    try:
        data = pd.read_csv(path, header=None, skiprows=1)
    except pd.errors.EmptyDataError:
        data = pd.DataFrame()
    return list(header.itertuples(index=False, name=None)) + list(data.itertuples(index=False, name=None))


def _read_raw_rows(path: Path) -> list[tuple[Any, ...]]:
    suffix = path.suffix.lower()
    if suffix in EXCEL_SUFFIXES:
        xls = pd.ExcelFile(path)
        if not xls.sheet_names:
            raise SpreadsheetReadError("Uploaded file is empty or could not be parsed.")
        # ヘッダなしで生読み (先頭シートのみ)
        df = xls.parse(xls.sheet_names[0], header=None)
        return list(df.itertuples(index=False, name=None))
    if suffix in CSV_SUFFIXES:
        return _read_csv_rows(path)
    raise SpreadsheetReadError(f"unsupported file type: {path.suffix or '<none>'}")


def read_spreadsheet(path: Path) -> list[list[Any]]:
    """Read the first sheet of ``path`` as header row + data rows.

    Parameters
    ----------
    path: アップロードされたファイルパス (.xlsx/.xlsm/.xls/.csv)

    Raises
    ------
    SpreadsheetReadError: file missing, unsupported, unreadable or without rows
    """
    if not path.exists():
        raise SpreadsheetReadError(f"file not found: {path}")
    try:
        raw_rows = _read_raw_rows(path)
    except SpreadsheetReadError:
        raise
    except pd.errors.EmptyDataError as e:
        raise SpreadsheetReadError("Uploaded file is empty or could not be parsed.") from e
    except (OSError, ValueError, zipfile.BadZipFile) as e:
        raise SpreadsheetReadError(f"could not read {path.name}: {e}") from e

    rows: list[list[Any]] = [[_to_cell(v) for v in raw] for raw in raw_rows]
    # 末尾の全空行を除去
    while rows and all(c is None for c in rows[-1]):
        rows.pop()
    if not rows:
        raise SpreadsheetReadError("Uploaded file is empty or could not be parsed.")
    return rows


def split_header(rows: list[list[Any]]) -> tuple[list[Any], list[list[Any]]]:
    """Split a 2D cell array into (header row, data rows)."""
    if not rows:
        raise SpreadsheetReadError("Uploaded file is empty or could not be parsed.")
    return rows[0], rows[1:]
