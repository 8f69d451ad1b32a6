from __future__ import annotations

import pytest

from shoplot_stats.errors import ColumnResolutionError
from shoplot_stats.excel.columns import resolve_columns


def test_resolve_standard_headers():
    cmap = resolve_columns(["Location", "Transaction Date", "Price"])
    assert cmap.price_index == 2
    assert cmap.date_index == 1
    assert cmap.location_index == 0
    assert cmap.location_header == "Location"


def test_resolve_is_case_insensitive_and_trims():
    cmap = resolve_columns(["  SHOP LOT PRICE ", "Sales Date", " District"])
    assert cmap.price_index == 0
    assert cmap.date_index == 1
    assert cmap.location_index == 2
    # 表示用に元のヘッダ文字列を保持
    assert cmap.location_header == " District"


def test_first_match_wins_lowest_index():
    cmap = resolve_columns(["Amount", "Date", "Price", "Buy Date", "Area", "Region"])
    assert cmap.price_index == 0
    assert cmap.date_index == 1
    assert cmap.location_index == 4
    assert cmap.location_header == "Area"


def test_location_is_optional():
    cmap = resolve_columns(["value", "date"])
    assert cmap.location_index is None
    assert cmap.location_header is None
    assert cmap.has_location is False


def test_none_and_blank_headers_are_skipped():
    cmap = resolve_columns([None, "", "price", None, "transaction date"])
    assert cmap.price_index == 2
    assert cmap.date_index == 4


def test_non_string_header_cells_are_stringified():
    cmap = resolve_columns([2021, "Price", "Date"])
    assert cmap.price_index == 1
    assert cmap.date_index == 2


def test_missing_price_column_raises():
    with pytest.raises(ColumnResolutionError) as e:
        resolve_columns(["Transaction Date", "Location", "Cost"])
    assert "Price" in str(e.value)


def test_missing_date_column_raises():
    with pytest.raises(ColumnResolutionError):
        resolve_columns(["Price", "Location", "Year"])


def test_partial_synonym_does_not_match():
    with pytest.raises(ColumnResolutionError):
        resolve_columns(["Price (RM)", "Date"])
