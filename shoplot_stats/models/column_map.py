from __future__ import annotations

from dataclasses import dataclass

"""ColumnMap model: resolved positions of the price, date and location columns.

Built once per upload by the column resolver and immutable afterwards.
"""

__all__ = [
    "ColumnMap",
]


@dataclass(frozen=True)
class ColumnMap:
    """Header positions detected for one uploaded spreadsheet.

    ``None`` means the category was not found in the header row. A usable map
    always has ``price_index`` and ``date_index`` set; the resolver refuses to
    build one otherwise.
    """
    price_index: int | None
    date_index: int | None
    location_index: int | None = None
    location_header: str | None = None  # 表示用のみ (計算には未使用)

    @property
    def has_location(self) -> bool:
        return self.location_index is not None
