# Shared pytest fixtures
from __future__ import annotations

import tempfile
from collections.abc import Callable
from pathlib import Path

import pandas as pd
import pytest

from shoplot_stats.logging.init import reset_logging


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        monkeypatch.delenv("SHOPLOT_STATS_CONFIG", raising=False)
        yield p


@pytest.fixture(autouse=True)
def _clean_logging():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def sample_config_yaml() -> str:
    return """weights:
  recent: 0.5
  mid: 0.3
  old: 0.2
currency: RM
error_log_dir: ./logs
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "dashboard.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def make_spreadsheet(temp_workdir: Path) -> Callable[[str, list[list[object]]], Path]:
    """Write rows (header first) to an .xlsx or .csv file under data/."""
    def _make(name: str, rows: list[list[object]]) -> Path:
        p = temp_workdir / "data" / name
        df = pd.DataFrame(rows)
        if p.suffix == ".csv":
            df.to_csv(p, header=False, index=False)
        else:
            with pd.ExcelWriter(p, engine="openpyxl") as writer:
                df.to_excel(writer, sheet_name="Sheet1", header=False, index=False)
        return p
    return _make
