from __future__ import annotations

import re
from datetime import datetime

from shoplot_stats.cli.__main__ import main as cli_main

SUMMARY_REGEX = re.compile(
    r"^SUMMARY records=(\d+) median=(\d+\.\d{2}) weighted_avg=(\d+\.\d{2}|N/A) years=(\d+) "
    r"weights=(\d+\.\d{2})/(\d+\.\d{2})/(\d+\.\d{2})$",
    re.MULTILINE,
)


def test_summary_line_contract(make_spreadsheet, capsys):
    path = make_spreadsheet(
        "sales.xlsx",
        [
            ["Price", "Date"],
            [100, datetime(2021, 1, 1)],
            [200, datetime(2021, 6, 1)],
            [300, datetime(1995, 1, 1)],
        ],
    )
    cli_main([str(path), "--weights", "1", "0", "0"])
    out = capsys.readouterr().out
    lines = [line for line in out.splitlines() if line.startswith("SUMMARY")]
    assert len(lines) == 1
    m = SUMMARY_REGEX.match(lines[0])
    assert m is not None, lines[0]
    assert m.group(1) == "3"
    assert m.group(3) == "150.00"
    assert m.group(4) == "2"
