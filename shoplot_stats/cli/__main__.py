from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from shoplot_stats.config.loader import DEFAULT_CONFIG_PATH, ConfigError, DashboardConfig, load_config
from shoplot_stats.errors import IngestionError
from shoplot_stats.excel.columns import resolve_columns
from shoplot_stats.excel.reader import read_spreadsheet, split_header
from shoplot_stats.logging.error_log import ErrorLogBuffer
from shoplot_stats.logging.init import log_summary, set_debug, setup_logging
from shoplot_stats.models.weights import WeightConfiguration
from shoplot_stats.services.session import DashboardSession
from shoplot_stats.services.summary import (
    build_chart_payload,
    format_price,
    format_weight,
    is_not_available,
    render_summary_line,
)

"""CLI entrypoint.

Flow:
- Load .env and the YAML config (optional unless given explicitly)
- Upload the spreadsheet into a DashboardSession
- Print readouts and the SUMMARY line, optionally write the chart payload
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1
EXIT_WEIGHTS_UNBALANCED = 2

CONFIG_ENV_VAR = "SHOPLOT_STATS_CONFIG"


def _load_env_file(path: Path, override: bool = False) -> None:
    """Load .env using python-dotenv (missing file is not an error)."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Shop-lot transaction price statistics")
    p.add_argument("file", type=Path, help="Spreadsheet to upload (.xlsx/.xls/.csv)")
    p.add_argument(
        "--weights",
        nargs=3,
        type=float,
        metavar=("RECENT", "MID", "OLD"),
        help="Bucket weights for >=2020, 2000-2019 and <=1999 (must sum to 1.0)",
    )
    p.add_argument("--config", type=Path, help=f"YAML config path (default: {DEFAULT_CONFIG_PATH})")
    p.add_argument("--chart-json", type=Path, help="Write the yearly median chart payload to this file")
    p.add_argument("--inspect-data", action="store_true", help="Print resolved columns & first rows then exit")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def _resolve_config(args: argparse.Namespace) -> DashboardConfig:
    # 明示指定 (引数 > 環境変数) の場合のみ存在必須
    explicit = args.config or (Path(os.environ[CONFIG_ENV_VAR]) if os.getenv(CONFIG_ENV_VAR) else None)
    if explicit is not None:
        return load_config(explicit)
    if DEFAULT_CONFIG_PATH.exists():
        return load_config(DEFAULT_CONFIG_PATH)
    return DashboardConfig.default()


def _inspect_data(path: Path) -> int:
    try:
        header, data_rows = split_header(read_spreadsheet(path))
    except IngestionError as e:
        print(f"inspect: {e}")
        return EXIT_FATAL
    print(f"FILE: {path.name} header={header}")
    try:
        columns = resolve_columns(header)
        print(
            f"  columns: price={columns.price_index} date={columns.date_index} "
            f"location={columns.location_index}"
        )
    except IngestionError as e:
        print(f"  columns: {e}")
    # datetime 含む場合 JSON 化失敗するため isoformat で fallback
    for row in data_rows[:3]:
        print("    row=", [c.isoformat() if hasattr(c, "isoformat") else c for c in row])
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # None のときのみシステム引数を読む
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"))

    if args.debug:
        set_debug(logger)
        logger.debug("debug mode enabled")

    try:
        cfg = _resolve_config(args)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if args.inspect_data:
        return _inspect_data(args.file)

    try:
        weights = WeightConfiguration(*args.weights) if args.weights else cfg.weights
    except ValueError as e:
        logger.error(f"weights: {e}")
        return EXIT_FATAL

    error_log = ErrorLogBuffer(cfg.error_log_dir)
    session = DashboardSession(weights, error_log=error_log)
    try:
        snapshot = session.upload(args.file)
    except IngestionError:
        logger.error(session.status_message)
        path = error_log.flush()
        if path is not None:
            logger.info(f"error log written: {path}")
        return EXIT_FATAL

    logger.info(session.status_message)
    logger.info(
        "weights: "
        + " ".join(
            f"{label}={format_weight(w)}"
            for label, w in zip(("2020-later", "2000-2019", "1999-earlier"), weights.as_tuple(), strict=True)
        )
    )
    logger.info(f"median price: {format_price(snapshot.median_price, cfg.currency)}")
    logger.info(f"weighted average price: {format_price(snapshot.weighted_average, cfg.currency)}")
    if snapshot.diagnostic_message:
        logger.warning(snapshot.diagnostic_message)
    for year, price in snapshot.yearly_series:
        logger.debug(f"year={year} median={format_price(price, cfg.currency)}")

    if args.chart_json is not None:
        payload = build_chart_payload(snapshot.yearly_series, cfg.currency)
        args.chart_json.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
        logger.info(f"chart payload written: {args.chart_json}")

    # log_summary が "SUMMARY " を付与するため除去
    log_summary(render_summary_line(snapshot, weights)[len("SUMMARY "):])

    if is_not_available(snapshot.weighted_average):
        return EXIT_WEIGHTS_UNBALANCED
    return EXIT_SUCCESS


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
