from __future__ import annotations

import argparse
import sys
from pathlib import Path

from dotenv import load_dotenv

from flood_reports.config.loader import ConfigError, ReportConfig, resolve_config
from flood_reports.logging.init import log_summary, set_debug, setup_logging
from flood_reports.services.orchestrator import LoadError, ProcessingError, load_table, run
from flood_reports.services.summary import render_summary_line

"""CLI entrypoint.

Flow:
- Load .env (overrides the process environment)
- Resolve config (flags > env > YAML > defaults)
- Run the pipeline and log the SUMMARY line

Exit codes: 0 on success, 1 on any fatal error (config, load, write).
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env using python-dotenv.

    override=True により .env の値で既存環境変数を上書き。
    """
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Flood-control project CSV -> analytical reports")
    p.add_argument("--config", type=Path, default=None, help="YAML config (default: config/reports.yml if present)")
    p.add_argument("--input", dest="input_file", default=None, help="Input CSV file")
    p.add_argument("--output-dir", dest="output_directory", default=None, help="Directory for reports")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--inspect-data", action="store_true", help="Print CSV header & first rows then exit")
    return p.parse_args(argv)


def _inspect_data(cfg: ReportConfig) -> int:
    try:
        table = load_table(cfg)
    except LoadError as e:
        print(f"inspect: {e}")
        return EXIT_FATAL
    print(f"FILE: {table.source} rows={len(table.rows)}")
    print(f"  cols={table.columns}")
    for row in table.rows[:3]:
        print("    sample_row=", row)
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # [] が渡された場合に sys.argv (pytest の引数) を読まないよう None のみ判定
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)

    if args.debug:
        set_debug(logger)
        logger.debug("debug mode enabled")

    _load_env_file(Path(".env"), override=True)
    try:
        cfg = resolve_config(
            args.config,
            input_file=args.input_file,
            output_directory=args.output_directory,
        )
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if args.inspect_data:
        return _inspect_data(cfg)

    try:
        result = run(cfg)
    except ProcessingError as e:
        logger.error(f"processing: {e}")
        return EXIT_FATAL

    summary_line = render_summary_line(result)
    # log_summary が "SUMMARY " を付与するので除去
    log_summary(summary_line[len("SUMMARY "):])
    return EXIT_SUCCESS


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
