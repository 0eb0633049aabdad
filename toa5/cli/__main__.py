from __future__ import annotations

import argparse
import logging
import os
import sys
from itertools import islice
from pathlib import Path

from dotenv import load_dotenv

from toa5.config.loader import ConfigError, ImportConfig, load_config
from toa5.errors import TOA5Error
from toa5.logging.init import log_summary, set_level, setup_logging
from toa5.services.orchestrator import ProcessingError, process_all, scan_toa5_files
from toa5.services.summary import render_summary_line
from toa5.stream.reader import Reader

"""CLI entrypoint: convert a directory of TOA5 files into long-format CSV.

Flow:
- Load .env, then the YAML config (--config, $TOA5_CONFIG or config/toa5.yml)
- Convert every matching file in source_directory into output_directory
- Print a SUMMARY line and exit with 0 (all ok) / 1 (fatal) / 2 (some files failed)
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1

DEFAULT_CONFIG_PATH = "config/toa5.yml"
INSPECT_SAMPLE_RECORDS = 3


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env using python-dotenv.

    override=True により .env の値で既存環境変数 (TOA5_CONFIG 等) を上書き。
    失敗時は警告を出すのみで続行。
    """
    try:
        if path.exists():
            load_dotenv(dotenv_path=path, override=override)
    except OSError as e:  # pragma: no cover
        print(f"WARNING: failed to load .env via python-dotenv: {e}")


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="toa5-long", description="TOA5 -> long-format CSV converter")
    p.add_argument("--config", type=Path, default=None, help="Path to the YAML config file")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument(
        "--inspect-data", action="store_true", help="Print headers & first records of each file then exit"
    )
    return p.parse_args(argv)


def _inspect_data(cfg: ImportConfig) -> int:
    directory = Path(cfg.source_directory)
    files = scan_toa5_files(directory, cfg.file_pattern)
    if not files:
        print(f"inspect: no {cfg.file_pattern} files")
        return EXIT_SUCCESS_ALL
    options = cfg.reader_options()
    for f in files:
        print(f"FILE: {f.name}")
        try:
            with f.open("r", encoding="utf-8", errors="replace", newline="") as fh:
                reader = Reader(fh, options)
                env = reader.environment()
                print(f"  ENV: station={env.station} model={env.model} program={env.program} table={env.table}")
                print(f"  COLUMNS: {reader.fields()}")
                sample = list(islice(reader, INSPECT_SAMPLE_RECORDS))
        except TOA5Error as e:
            print(f"  read_error: {e}")
            continue
        safe_records = [
            {"timestamp": r.timestamp.isoformat(), "name": r.name, "value": r.value, "unit": r.unit}
            for r in sample
        ]
        print("  sample_records=", safe_records)
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    # NOTE: 空リスト [] が与えられた場合 (テストで cli_main([]) 呼び出し) に
    #       sys.argv[1:] が混入しないよう None のときのみシステム引数を読む。
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path('.env'), override=True)
    # .env の TOA5_LOG_LEVEL を反映させるためロード後に初期化
    logger = setup_logging()

    config_path = args.config or Path(os.getenv("TOA5_CONFIG", DEFAULT_CONFIG_PATH))
    try:
        cfg = load_config(config_path)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    directory = Path(cfg.source_directory)
    if not directory.exists():
        logger.error(f"directory not found: {directory}")
        return EXIT_FATAL

    if args.debug:
        set_level(logging.DEBUG)
        logger.debug("debug mode enabled")

    logger.info(f"Converting files from: {directory} -> {cfg.output_directory}")

    if args.inspect_data:
        try:
            return _inspect_data(cfg)
        except ProcessingError as e:
            logger.error(f"inspect: {e}")
            return EXIT_FATAL

    try:
        result = process_all(cfg)
    except ProcessingError as e:
        logger.error(f"processing: {e}")
        return EXIT_FATAL

    summary_line = render_summary_line(result.total_files, result)
    # log_summary が "SUMMARY " を付与するので取り除く
    log_summary(summary_line.removeprefix("SUMMARY "))

    if result.failed_files > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
