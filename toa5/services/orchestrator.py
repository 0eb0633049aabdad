from __future__ import annotations

import logging
import time
from datetime import UTC, datetime
from pathlib import Path

from ..config.loader import ImportConfig
from ..errors import (
    EndOfStream,
    MalformedLineError,
    NotTOA5Error,
    RowWidthMismatchError,
    TimestampParseError,
    TOA5Error,
    TruncatedHeaderError,
)
from ..logging.error_log import ErrorLogBuffer, ErrorRecord
from ..models.options import ReaderOptions
from ..models.processing_result import FileStat, ProcessingResult
from ..stream.reader import Reader
from .frame import records_to_frame
from .progress import ProgressTracker

logger = logging.getLogger(__name__)

"""Service orchestration for the TOA5 long-format conversion tool.

Scans the source directory, converts every TOA5 file into a long-format CSV,
aggregates metrics and returns a ProcessingResult. A failing file never stops
the run: it is recorded in the error log and counted as failed.
"""

OUTPUT_SUFFIX = ".long.csv"

# 例外クラス -> error_type (UPPER_SNAKE)
ERROR_TYPES: dict[type[TOA5Error], str] = {
    NotTOA5Error: "NOT_TOA5",
    TruncatedHeaderError: "TRUNCATED_HEADER",
    EndOfStream: "UNEXPECTED_END_OF_STREAM",
    MalformedLineError: "MALFORMED_LINE",
    TimestampParseError: "TIMESTAMP_PARSE",
    RowWidthMismatchError: "ROW_WIDTH_MISMATCH",
}


class ProcessingError(Exception):
    """Fatal error that prevents processing (exit code 1)."""
    pass


def scan_toa5_files(directory: Path, pattern: str = "*.dat") -> list[Path]:
    """Scan directory for TOA5 files matching ``pattern`` (non-recursive, sorted).

    Raises:
        ProcessingError: If directory doesn't exist or can't be read
    """
    if not directory.exists():
        raise ProcessingError(f"Directory not found: {directory}")

    if not directory.is_dir():
        raise ProcessingError(f"Path is not a directory: {directory}")

    try:
        return sorted(p for p in directory.glob(pattern) if p.is_file())
    except OSError as e:
        raise ProcessingError(f"Error reading directory {directory}: {e}") from e


def output_path_for(source: Path, output_directory: Path) -> Path:
    return output_directory / f"{source.stem}{OUTPUT_SUFFIX}"


def convert_file(
    path: Path, output_directory: Path, options: ReaderOptions, error_log: ErrorLogBuffer
) -> FileStat:
    """Convert one TOA5 file into a long-format CSV.

    The CSV is written only after the whole file was read, so a failing file
    leaves no partial output behind.
    """
    t0 = time.perf_counter()
    reader: Reader | None = None
    try:
        with path.open("r", encoding="utf-8", errors="replace", newline="") as fh:
            reader = Reader(fh, options)
            frame = records_to_frame(reader)
        out = output_path_for(path, output_directory)
        frame.to_csv(out, index=False)
    except TOA5Error as e:
        line = getattr(e, "line", None)
        if line is None:
            line = reader.line_number if reader is not None else -1
        error_type = ERROR_TYPES.get(type(e), "READ_ERROR")
        logger.warning(f"{path.name}: {error_type} line={line}: {e}")
        error_log.append(ErrorRecord.create(path.name, line, error_type, str(e)))
        return FileStat(
            file_name=path.name,
            status="failed",
            records=0,
            skipped_cells=reader.skipped_cells if reader is not None else 0,
            elapsed_seconds=time.perf_counter() - t0,
            error=str(e),
        )
    except OSError as e:
        logger.warning(f"{path.name}: FILE_IO_ERROR: {e}")
        error_log.append(ErrorRecord.create(path.name, -1, "FILE_IO_ERROR", str(e)))
        return FileStat(
            file_name=path.name,
            status="failed",
            records=0,
            skipped_cells=0,
            elapsed_seconds=time.perf_counter() - t0,
            error=str(e),
        )

    env = reader.environment()
    logger.info(
        f"{path.name}: station={env.station} table={env.table} "
        f"records={len(frame)} skipped_cells={reader.skipped_cells} -> {out.name}"
    )
    return FileStat(
        file_name=path.name,
        status="success",
        records=len(frame),
        skipped_cells=reader.skipped_cells,
        elapsed_seconds=time.perf_counter() - t0,
        output_path=str(out),
    )


def process_all(config: ImportConfig) -> ProcessingResult:
    """Convert all TOA5 files in the configured source directory.

    Steps:
    1. Scan the source directory for files matching ``file_pattern``
    2. Convert each file (failures are isolated per file)
    3. Flush the error log and aggregate metrics

    Raises:
        ProcessingError: For fatal errors that prevent processing
    """
    start_time = datetime.now(UTC)
    error_log = ErrorLogBuffer()

    try:
        options = config.reader_options()
    except ValueError as e:
        raise ProcessingError(f"Invalid configuration: {e}") from e

    file_paths = scan_toa5_files(Path(config.source_directory), config.file_pattern)

    output_directory = Path(config.output_directory)
    try:
        output_directory.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ProcessingError(f"Cannot create output directory {output_directory}: {e}") from e

    file_stats: list[FileStat] = []
    with ProgressTracker(len(file_paths)) as progress:
        for path in file_paths:
            progress.start_file(path)
            stat = convert_file(path, output_directory, options, error_log)
            file_stats.append(stat)
            progress.finish_file(stat)

    log_path = error_log.flush()
    if log_path is not None:
        logger.info(f"error log written: {log_path}")

    end_time = datetime.now(UTC)
    elapsed = (end_time - start_time).total_seconds()
    total_records = sum(s.records for s in file_stats)
    return ProcessingResult(
        success_files=sum(1 for s in file_stats if s.status == "success"),
        failed_files=sum(1 for s in file_stats if s.status == "failed"),
        total_records=total_records,
        skipped_cells=sum(s.skipped_cells for s in file_stats),
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=elapsed,
        throughput_records_per_sec=(total_records / elapsed) if elapsed > 0 else 0.0,
        file_stats=file_stats,
    )
