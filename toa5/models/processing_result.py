from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

"""Processing result models for the TOA5 long-format conversion tool.

FileStat holds per-file metrics; ProcessingResult aggregates them for the
SUMMARY output line.
"""

__all__ = [
    "FileStat",
    "ProcessingResult",
]


@dataclass(frozen=True)
class FileStat:
    """Per-file processing statistics."""
    file_name: str  # ファイル名
    status: str  # success/failed
    records: int  # 書き出したレコード数
    skipped_cells: int  # EmptyRecordName で飛ばしたセル数
    elapsed_seconds: float  # ファイル処理時間
    output_path: str | None = None  # 成功時の出力 CSV
    error: str | None = None  # 失敗理由


@dataclass(frozen=True)
class ProcessingResult:
    """Aggregated results and metrics for one CLI run."""
    success_files: int
    failed_files: int
    total_records: int
    skipped_cells: int
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float  # end - start
    throughput_records_per_sec: float  # total_records / elapsed
    file_stats: list[FileStat] | None = None

    @property
    def total_files(self) -> int:
        return self.success_files + self.failed_files
