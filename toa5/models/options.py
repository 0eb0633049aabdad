from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, tzinfo

"""Reader construction options."""

__all__ = [
    "ReaderOptions",
    "DEFAULT_DELIMITER",
    "DEFAULT_TIME_LAYOUT",
    "FALLBACK_TIME_LAYOUT",
]

DEFAULT_DELIMITER = ","
DEFAULT_TIME_LAYOUT = "%Y-%m-%d %H:%M:%S"
# 秒なしのタイムスタンプ (例: 2020-06-07 23:45) 用フォールバック
FALLBACK_TIME_LAYOUT = "%Y-%m-%d %H:%M"


@dataclass(frozen=True)
class ReaderOptions:
    """Options recognised by ``Reader``.

    Attributes:
        delimiter: Field separator, a single character
        time_layout: Primary ``strptime`` layout for the timestamp column
        time_location: Time zone the timestamps are interpreted in. Never taken
            from the local environment.
    """
    delimiter: str = DEFAULT_DELIMITER
    time_layout: str = DEFAULT_TIME_LAYOUT
    time_location: tzinfo = field(default=UTC)

    def __post_init__(self) -> None:
        if len(self.delimiter) != 1:
            raise ValueError(f"delimiter must be a single character, got {self.delimiter!r}")
        if not self.time_layout:
            raise ValueError("time_layout must not be empty")
