from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ErrorRecord model for error logging.

This module defines the ErrorRecord dataclass used for structured error logging
while converting TOA5 files. It supports line=-1 as a sentinel value for
file-level errors where the offending line cannot be determined.

The ErrorRecord adheres to the JSON schema in toa5/config/error_log_schema.json.
"""

__all__ = [
    "ErrorRecord",
]


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: TOA5 filename being processed
        line: Physical line number (1-based). Use -1 when the line is unknown
        error_type: Error classification in UPPER_SNAKE_CASE format
        message: Human readable error description
    """
    timestamp: str  # ISO8601 UTC
    file: str
    line: int  # 行番号。不明な場合 -1 許容
    error_type: str  # UPPER_SNAKE
    message: str

    @staticmethod
    def create(file: str, line: int, error_type: str, message: str) -> ErrorRecord:
        """Create a new ErrorRecord with current UTC timestamp.

        Parameters:
            file: TOA5 filename being processed
            line: Line number (1-based). Use -1 for file-level errors
            error_type: Error classification in UPPER_SNAKE_CASE format
            message: Error description

        Returns:
            New ErrorRecord instance with current UTC timestamp
        """
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            file=file,
            line=line,
            error_type=error_type,
            message=message,
        )

    def to_json_line(self) -> str:
        """Serialize ErrorRecord to JSON Lines format.

        Returns:
            JSON string representation without extra keys
        """
        # 追加キー阻止: dataclass -> dict して json.dumps
        return json.dumps(asdict(self), ensure_ascii=False)
