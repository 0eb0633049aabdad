from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

import pandas as pd

from ..models.environment import Environment
from ..models.options import ReaderOptions
from ..models.record import Record
from ..stream.reader import Reader

"""Long-format DataFrame helpers built on top of the streaming reader."""

__all__ = [
    "LONG_COLUMNS",
    "records_to_frame",
    "read_long_frame",
]

LONG_COLUMNS = ["timestamp", "value", "name", "unit", "aggregation"]


def records_to_frame(records: Iterable[Record]) -> pd.DataFrame:
    """Collect Records into a long-format DataFrame (one row per Record).

    ``timestamp`` becomes a UTC datetime64 column, ``value`` float64 (NaN kept).
    """
    df = pd.DataFrame(
        [(r.timestamp, r.value, r.name, r.unit, r.aggregation) for r in records],
        columns=LONG_COLUMNS,
    )
    if df.empty:
        return df.astype({"value": "float64"})
    df["timestamp"] = pd.to_datetime(df["timestamp"], utc=True)
    df["value"] = df["value"].astype("float64")
    return df


def read_long_frame(
    path: Path, options: ReaderOptions | None = None
) -> tuple[Environment, pd.DataFrame, int]:
    """Read a whole TOA5 file into a long-format DataFrame.

    Returns:
        (environment, frame, skipped_cells)

    Raises:
        TOA5Error: construction errors and terminal stream errors other than
            end of stream
    """
    with path.open("r", encoding="utf-8", errors="replace", newline="") as fh:
        reader = Reader(fh, options)
        frame = records_to_frame(reader)
        return reader.environment(), frame, reader.skipped_cells
