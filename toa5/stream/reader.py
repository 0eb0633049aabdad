from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Iterator
from datetime import datetime

from ..errors import (
    EmptyRecordNameError,
    EndOfStream,
    NoOptionsProvidedError,
    RowWidthMismatchError,
    TOA5Error,
)
from ..models.environment import Environment
from ..models.options import ReaderOptions
from ..models.record import Record
from .header import parse_header
from .lines import DelimitedLineSource
from .timestamps import TimestampParser

"""Streaming TOA5 reader: wide data rows -> long-format Records.

Construction parses the 4-line header and primes the cursor with the first data
row. Every ``read()`` then advances the cursor by one column and returns one
Record; the timestamp column (index 0) is consumed when a row is loaded and is
never emitted itself, so a row of width W yields W-1 read outcomes.

Error policy:
- non-numeric / empty cell -> value NaN (not an error)
- empty column name -> EmptyRecordNameError (recoverable, cursor already moved)
- anything failing while loading the next row (EndOfStream, malformed line,
  timestamp, row width) is terminal and raised again on every later read
"""

__all__ = [
    "Reader",
    "open_reader",
    "open_reader_with_options",
]

logger = logging.getLogger(__name__)


# float() より狭い数値文法: 区切り "_" や前後空白は数値として扱わない
_INF_LITERALS = frozenset({"inf", "+inf", "-inf", "infinity", "+infinity", "-infinity"})


def _parse_cell(cell: str) -> float:
    """Parse a data cell; anything that is not a plain decimal or hex float is NaN.

    Overflowing literals such as ``1e400`` are NaN too, only an explicit
    ``inf`` / ``infinity`` yields an infinite value.
    """
    if "_" in cell or cell != cell.strip():
        return math.nan
    try:
        value = float(cell)
    except ValueError:
        lowered = cell.lower()
        # 16 進浮動小数は 0x 接頭辞と p 指数が必須
        if "0x" not in lowered[:3] or "p" not in lowered:
            return math.nan
        try:
            value = float.fromhex(cell)
        except (ValueError, OverflowError):
            return math.nan
    if math.isinf(value) and cell.lower() not in _INF_LITERALS:
        return math.nan
    return value


class Reader:
    """Forward-only, single-pass reader over one TOA5 text stream.

    Not safe for concurrent use; create one Reader per stream. The stream is
    owned by the caller.
    """

    def __init__(self, stream: Iterable[str], options: ReaderOptions | None = None) -> None:
        self.options = options if options is not None else ReaderOptions()
        self._source = DelimitedLineSource(stream, delimiter=self.options.delimiter)
        self._timestamps = TimestampParser(self.options.time_layout, self.options.time_location)

        header = parse_header(self._source)
        self._environment = header.environment
        self._fields = header.fields
        self._units = header.units
        self._aggregation = header.aggregation

        # cursor state
        self._row: list[str] = []
        self._column = 0
        self._row_timestamp: datetime
        self._failure: TOA5Error | None = None
        self._skipped_cells = 0

        # 最初のデータ行を読み込む (失敗時はコンストラクタごと失敗)
        self._load_next_row()

    def environment(self) -> Environment:
        return self._environment

    def fields(self) -> list[str]:
        return self._fields

    def units(self) -> list[str]:
        return self._units

    def aggregation(self) -> list[str]:
        return self._aggregation

    @property
    def line_number(self) -> int:
        """Physical line number of the row currently under the cursor."""
        return self._source.line_number

    @property
    def skipped_cells(self) -> int:
        """Number of cells rejected with EmptyRecordNameError so far."""
        return self._skipped_cells

    def read(self) -> Record:
        """Return the Record for the next cell, crossing row boundaries as needed.

        Raises:
            EmptyRecordNameError: column has no name; call read() again to continue
            EndOfStream: no more data (raised again on every later call)
            TOA5Error: other terminal stream errors (malformed line, timestamp, width)
        """
        if self._failure is not None:
            raise self._failure

        column = self._advance()
        value = _parse_cell(self._row[column])

        name = self._fields[column]
        if name == "":
            self._skipped_cells += 1
            raise EmptyRecordNameError(column)

        return Record(
            timestamp=self._row_timestamp,
            value=value,
            name=name,
            unit=self._units[column],
            aggregation=self._aggregation[column],
        )

    def __iter__(self) -> Iterator[Record]:
        """Yield Records until end of stream, skipping cells without a name."""
        while True:
            try:
                yield self.read()
            except EmptyRecordNameError:
                continue
            except EndOfStream:
                return

    def _advance(self) -> int:
        if self._column + 1 < len(self._row):
            return self._advance_within_row()
        return self._advance_across_row()

    def _advance_within_row(self) -> int:
        self._column += 1
        return self._column

    def _advance_across_row(self) -> int:
        try:
            self._load_next_row()
            # timestamp-only rows have no cells to emit
            while len(self._row) < 2:
                self._load_next_row()
        except TOA5Error as e:
            self._failure = e
            raise
        return self._advance_within_row()

    def _load_next_row(self) -> None:
        row = self._source.read()
        line = self._source.line_number

        expected = len(self._fields)
        if len(row) != expected:
            raise RowWidthMismatchError(line, expected, len(row))
        for metadata, values in (("units", self._units), ("aggregation", self._aggregation)):
            if len(values) < expected:
                raise RowWidthMismatchError(line, len(values), len(row), metadata=metadata)

        timestamp = self._timestamps.parse(row[0])

        self._row = row
        self._row_timestamp = timestamp
        self._column = 0
        logger.debug(f"line {line}: row loaded ts={timestamp.isoformat()} width={len(row)}")


def open_reader(stream: Iterable[str]) -> Reader:
    """Open a reader with default options (comma, %Y-%m-%d %H:%M:%S, UTC)."""
    return Reader(stream, ReaderOptions())


def open_reader_with_options(stream: Iterable[str], options: ReaderOptions | None) -> Reader:
    """Open a reader with explicit options; ``None`` is rejected."""
    if options is None:
        raise NoOptionsProvidedError()
    return Reader(stream, options)
