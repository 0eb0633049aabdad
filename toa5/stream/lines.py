from __future__ import annotations

import csv
from collections.abc import Iterable

from ..errors import EndOfStream, MalformedLineError

"""Delimited-line source: splits a text stream into field lists.

Thin wrapper over ``csv.reader`` providing the contract the TOA5 reader needs:
``read()`` returns the next non-blank record, raises ``EndOfStream`` when the
stream is exhausted and ``MalformedLineError`` when the tokenizer rejects a line.
Leading whitespace of each field is trimmed; quoting errors are strict.
"""

__all__ = [
    "DelimitedLineSource",
]


class DelimitedLineSource:
    """Forward-only record source over a text stream.

    The caller owns ``stream`` (open it with ``newline=""``) and is responsible
    for closing it.
    """

    def __init__(self, stream: Iterable[str], *, delimiter: str = ",") -> None:
        self.delimiter = delimiter
        self._reader = csv.reader(stream, delimiter=delimiter, skipinitialspace=True, strict=True)
        self._line_number = 0

    @property
    def line_number(self) -> int:
        """Physical line number of the last record returned (0 before the first read)."""
        return self._line_number

    def read(self) -> list[str]:
        while True:
            try:
                fields = next(self._reader)
            except StopIteration:
                raise EndOfStream() from None
            except csv.Error as e:
                raise MalformedLineError(self._reader.line_num, str(e)) from e
            # 空行は csv.reader では [] になるのでスキップ
            if fields:
                self._line_number = self._reader.line_num
                return fields
