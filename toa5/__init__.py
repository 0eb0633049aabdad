"""Streaming reader for Campbell Scientific TOA5 data logger files.

Turns the wide TOA5 layout (one row per timestamp) into long-format Records
(one per timestamp and column) without loading the whole file.
"""

from .errors import (
    EmptyRecordNameError,
    EndOfStream,
    MalformedLineError,
    NoOptionsProvidedError,
    NotTOA5Error,
    RowWidthMismatchError,
    TimestampParseError,
    TOA5Error,
    TruncatedHeaderError,
)
from .models import Environment, ReaderOptions, Record
from .stream import Reader, open_reader, open_reader_with_options

__all__ = [
    "Reader",
    "open_reader",
    "open_reader_with_options",
    "Environment",
    "ReaderOptions",
    "Record",
    "TOA5Error",
    "NotTOA5Error",
    "TruncatedHeaderError",
    "NoOptionsProvidedError",
    "EndOfStream",
    "MalformedLineError",
    "TimestampParseError",
    "RowWidthMismatchError",
    "EmptyRecordNameError",
]
