"""TOA5 stream parsing: line source, header, timestamps and the row/column cursor."""

from .header import Header, parse_header
from .lines import DelimitedLineSource
from .reader import Reader, open_reader, open_reader_with_options
from .timestamps import TimestampParser

__all__ = [
    "DelimitedLineSource",
    "Header",
    "parse_header",
    "Reader",
    "open_reader",
    "open_reader_with_options",
    "TimestampParser",
]
