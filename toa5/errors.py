from __future__ import annotations

"""Exception taxonomy for the TOA5 reader.

Construction errors (NotTOA5Error / TruncatedHeaderError / NoOptionsProvidedError)
abort ``Reader`` creation. Stream errors raised while advancing rows are terminal:
the reader remembers the first one and raises it again on every later read.
``EmptyRecordNameError`` is the only recoverable error.
"""

__all__ = [
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


class TOA5Error(Exception):
    """Base class for all reader errors."""


class NotTOA5Error(TOA5Error):
    """Raised when the first header field is not the TOA5 marker."""

    def __init__(self, filetype: str) -> None:
        super().__init__(f"no TOA5 file (filetype={filetype!r})")
        self.filetype = filetype


class TruncatedHeaderError(TOA5Error):
    """Raised when the environment line has fewer than 8 fields."""

    def __init__(self, got: int, expected: int = 8) -> None:
        super().__init__(f"environment line has missing fields: got {got}, expected {expected}")
        self.got = got
        self.expected = expected


class NoOptionsProvidedError(TOA5Error):
    """Raised when options were explicitly requested but None was given."""

    def __init__(self) -> None:
        super().__init__("no options provided")


class EndOfStream(TOA5Error, EOFError):
    """No more records in the underlying stream."""

    def __init__(self, message: str = "end of stream") -> None:
        super().__init__(message)


class MalformedLineError(TOA5Error):
    """The delimited-line tokenizer rejected a line."""

    def __init__(self, line: int, reason: str) -> None:
        super().__init__(f"malformed line {line}: {reason}")
        self.line = line
        self.reason = reason


class TimestampParseError(TOA5Error):
    """No configured layout matched the row's timestamp field."""

    def __init__(self, text: str, layouts: tuple[str, ...]) -> None:
        super().__init__(f"cannot parse timestamp {text!r} with layouts {list(layouts)}")
        self.text = text
        self.layouts = layouts


class RowWidthMismatchError(TOA5Error):
    """A data row does not have the width announced by the header.

    With ``metadata`` set ("units" or "aggregation") the data row itself matches
    the fields line but that metadata line is too short to describe it:
    ``expected`` is then the metadata line width and ``got`` the row width.
    """

    def __init__(self, line: int, expected: int, got: int, *, metadata: str | None = None) -> None:
        if metadata is None:
            message = f"row width mismatch at line {line}: expected {expected} fields, got {got}"
        else:
            message = (
                f"row width mismatch at line {line}: {metadata} line has {expected} fields, "
                f"data row has {got}"
            )
        super().__init__(message)
        self.line = line
        self.expected = expected
        self.got = got
        self.metadata = metadata


class EmptyRecordNameError(TOA5Error):
    """The current column has no name; the cell is skipped, the cursor has moved on."""

    def __init__(self, column: int) -> None:
        super().__init__(f"empty record name (column {column})")
        self.column = column
