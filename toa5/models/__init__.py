"""Domain models for the TOA5 reader and the long-format conversion tool."""

from .environment import Environment
from .error_record import ErrorRecord
from .options import ReaderOptions
from .processing_result import FileStat, ProcessingResult
from .record import Record

__all__ = [
    # Reader models
    "Environment",
    "ReaderOptions",
    "Record",
    # Processing models
    "ErrorRecord",
    "FileStat",
    "ProcessingResult",
]
