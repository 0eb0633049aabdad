from __future__ import annotations

from dataclasses import dataclass

"""Environment model: the first header line of a TOA5 file.

A TOA5 environment line carries 8 fields in fixed order:
filetype, station, model, serial, OS version, program, signature, table.
"""

__all__ = [
    "Environment",
    "TOA5_MARKER",
    "ENVIRONMENT_FIELD_COUNT",
]

TOA5_MARKER = "TOA5"
ENVIRONMENT_FIELD_COUNT = 8


@dataclass(frozen=True)
class Environment:
    """Header line 1 of a TOA5 file. Parsed once per stream, never mutated."""
    filetype: str  # 常に "TOA5"
    station: str
    model: str  # logger model (e.g. CR1000)
    serial: str
    os_version: str
    program: str  # CRBasic program name (e.g. CPU:T1.CR1)
    signature: str
    table: str

    @classmethod
    def from_fields(cls, fields: list[str]) -> Environment:
        """Build from the first 8 fields of a header line; extra fields are ignored."""
        return cls(*fields[:ENVIRONMENT_FIELD_COUNT])
