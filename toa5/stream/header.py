from __future__ import annotations

import logging
from dataclasses import dataclass

from ..errors import NotTOA5Error, TruncatedHeaderError
from ..models.environment import ENVIRONMENT_FIELD_COUNT, TOA5_MARKER, Environment
from .lines import DelimitedLineSource

"""TOA5 header block parser (4 lines: environment, fields, units, aggregation)."""

__all__ = [
    "Header",
    "parse_header",
    "parse_environment",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Header:
    environment: Environment
    fields: list[str]
    units: list[str]
    aggregation: list[str]


def parse_environment(fields: list[str]) -> Environment:
    """Validate header line 1 and build the Environment.

    Raises:
        NotTOA5Error: first field is not "TOA5" (checked before the field count)
        TruncatedHeaderError: fewer than 8 fields
    """
    if fields[0] != TOA5_MARKER:
        raise NotTOA5Error(fields[0])
    if len(fields) < ENVIRONMENT_FIELD_COUNT:
        raise TruncatedHeaderError(len(fields), ENVIRONMENT_FIELD_COUNT)
    return Environment.from_fields(fields)


def parse_header(source: DelimitedLineSource) -> Header:
    """Consume exactly four records from ``source``.

    Errors of the underlying source (including EndOfStream) propagate unchanged.
    Metadata lines are stored verbatim; widths are checked later per data row.
    """
    environment = parse_environment(source.read())
    fields = source.read()
    units = source.read()
    aggregation = source.read()
    logger.debug(
        f"header parsed: station={environment.station} table={environment.table} "
        f"columns={len(fields)}"
    )
    return Header(environment=environment, fields=fields, units=units, aggregation=aggregation)
