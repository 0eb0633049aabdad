from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime

"""Record model: one long-format value emitted by the reader."""

__all__ = [
    "Record",
]


@dataclass(frozen=True)
class Record:
    """A single cell of a TOA5 data row together with its column metadata.

    Records are built fresh for every emitted column and are owned by the caller.
    ``value`` is NaN when the cell was empty or not numeric.
    """
    timestamp: datetime  # row timestamp (tz-aware)
    value: float
    name: str
    unit: str
    aggregation: str

    @property
    def is_missing(self) -> bool:
        return math.isnan(self.value)
