from __future__ import annotations

import logging
import re
from datetime import UTC, datetime, tzinfo

from ..errors import TimestampParseError
from ..models.options import DEFAULT_TIME_LAYOUT, FALLBACK_TIME_LAYOUT

"""Timestamp normalizer for the first field of TOA5 data rows."""

__all__ = [
    "TimestampParser",
]

logger = logging.getLogger(__name__)

# サブ秒テーブルの "2020-06-07 23:45:00.5" 形式
_FRACTION = re.compile(r"[.,](\d+)$")


def _strptime(text: str, layout: str) -> datetime:
    """``strptime`` that also accepts a fractional-seconds suffix after ``%S``.

    Digits beyond microsecond precision are truncated.
    """
    try:
        return datetime.strptime(text, layout)
    except ValueError:
        m = _FRACTION.search(text)
        if m is None or "%S" not in layout or "%f" in layout:
            raise
    ts = datetime.strptime(text[:m.start()], layout)
    return ts.replace(microsecond=int(m.group(1)[:6].ljust(6, "0")))


class TimestampParser:
    """Parse row timestamps against an ordered list of layouts.

    The primary layout is tried first, then each fallback in order. The first
    match wins and is attached to ``location``; the local time zone of the
    process is never consulted. A layout ending in seconds also matches the
    same text followed by a fraction (``.5``, ``.125``).
    """

    fallback_layouts: tuple[str, ...] = (FALLBACK_TIME_LAYOUT,)

    def __init__(self, primary_layout: str = DEFAULT_TIME_LAYOUT, location: tzinfo = UTC) -> None:
        self.location = location
        self.layouts: tuple[str, ...] = (primary_layout, *self.fallback_layouts)

    def parse(self, text: str) -> datetime:
        last_error: ValueError | None = None
        for i, layout in enumerate(self.layouts):
            try:
                ts = _strptime(text, layout)
            except ValueError as e:
                last_error = e
                continue
            if i > 0:
                logger.debug(f"timestamp {text!r} parsed with fallback layout {layout!r}")
            return ts.replace(tzinfo=self.location)
        raise TimestampParseError(text, self.layouts) from last_error
