from __future__ import annotations

import logging
import sys
from contextlib import ExitStack
from pathlib import Path
from typing import Any

from tqdm import tqdm
from tqdm.contrib.logging import logging_redirect_tqdm
from tqdm.std import tqdm as TqdmType

from ..logging.init import LOGGER_NAME
from ..models.processing_result import FileStat

"""Progress display for a conversion run (tqdm, TTY only).

One bar over the files of the run; the postfix carries the running totals
(records written, skipped cells, failed files). While the bar is shown the
``toa5`` log lines are routed through ``tqdm.write`` so they do not tear it.
In non-TTY environments (CI, pipes) nothing is drawn.
"""

__all__ = [
    "ProgressTracker",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    """Return True if stdout is a TTY and progress should be displayed."""
    return sys.stdout.isatty()


class ProgressTracker:
    """File-level progress with running record/skip/failure totals."""

    def __init__(self, total_files: int, *, description: str = "Converting files") -> None:
        self.total_files = total_files
        self.description = description
        self.current_file = 0
        self.records = 0
        self.skipped_cells = 0
        self.failed_files = 0

        self.enabled = is_tty_enabled()
        self.pbar: TqdmType[Any] | None = None
        self._stack = ExitStack()
        if self.enabled:
            self.pbar = tqdm(
                total=total_files,
                desc=description,
                unit="file",
                leave=True,
                ncols=80,
                ascii=True,
            )
            self._stack.enter_context(logging_redirect_tqdm(loggers=[logging.getLogger(LOGGER_NAME)]))

    def start_file(self, file_path: Path) -> None:
        self.current_file += 1
        if self.pbar is not None:
            self.pbar.set_description(f"{self.description} ({file_path.name})")

    def finish_file(self, stat: FileStat) -> None:
        """Fold one file's outcome into the totals and advance the bar."""
        self.records += stat.records
        self.skipped_cells += stat.skipped_cells
        if stat.status == "failed":
            self.failed_files += 1

        if self.pbar is not None:
            self.pbar.update(1)
            self.pbar.set_description(self.description)
            self.pbar.set_postfix(
                records=self.records, skipped=self.skipped_cells, failed=self.failed_files
            )

    def close(self) -> None:
        self._stack.close()
        if self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> ProgressTracker:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
