from __future__ import annotations

import logging
import os
import sys

"""Labeled stdout logging for the toa5 tools.

Every line starts with one of DEBUG|INFO|WARN|ERROR|SUMMARY. Library modules
log through ``logging.getLogger(__name__)``; being children of ``toa5`` their
records end up in the single stdout handler installed here.

The initial level comes from the ``level`` argument, else ``$TOA5_LOG_LEVEL``
(which a ``.env`` file may set), else INFO. ``set_level`` changes it later,
e.g. for ``--debug``.
"""

__all__ = [
    "setup_logging",
    "set_level",
    "get_logger",
    "log_summary",
    "reset_logging",
    "LabeledFormatter",
    "LOGGER_NAME",
    "LOG_LEVEL_ENV",
    "SUMMARY_LEVEL",
]

LOGGER_NAME = "toa5"
LOG_LEVEL_ENV = "TOA5_LOG_LEVEL"

# INFO(20) と WARNING(30) の間
SUMMARY_LEVEL = 25
logging.addLevelName(SUMMARY_LEVEL, "SUMMARY")

_logger: logging.Logger | None = None


class LabeledFormatter(logging.Formatter):
    """``LABEL message``; WARNING is shortened to WARN, tracebacks follow on new lines."""

    LEVEL_LABELS = {
        logging.DEBUG: "DEBUG",
        logging.INFO: "INFO",
        logging.WARNING: "WARN",
        logging.ERROR: "ERROR",
        logging.CRITICAL: "CRITICAL",
        SUMMARY_LEVEL: "SUMMARY",
    }

    def format(self, record: logging.LogRecord) -> str:
        label = self.LEVEL_LABELS.get(record.levelno, record.levelname)
        text = f"{label} {record.getMessage()}"
        if record.exc_info:
            text += "\n" + self.formatException(record.exc_info)
        return text


def _coerce_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    mapping = logging.getLevelNamesMapping()
    key = level.strip().upper()
    if key == "WARN":
        key = "WARNING"
    if key not in mapping:
        raise ValueError(f"unknown log level: {level!r}")
    return mapping[key]


def set_level(level: int | str) -> None:
    """Apply ``level`` to the ``toa5`` logger and all of its handlers."""
    numeric = _coerce_level(level)
    logger = get_logger()
    logger.setLevel(numeric)
    for handler in logger.handlers:
        handler.setLevel(numeric)


def setup_logging(level: int | str | None = None) -> logging.Logger:
    """Install the labeled stdout handler on the ``toa5`` logger.

    Idempotent: later calls return the configured logger (applying ``level``
    when one is given).
    """
    global _logger

    if _logger is not None:
        if level is not None:
            set_level(level)
        return _logger

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.NOTSET)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(LabeledFormatter())
    logger.addHandler(handler)
    # ルートロガーへ流すと二重出力になる
    logger.propagate = False
    _logger = logger

    if level is None:
        env_level = os.getenv(LOG_LEVEL_ENV)
        try:
            level = _coerce_level(env_level) if env_level else logging.INFO
        except ValueError as e:
            logger.warning(f"{LOG_LEVEL_ENV}: {e}, using INFO")
            level = logging.INFO
    set_level(level)
    return logger


def get_logger() -> logging.Logger:
    """Return the application logger, configuring it on first use."""
    if _logger is None:
        return setup_logging()
    return _logger


def log_summary(message: str) -> None:
    get_logger().log(SUMMARY_LEVEL, message)


def reset_logging() -> None:
    """Forget the configured logger so the next setup_logging() starts fresh (tests)."""
    global _logger
    _logger = None
