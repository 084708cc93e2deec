"""Logging for repostats with the mining stage attached to each record."""

from __future__ import annotations

import logging
from pathlib import Path

from .errors import RepoStatsError

_ROOT_LOGGER = "repostats"
_CONSOLE_FORMAT = "[repostats] %(levelname)s %(stage_prefix)s%(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(stage)s] %(message)s"


class StageFilter(logging.Filter):
    """Fills in ``stage`` for records logged without ``extra={"stage": ...}``."""

    def filter(self, record: logging.LogRecord) -> bool:
        stage = getattr(record, "stage", None)
        if stage == "-":
            stage = None
        record.stage = stage or "-"
        record.stage_prefix = f"{stage}: " if stage else ""
        return True


def get_logger(name: str | None = None) -> logging.Logger:
    """Return ``repostats`` or one of its children (``get_logger("miner")``)."""
    return logging.getLogger(f"{_ROOT_LOGGER}.{name}" if name else _ROOT_LOGGER)


def parse_level(value: str | int | None, default: int = logging.DEBUG) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        level = logging.getLevelName(value.strip().upper())
        if isinstance(level, int):
            return level
    return default


def configure_logging(
    *,
    verbose: bool = False,
    log_file: Path | None = None,
    file_level: str | int | None = None,
) -> logging.Logger:
    """Send ``repostats.*`` records to stderr and, optionally, to ``log_file``.

    The console shows INFO (DEBUG with ``verbose``); the file sink keeps
    ``file_level`` and above, DEBUG unless configured otherwise. Calling this
    again replaces the previous handlers.
    """
    console_level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_ROOT_LOGGER)
    logger.propagate = False
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler()
    console.setLevel(console_level)
    console.addFilter(StageFilter())
    console.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    logger.addHandler(console)
    levels = [console_level]

    if log_file is not None:
        sink_level = parse_level(file_level)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        sink = logging.FileHandler(log_file, encoding="utf-8")
        sink.setLevel(sink_level)
        sink.addFilter(StageFilter())
        sink.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(sink)
        levels.append(sink_level)

    logger.setLevel(min(levels))
    return logger


def log_failure(logger: logging.Logger, exc: RepoStatsError) -> None:
    """Record a failed pass at DEBUG, tagged with the stage that raised it."""
    path = getattr(exc, "path", None)
    logger.debug(
        "%s%s",
        exc,
        f" [{path}]" if path else "",
        exc_info=exc,
        extra={"stage": getattr(exc, "stage", None)},
    )


__all__ = ["StageFilter", "configure_logging", "get_logger", "log_failure", "parse_level"]
