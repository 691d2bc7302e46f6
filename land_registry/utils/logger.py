"""Logging setup for the land registry client."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

APP_LOGGER = "land_registry"

_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def _coerce_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName((level or "").strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logger(
    name: str = APP_LOGGER,
    level: int | str = logging.INFO,
    log_file: Path | None = None,
) -> logging.Logger:
    """
    Configure and return the application logger.

    Handlers are attached once; later calls only return the logger, so the
    Streamlit script can call this on every rerun.

    Args:
        name: Logger name. Child loggers (land_registry.*) propagate to it.
        level: Logging level, as an int or a name such as "DEBUG".
        log_file: Optional path to a log file. If None, logs to stderr only.
    """
    log = logging.getLogger(name)
    if log.handlers:
        return log

    log.setLevel(_coerce_level(level))
    fmt = logging.Formatter(_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    stream = logging.StreamHandler(sys.stderr)
    stream.setFormatter(fmt)
    log.addHandler(stream)

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setFormatter(fmt)
        log.addHandler(fh)

    return log


def get_logger(name: str | None = None) -> logging.Logger:
    """Return the app logger, or a child of it (get_logger("stores") -> land_registry.stores)."""
    if not name:
        return logging.getLogger(APP_LOGGER)
    return logging.getLogger(f"{APP_LOGGER}.{name}")


def mask_secret(value: str | None, keep: int = 4) -> str:
    """Show only the last few characters of a key or token in log output."""
    if not value:
        return "<unset>"
    if len(value) <= keep:
        return "…"
    return f"…{value[-keep:]}"
