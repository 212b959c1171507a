# src/taskdeck/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path


_CONSOLE_MIN_LEVELS: dict[str, int] = {
    # Store open and schema migrations log at INFO on every start.
    "taskdeck.tasks.task_store": logging.WARNING,
    # Slow-callback and unretrieved-exception reports from the callback listener.
    "asyncio": logging.WARNING,
    # warnings.warn(...) routed through logging.captureWarnings.
    "py.warnings": logging.WARNING,
    "taskdeck": logging.NOTSET,
}


def _console_min_level(name: str) -> int:
    """Longest configured prefix wins; unknown third-party loggers need ERROR+."""
    best, level = "", logging.ERROR
    for prefix, lvl in _CONSOLE_MIN_LEVELS.items():
        if (name == prefix or name.startswith(prefix + ".")) and len(prefix) > len(best):
            best, level = prefix, lvl
    return level


class _ConsoleNoiseFilter(logging.Filter):
    """
    Make interactive console usable:
    - allow taskdeck logs (notifications included)
    - keep the SQLite store, asyncio and captured warnings at WARNING+
    - suppress third-party noise unless ERROR+
    """

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= _console_min_level(record.name)


def setup_logging(
    *,
    log_dir: str | Path = ".local/taskdeck",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> None:
    """
    Configure logging with:
    - Console handler: readable + filtered for interactive use
    - File handler: full logs for debugging

    Call this ONCE, very early (before first logger.info).
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "taskdeck.log"

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    # Remove any pre-existing handlers to avoid duplicates.
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Console (interactive)
    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(console_level)
    ch.setFormatter(fmt)
    ch.addFilter(_ConsoleNoiseFilter())
    root.addHandler(ch)

    # File (everything)
    fh = logging.FileHandler(str(log_file), encoding="utf-8")
    fh.setLevel(file_level)
    fh.setFormatter(fmt)
    root.addHandler(fh)

    # Route warnings.warn(...) into logging as 'py.warnings'
    logging.captureWarnings(True)
