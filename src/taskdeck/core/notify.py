# src/taskdeck/core/notify.py

from __future__ import annotations

import logging

_LEVELS = {
    "success": logging.INFO,
    "info": logging.INFO,
    "error": logging.WARNING,
}


class LoggingNotifier:
    """Notifier that routes toasts into the log (console front-end)."""

    def __init__(self, name: str = "taskdeck.notify") -> None:
        self._logger = logging.getLogger(name)

    def notify(self, level: str, title: str, message: str = "") -> None:
        lvl = _LEVELS.get((level or "").lower(), logging.INFO)
        if message:
            self._logger.log(lvl, "[%s] %s: %s", level, title, message)
        else:
            self._logger.log(lvl, "[%s] %s", level, title)

