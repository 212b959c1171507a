# src/taskdeck/core/state.py

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any

from .ports import Notifier, TaskRepo


@dataclass
class AppState:
    # Settings object (real Settings or a SimpleNamespace in tests).
    settings: Any

    task_store: TaskRepo
    notifier: Notifier

    user_id: str | None = None
    lock: threading.Lock = field(default_factory=threading.Lock)
