# tests/conftest.py

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from pathlib import Path
from types import SimpleNamespace
from typing import Any

import pytest

from taskdeck.core.state import AppState
from taskdeck.tasks.task_models import Task
from taskdeck.tasks.task_store import TaskStore

from .fakes import FakeNotifier

# Wednesday afternoon; week window runs to 2026-03-18 00:00.
FIXED_NOW = datetime(2026, 3, 11, 14, 30)


@pytest.fixture()
def now() -> datetime:
    return FIXED_NOW


@pytest.fixture()
def make_task() -> Callable[..., Task]:
    counter = {"n": 0}

    def _make(**fields: Any) -> Task:
        counter["n"] += 1
        fields.setdefault("id", f"t{counter['n']}")
        fields.setdefault("title", f"Task {counter['n']}")
        fields.setdefault("category", "work")
        fields.setdefault("priority", "medium")
        return Task(**fields)

    return _make


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the console commands.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="taskdeck-test",
        data_dir=tmp_path,
        tasks_db_path=tmp_path / "tasks.sqlite3",
        callback_timeout_seconds=0.2,
        upcoming_limit=5,
        show_completed=False,
        default_sort="dueDate",
        default_sort_order="asc",
    )


@pytest.fixture()
def store(settings: SimpleNamespace) -> TaskStore:
    return TaskStore(settings.tasks_db_path)


@pytest.fixture()
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture()
def state(settings: SimpleNamespace, store: TaskStore, notifier: FakeNotifier) -> AppState:
    """AppState wired with a real SQLite store and a recording notifier."""
    return AppState(settings=settings, task_store=store, notifier=notifier)
