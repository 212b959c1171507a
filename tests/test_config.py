# tests/test_config.py

from __future__ import annotations

from pathlib import Path

from taskdeck.config import Settings

_VARS = (
    "APP_NAME",
    "LOG_LEVEL",
    "DATA_DIR",
    "TASKS_DB_PATH",
    "CALLBACK_TIMEOUT_SECONDS",
    "UPCOMING_LIMIT",
    "SHOW_COMPLETED",
    "DEFAULT_SORT",
    "DEFAULT_SORT_ORDER",
)


def _clear(monkeypatch) -> None:
    for name in _VARS:
        monkeypatch.delenv(f"TASKDECK_{name}", raising=False)


def test_defaults(monkeypatch) -> None:
    _clear(monkeypatch)

    s = Settings.from_env()

    assert s.app_name == "taskdeck"
    assert s.data_dir == Path(".local/taskdeck")
    assert s.tasks_db_path == Path(".local/taskdeck") / "tasks.sqlite3"
    assert s.callback_timeout_seconds == 5.0
    assert s.upcoming_limit == 5
    assert s.show_completed is False
    assert (s.default_sort, s.default_sort_order) == ("dueDate", "asc")


def test_overrides(monkeypatch, tmp_path) -> None:
    _clear(monkeypatch)
    monkeypatch.setenv("TASKDECK_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("TASKDECK_CALLBACK_TIMEOUT_SECONDS", "2.5")
    monkeypatch.setenv("TASKDECK_UPCOMING_LIMIT", "10")
    monkeypatch.setenv("TASKDECK_SHOW_COMPLETED", "yes")
    monkeypatch.setenv("TASKDECK_DEFAULT_SORT", "priority")

    s = Settings.from_env()

    assert s.data_dir == tmp_path
    assert s.tasks_db_path == tmp_path / "tasks.sqlite3"
    assert s.callback_timeout_seconds == 2.5
    assert s.upcoming_limit == 10
    assert s.show_completed is True
    assert s.default_sort == "priority"


def test_bad_numbers_fall_back(monkeypatch) -> None:
    _clear(monkeypatch)
    monkeypatch.setenv("TASKDECK_CALLBACK_TIMEOUT_SECONDS", "-3")
    monkeypatch.setenv("TASKDECK_UPCOMING_LIMIT", "many")

    s = Settings.from_env()

    assert s.callback_timeout_seconds == 0.0
    assert s.upcoming_limit == 5
