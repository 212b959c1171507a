# tests/test_catalog.py

from __future__ import annotations

from taskdeck.tasks.catalog import (
    TASK_CATEGORIES,
    calculate_progress,
    get_category_by_id,
    get_priority_by_id,
)


def test_lookup_by_id() -> None:
    assert get_category_by_id("travel").name == "Travel"
    assert get_priority_by_id("high").name == "High"


def test_unknown_ids_fall_back() -> None:
    assert get_category_by_id("gardening") is TASK_CATEGORIES[0]
    assert get_category_by_id(None).id == "work"
    assert get_priority_by_id("urgent").id == "medium"


def test_calculate_progress(make_task) -> None:
    assert calculate_progress([]).percentage == 0

    tasks = [make_task(completed=True), make_task(), make_task()]
    progress = calculate_progress(tasks)
    assert (progress.completed, progress.total, progress.percentage) == (1, 3, 33)
