# src/taskdeck/tasks/catalog.py

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from .task_models import Task


@dataclass(frozen=True, slots=True)
class Category:
    id: str
    name: str
    icon: str
    color: str


@dataclass(frozen=True, slots=True)
class PriorityLevel:
    id: str
    name: str
    color: str
    bg_color: str
    text_color: str


TASK_CATEGORIES: tuple[Category, ...] = (
    Category("work", "Work", "briefcase-outline", "#3B82F6"),
    Category("personal", "Personal", "person-outline", "#10B981"),
    Category("shopping", "Shopping", "bag-outline", "#F59E0B"),
    Category("health", "Health", "fitness-outline", "#EF4444"),
    Category("study", "Study", "book-outline", "#8B5CF6"),
    Category("travel", "Travel", "airplane-outline", "#06B6D4"),
)

TASK_PRIORITIES: tuple[PriorityLevel, ...] = (
    PriorityLevel("low", "Low", "#10B981", "#F0FDF4", "#065F46"),
    PriorityLevel("medium", "Medium", "#F59E0B", "#FFFBEB", "#92400E"),
    PriorityLevel("high", "High", "#EF4444", "#FEF2F2", "#991B1B"),
)


def get_category_by_id(category_id: str | None) -> Category:
    """Unknown ids fall back to the first category (work)."""
    for cat in TASK_CATEGORIES:
        if cat.id == category_id:
            return cat
    return TASK_CATEGORIES[0]


def get_priority_by_id(priority_id: str | None) -> PriorityLevel:
    """Unknown ids fall back to medium."""
    for level in TASK_PRIORITIES:
        if level.id == priority_id:
            return level
    return TASK_PRIORITIES[1]


@dataclass(frozen=True, slots=True)
class Progress:
    completed: int
    total: int
    percentage: int


def calculate_progress(tasks: Iterable[Task]) -> Progress:
    items = list(tasks)
    if not items:
        return Progress(completed=0, total=0, percentage=0)
    completed = sum(1 for t in items if t.completed)
    total = len(items)
    return Progress(completed=completed, total=total, percentage=int(100 * completed / total + 0.5))
