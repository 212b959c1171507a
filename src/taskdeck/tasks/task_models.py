# src/taskdeck/tasks/task_models.py

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any

from .dates import parse_timestamp


class Priority(StrEnum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def weight(self) -> int:
        return _PRIORITY_WEIGHTS[self]

    @classmethod
    def weight_of(cls, raw: str | None) -> int:
        """Numeric weight (high=3, medium=2, low=1); 0 for anything unknown."""
        try:
            return cls(raw).weight
        except ValueError:
            return 0


_PRIORITY_WEIGHTS = {Priority.HIGH: 3, Priority.MEDIUM: 2, Priority.LOW: 1}


class DateRange(StrEnum):
    ALL = "all"
    TODAY = "today"
    TOMORROW = "tomorrow"
    THIS_WEEK = "thisWeek"
    OVERDUE = "overdue"
    UPCOMING = "upcoming"

    @classmethod
    def from_raw(cls, raw: str | None) -> DateRange:
        if not raw:
            return cls.ALL
        try:
            return cls(raw)
        except ValueError:
            return cls.ALL


class SortBy(StrEnum):
    DUE_DATE = "dueDate"
    PRIORITY = "priority"
    CATEGORY = "category"
    CREATED = "created"
    TITLE = "title"
    COMPLETED = "completed"

    @classmethod
    def from_raw(cls, raw: str | None) -> SortBy | None:
        if not raw:
            return None
        try:
            return cls(raw)
        except ValueError:
            return None


class SortOrder(StrEnum):
    ASC = "asc"
    DESC = "desc"

    @classmethod
    def from_raw(cls, raw: str | None) -> SortOrder:
        return cls.DESC if (raw or "").strip().lower() == "desc" else cls.ASC


def _text(value: Any) -> str:
    return "" if value is None else str(value)


@dataclass(frozen=True, slots=True)
class Task:
    """
    Read-only snapshot of a task record owned by the data collaborator.

    due_date / created_at keep whatever the backend handed us (ISO string,
    POSIX seconds, datetime or None); use due_at / created_at_dt for the
    normalized local datetime.
    """

    id: str
    title: str = ""
    description: str = ""
    category: str = ""
    priority: str = ""
    due_date: Any = None
    completed: bool = False
    created_at: Any = None

    @property
    def due_at(self) -> datetime | None:
        return parse_timestamp(self.due_date)

    @property
    def created_at_dt(self) -> datetime | None:
        return parse_timestamp(self.created_at)

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> Task:
        """Build a Task from a backend row; missing keys degrade to empty values."""
        return cls(
            id=_text(record.get("id")),
            title=_text(record.get("title")),
            description=_text(record.get("description")),
            category=_text(record.get("category")),
            priority=_text(record.get("priority")).strip().lower(),
            due_date=record.get("due_date"),
            completed=bool(record.get("completed") or False),
            created_at=record.get("created_at"),
        )


def _frozen_strings(values: Iterable[str] | str | None) -> frozenset[str]:
    if values is None:
        return frozenset()
    if isinstance(values, str):
        values = [values]
    return frozenset(str(v) for v in values if v is not None and str(v) != "")


@dataclass(frozen=True, slots=True)
class FilterCriteria:
    """Caller-supplied search/filter/sort bundle for one query."""

    categories: frozenset[str] = field(default_factory=frozenset)
    priorities: frozenset[str] = field(default_factory=frozenset)
    date_range: DateRange = DateRange.ALL
    show_completed: bool = False
    sort_by: SortBy | None = None
    sort_order: SortOrder = SortOrder.ASC

    def __post_init__(self) -> None:
        # Accept plain lists/strings from callers.
        object.__setattr__(self, "categories", _frozen_strings(self.categories))
        object.__setattr__(self, "priorities", _frozen_strings(self.priorities))
        if not isinstance(self.date_range, DateRange):
            object.__setattr__(self, "date_range", DateRange.from_raw(self.date_range))
        if self.sort_by is not None and not isinstance(self.sort_by, SortBy):
            object.__setattr__(self, "sort_by", SortBy.from_raw(self.sort_by))
        if not isinstance(self.sort_order, SortOrder):
            object.__setattr__(self, "sort_order", SortOrder.from_raw(self.sort_order))


@dataclass(frozen=True, slots=True)
class TaskStats:
    total: int
    completed: int
    pending: int
    overdue: int
    due_today: int
    due_tomorrow: int
    completion_rate: int

    def as_dict(self) -> dict[str, int]:
        return {
            "total": self.total,
            "completed": self.completed,
            "pending": self.pending,
            "overdue": self.overdue,
            "dueToday": self.due_today,
            "dueTomorrow": self.due_tomorrow,
            "completionRate": self.completion_rate,
        }
