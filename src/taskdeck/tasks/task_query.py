# src/taskdeck/tasks/task_query.py

from __future__ import annotations

"""
Task query engine.

Pure functions over task snapshots: search, filter, sort, group, stats.
Nothing here mutates a Task or the input sequence, and nothing does I/O.

Every function that looks at the calendar takes an optional `now` so the day
boundaries can be pinned; by default it is the caller's local "now".

Tasks whose due date is missing or unparseable:
- sort last (both directions),
- are never overdue / today / tomorrow / this week / upcoming,
- land in the "later" group.
"""

import math
import unicodedata
from collections.abc import Callable, Iterable, Sequence
from datetime import datetime
from functools import cmp_to_key

from .dates import DayBoundaries
from .task_models import (
    DateRange,
    FilterCriteria,
    Priority,
    SortBy,
    SortOrder,
    Task,
    TaskStats,
)

Comparator = Callable[[Task, Task], int]

DATE_GROUP_KEYS = ("overdue", "today", "tomorrow", "thisWeek", "later")


# ---- search ----


def _matches(task: Task, needle: str) -> bool:
    return (
        needle in (task.title or "").lower()
        or needle in (task.description or "").lower()
        or needle in (task.category or "").lower()
    )


def search_tasks(tasks: Sequence[Task], query: str | None) -> Sequence[Task]:
    """
    Case-insensitive substring search over title, description and category.

    A blank query returns the input unchanged (same object).
    """
    needle = (query or "").strip().lower()
    if not needle:
        return tasks
    return [t for t in tasks if _matches(t, needle)]


# ---- single-task predicates ----


def is_task_overdue(task: Task, *, now: datetime | None = None) -> bool:
    if task.completed:
        return False
    return DayBoundaries.at(now).is_before_midnight_today(task.due_at)


def is_task_due_today(task: Task, *, now: datetime | None = None) -> bool:
    return DayBoundaries.at(now).is_same_day_as_today(task.due_at)


def is_task_due_tomorrow(task: Task, *, now: datetime | None = None) -> bool:
    return DayBoundaries.at(now).is_same_day_as_tomorrow(task.due_at)


# ---- date range ----


def filter_by_date_range(
    tasks: Iterable[Task],
    date_range: DateRange | str | None,
    *,
    now: datetime | None = None,
) -> list[Task]:
    rng = date_range if isinstance(date_range, DateRange) else DateRange.from_raw(date_range)
    if rng is DateRange.ALL:
        return list(tasks)

    b = DayBoundaries.at(now)

    if rng is DateRange.TODAY:
        return [t for t in tasks if b.is_same_day_as_today(t.due_at)]
    if rng is DateRange.TOMORROW:
        return [t for t in tasks if b.is_same_day_as_tomorrow(t.due_at)]
    if rng is DateRange.THIS_WEEK:
        return [t for t in tasks if b.is_within_week(t.due_at)]
    if rng is DateRange.OVERDUE:
        return [t for t in tasks if b.is_before_midnight_today(t.due_at) and not t.completed]
    # DateRange.UPCOMING: completion status is irrelevant here.
    return [t for t in tasks if b.is_on_or_after_midnight_today(t.due_at)]


# ---- sorting ----


def _sign(n: float) -> int:
    return (n > 0) - (n < 0)


def priority_tiebreak(a: Task, b: Task) -> int:
    """
    Priority comparator: weight(b) - weight(a).

    Under sort_order="asc" this puts high before medium before low, and
    "desc" flips it to low first. Unknown priorities weigh 0.
    """
    return Priority.weight_of(b.priority) - Priority.weight_of(a.priority)


def _text_key(s: str) -> tuple[str, str, str]:
    # Base letters first ("Éclair" next to "eclair"), then accents, then raw text.
    decomposed = unicodedata.normalize("NFKD", s)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return base.casefold(), decomposed.casefold(), s


def _compare_text(x: str | None, y: str | None) -> int:
    kx, ky = _text_key(x or ""), _text_key(y or "")
    return (kx > ky) - (kx < ky)


def _compare_dt(x: datetime | None, y: datetime | None) -> int:
    # Only called on comparable values; sort_tasks moves the rest to the tail.
    return _sign((x - y).total_seconds())  # type: ignore[operator]


_COMPARATORS: dict[SortBy, Comparator] = {
    SortBy.DUE_DATE: lambda a, b: _compare_dt(a.due_at, b.due_at),
    SortBy.PRIORITY: priority_tiebreak,
    SortBy.CATEGORY: lambda a, b: _compare_text(a.category, b.category),
    SortBy.CREATED: lambda a, b: _compare_dt(a.created_at_dt, b.created_at_dt),
    SortBy.TITLE: lambda a, b: _compare_text(a.title, b.title),
    SortBy.COMPLETED: lambda a, b: int(bool(a.completed)) - int(bool(b.completed)),
}

_TIMESTAMP_KEYS: dict[SortBy, Callable[[Task], datetime | None]] = {
    SortBy.DUE_DATE: lambda t: t.due_at,
    SortBy.CREATED: lambda t: t.created_at_dt,
}


def sort_tasks(
    tasks: Iterable[Task],
    sort_by: SortBy | str | None,
    sort_order: SortOrder | str = SortOrder.ASC,
) -> list[Task]:
    """
    Stable sort into a new list.

    Unknown sort_by keeps input order. For timestamp keys, tasks without a
    comparable timestamp are appended after the rest in input order,
    regardless of sort_order.
    """
    items = list(tasks)
    key = sort_by if isinstance(sort_by, SortBy) else SortBy.from_raw(sort_by)
    if key is None:
        return items

    order = sort_order if isinstance(sort_order, SortOrder) else SortOrder.from_raw(sort_order)
    descending = order is SortOrder.DESC

    tail: list[Task] = []
    ts_of = _TIMESTAMP_KEYS.get(key)
    if ts_of is not None:
        head = [t for t in items if ts_of(t) is not None]
        tail = [t for t in items if ts_of(t) is None]
        items = head

    # sorted(reverse=True) keeps equal elements in input order.
    ordered = sorted(items, key=cmp_to_key(_COMPARATORS[key]), reverse=descending)
    return ordered + tail


# ---- filtering ----


def filter_tasks(
    tasks: Iterable[Task],
    filters: FilterCriteria | None = None,
    search_query: str | None = "",
    *,
    now: datetime | None = None,
) -> list[Task]:
    """
    Apply, in order: search, category, priority, date range,
    completed exclusion, sort. Returns a new list.
    """
    criteria = filters or FilterCriteria()
    out: list[Task] = list(search_tasks(list(tasks), search_query))

    if criteria.categories:
        out = [t for t in out if t.category in criteria.categories]

    if criteria.priorities:
        out = [t for t in out if t.priority in criteria.priorities]

    if criteria.date_range is not DateRange.ALL:
        out = filter_by_date_range(out, criteria.date_range, now=now)

    if not criteria.show_completed:
        out = [t for t in out if not t.completed]

    if criteria.sort_by is not None:
        out = sort_tasks(out, criteria.sort_by, criteria.sort_order)

    return out


# ---- grouping ----


def group_tasks_by_date(
    tasks: Iterable[Task], *, now: datetime | None = None
) -> dict[str, list[Task]]:
    """
    Partition tasks into overdue / today / tomorrow / thisWeek / later.

    Each task lands in exactly one group. Overdue (incomplete and before
    today's midnight) wins over every other bucket.
    """
    groups: dict[str, list[Task]] = {k: [] for k in DATE_GROUP_KEYS}
    b = DayBoundaries.at(now)

    for task in tasks:
        due = task.due_at
        if b.is_before_midnight_today(due) and not task.completed:
            groups["overdue"].append(task)
        elif b.is_same_day_as_today(due):
            groups["today"].append(task)
        elif b.is_same_day_as_tomorrow(due):
            groups["tomorrow"].append(task)
        elif b.is_within_week(due):
            groups["thisWeek"].append(task)
        else:
            groups["later"].append(task)

    return groups


def group_tasks_by_category(tasks: Iterable[Task]) -> dict[str, list[Task]]:
    groups: dict[str, list[Task]] = {}
    for task in tasks:
        groups.setdefault(task.category or "", []).append(task)
    return groups


def group_tasks_by_priority(tasks: Iterable[Task]) -> dict[str, list[Task]]:
    """
    Fixed high / medium / low buckets.

    Tasks whose priority is none of the three are dropped from the result.
    """
    groups: dict[str, list[Task]] = {p.value: [] for p in (Priority.HIGH, Priority.MEDIUM, Priority.LOW)}
    for task in tasks:
        bucket = groups.get(task.priority)
        if bucket is not None:
            bucket.append(task)
    return groups


# ---- stats ----


def _percent(part: int, whole: int) -> int:
    if whole <= 0:
        return 0
    # Half rounds up (12.5 -> 13).
    return int(math.floor(100 * part / whole + 0.5))


def get_task_stats(tasks: Iterable[Task], *, now: datetime | None = None) -> TaskStats:
    items = list(tasks)
    b = DayBoundaries.at(now)

    total = len(items)
    completed = sum(1 for t in items if t.completed)
    overdue = sum(1 for t in items if not t.completed and b.is_before_midnight_today(t.due_at))
    due_today = sum(1 for t in items if not t.completed and b.is_same_day_as_today(t.due_at))
    due_tomorrow = sum(1 for t in items if not t.completed and b.is_same_day_as_tomorrow(t.due_at))

    return TaskStats(
        total=total,
        completed=completed,
        pending=total - completed,
        overdue=overdue,
        due_today=due_today,
        due_tomorrow=due_tomorrow,
        completion_rate=_percent(completed, total),
    )


def get_upcoming_tasks(
    tasks: Iterable[Task], limit: int | None = 5, *, now: datetime | None = None
) -> list[Task]:
    """
    Incomplete tasks due at or after the current instant, soonest first.

    A falsy limit returns everything.
    """
    b = DayBoundaries.at(now)
    upcoming = [t for t in tasks if not t.completed and b.is_after_now(t.due_at)]
    upcoming = sort_tasks(upcoming, SortBy.DUE_DATE, SortOrder.ASC)
    return upcoming[:limit] if limit else upcoming
