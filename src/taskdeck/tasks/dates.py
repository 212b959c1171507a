# src/taskdeck/tasks/dates.py

from __future__ import annotations

"""
Day-boundary helpers shared by the query engine.

All boundaries are computed in the caller's local time, truncated to midnight.
Timestamps that cannot be parsed come back as None and every predicate below
treats None as "not comparable" (always False).
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Any

ONE_DAY = timedelta(days=1)
WEEK = timedelta(days=7)


def parse_timestamp(raw: Any) -> datetime | None:
    """
    Normalize a raw timestamp into a naive local datetime.

    Accepts datetime, date, POSIX seconds (int/float) and ISO-8601 strings
    (a trailing "Z" is accepted). Aware values are converted to local time.
    """
    if raw is None or isinstance(raw, bool):
        return None

    if isinstance(raw, datetime):
        dt = raw
    elif isinstance(raw, date):
        return datetime.combine(raw, time.min)
    elif isinstance(raw, (int, float)):
        try:
            return datetime.fromtimestamp(float(raw))
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(raw, str):
        s = raw.strip()
        if not s:
            return None
        if s.endswith(("Z", "z")):
            s = s[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(s)
        except ValueError:
            return None
    else:
        return None

    if dt.tzinfo is not None:
        dt = dt.astimezone().replace(tzinfo=None)
    return dt


def start_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


@dataclass(frozen=True, slots=True)
class DayBoundaries:
    """Midnight anchors derived from one "now"."""

    now: datetime
    today: datetime
    tomorrow: datetime
    week_end: datetime

    @classmethod
    def at(cls, now: datetime | None = None) -> DayBoundaries:
        if now is None:
            now = datetime.now()
        elif now.tzinfo is not None:
            now = now.astimezone().replace(tzinfo=None)
        today = start_of_day(now)
        return cls(now=now, today=today, tomorrow=today + ONE_DAY, week_end=today + WEEK)

    # ---- predicates ----

    def is_same_day_as_today(self, due: datetime | None) -> bool:
        return due is not None and start_of_day(due) == self.today

    def is_same_day_as_tomorrow(self, due: datetime | None) -> bool:
        return due is not None and start_of_day(due) == self.tomorrow

    def is_before_midnight_today(self, due: datetime | None) -> bool:
        return due is not None and due < self.today

    def is_within_week(self, due: datetime | None) -> bool:
        # Both ends inclusive: [today 00:00, today+7d 00:00].
        return due is not None and self.today <= due <= self.week_end

    def is_on_or_after_midnight_today(self, due: datetime | None) -> bool:
        """Day-truncated "upcoming": anything due today or later."""
        return due is not None and due >= self.today

    def is_after_now(self, due: datetime | None) -> bool:
        """
        Time-of-day "upcoming": due at or after the current instant.

        Not day-truncated: a task due earlier today passes
        is_on_or_after_midnight_today but fails this one.
        """
        return due is not None and due >= self.now
