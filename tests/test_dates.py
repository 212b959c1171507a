# tests/test_dates.py

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from taskdeck.tasks.dates import DayBoundaries, parse_timestamp


def test_parse_passes_naive_datetimes_through() -> None:
    dt = datetime(2026, 3, 11, 9, 15)
    assert parse_timestamp(dt) is dt


def test_parse_date_is_midnight() -> None:
    assert parse_timestamp(date(2026, 3, 11)) == datetime(2026, 3, 11)


def test_parse_iso_strings() -> None:
    assert parse_timestamp("2026-03-11T09:15:00") == datetime(2026, 3, 11, 9, 15)
    assert parse_timestamp(" 2026-03-11 ") == datetime(2026, 3, 11)


def test_parse_aware_values_become_local_naive() -> None:
    aware = datetime(2026, 3, 11, 12, 0, tzinfo=timezone.utc)
    expected = aware.astimezone().replace(tzinfo=None)
    assert parse_timestamp(aware) == expected
    assert parse_timestamp("2026-03-11T12:00:00Z") == expected


def test_parse_epoch_seconds() -> None:
    local = datetime(2026, 3, 11, 9, 15)
    assert parse_timestamp(local.timestamp()) == local
    assert parse_timestamp(int(local.timestamp())) == local


@pytest.mark.parametrize("raw", [None, "", "   ", "tomorrow", True, object(), 1e20])
def test_parse_rejects_garbage(raw) -> None:
    assert parse_timestamp(raw) is None


def test_day_boundaries(now) -> None:
    b = DayBoundaries.at(now)
    assert b.today == datetime(2026, 3, 11)
    assert b.tomorrow == datetime(2026, 3, 12)
    assert b.week_end == datetime(2026, 3, 18)

    assert b.is_within_week(b.week_end)
    assert not b.is_within_week(b.week_end + timedelta(microseconds=1))
    assert b.is_on_or_after_midnight_today(b.today)
    assert not b.is_after_now(b.today)
    assert b.is_after_now(now)
    assert not b.is_before_midnight_today(None)
