# tests/test_stats.py

from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from taskflow.views.stats import (
    analytics_summary,
    category_breakdown,
    completion_rate,
    dashboard_summary,
    monthly_tasks,
    percent,
    priority_breakdown,
    recent_tasks,
    status_breakdown,
    task_counts,
    weekly_productivity,
)

from .helpers import make_task


@pytest.mark.parametrize(
    "statuses",
    [
        [],
        ["pending"],
        ["completed", "completed", "in-progress"],
        ["pending", "in-progress", "completed", "pending", "bogus"],
    ],
)
def test_status_counts_add_up(statuses) -> None:
    items = [make_task(status=s) for s in statuses]
    c = task_counts(items)
    assert c.completed + c.pending + c.in_progress == c.total == len(items)
    assert 0 <= c.completion_rate <= 100
    assert isinstance(c.completion_rate, int)


@pytest.mark.parametrize(
    ("completed", "total", "expected"),
    [(0, 0, 0), (0, 3, 0), (1, 3, 33), (2, 3, 67), (1, 2, 50), (1, 8, 13), (3, 3, 100)],
)
def test_completion_rate_rounding(completed, total, expected) -> None:
    items = [make_task(status="completed") for _ in range(completed)]
    items += [make_task(status="pending") for _ in range(total - completed)]
    assert completion_rate(items) == expected
    assert percent(completed, total) == expected


def test_breakdowns() -> None:
    items = [
        make_task(priority="high", category="work", status="completed"),
        make_task(priority="low", category="home"),
        make_task(priority="high", category="work", status="in-progress"),
    ]
    assert priority_breakdown(items) == {"high": 2, "medium": 0, "low": 1}
    assert priority_breakdown([]) == {"high": 0, "medium": 0, "low": 0}
    assert status_breakdown(items) == {"pending": 1, "in-progress": 1, "completed": 1}
    assert list(category_breakdown(items).items()) == [("work", 2), ("home", 1)]
    assert category_breakdown([]) == {}


def test_monthly_tasks_uses_month_and_year() -> None:
    now = datetime(2024, 3, 20, 12, 0, tzinfo=timezone.utc)
    march = make_task(createdAt="2024-03-01T00:00:00.000Z")
    february = make_task(createdAt="2024-02-29T23:59:59.999Z")
    last_year = make_task(createdAt="2023-03-15T10:00:00.000Z")
    broken = make_task(createdAt="yesterday")

    assert monthly_tasks([march, february, last_year, broken], now=now) == [march]


def test_weekly_productivity_last_seven_days_oldest_first() -> None:
    today = date(2024, 3, 15)
    items = [
        make_task(status="completed", updatedAt="2024-03-15T08:00:00.000Z"),
        make_task(status="completed", updatedAt="2024-03-15T23:00:00.000Z"),
        make_task(status="completed", updatedAt="2024-03-09T00:00:00.000Z"),
        make_task(status="completed", updatedAt="2024-03-08T23:59:59.000Z"),
        make_task(status="pending", updatedAt="2024-03-14T10:00:00.000Z"),
    ]

    week = weekly_productivity(items, today=today)

    assert [d.day for d in week] == [date(2024, 3, d) for d in range(9, 16)]
    assert [d.completed for d in week] == [1, 0, 0, 0, 0, 0, 2]
    assert all(d.completed == 0 for d in weekly_productivity([], today=today))


# POSIX rule for US Eastern time; needs no tz database.
NEW_YORK = "EST5EDT,M3.2.0,M11.1.0"


def test_weekly_productivity_buckets_by_local_day(local_tz) -> None:
    local_tz(NEW_YORK)
    # 22:00 on March 15 in New York (EDT, UTC-4)
    late_evening = make_task(status="completed", updatedAt="2024-03-16T02:00:00.000Z")

    week = weekly_productivity([late_evening], today=date(2024, 3, 16))

    by_day = {d.day: d.completed for d in week}
    assert by_day[date(2024, 3, 15)] == 1
    assert by_day[date(2024, 3, 16)] == 0


def test_monthly_tasks_uses_local_month(local_tz) -> None:
    local_tz(NEW_YORK)
    now = datetime(2024, 3, 20, 16, 0, tzinfo=timezone.utc)
    # Feb 29 22:00 EST and Mar 31 22:00 EDT
    utc_march_local_february = make_task(createdAt="2024-03-01T03:00:00.000Z")
    utc_april_local_march = make_task(createdAt="2024-04-01T02:00:00.000Z")

    assert monthly_tasks([utc_march_local_february, utc_april_local_march], now=now) == [utc_april_local_march]


def test_analytics_week_ends_on_local_today(local_tz) -> None:
    local_tz(NEW_YORK)
    # 01:00 UTC on March 16 is still March 15 in New York
    summary = analytics_summary([], now=datetime(2024, 3, 16, 1, 0, tzinfo=timezone.utc))

    assert summary.week[-1].day == date(2024, 3, 15)


def test_recent_tasks_sorted_without_mutation() -> None:
    items = [make_task(title=f"t{i}", updatedAt=f"2024-03-{10 + i:02d}T00:00:00.000Z") for i in range(7)]
    original = list(items)

    recent = recent_tasks(items)

    assert [t.title for t in recent] == ["t6", "t5", "t4", "t3", "t2"]
    assert items == original
    assert recent_tasks(items, limit=2) == [items[6], items[5]]


def test_summaries_on_empty_input() -> None:
    dash = dashboard_summary([])
    assert dash.counts.total == 0
    assert dash.counts.completion_rate == 0
    assert dash.recent == []

    summary = analytics_summary([], now=datetime(2024, 3, 15, tzinfo=timezone.utc))
    assert summary.monthly_created == 0
    assert all(s.percent == 0 for s in summary.statuses + summary.priorities)
    assert summary.categories == {}
    assert len(summary.week) == 7


def test_analytics_summary_shares() -> None:
    items = [
        make_task(status="completed", priority="high"),
        make_task(status="completed", priority="low"),
        make_task(status="pending", priority="low"),
    ]
    summary = analytics_summary(items, now=datetime(2024, 3, 15, tzinfo=timezone.utc))

    statuses = {s.label: (s.count, s.percent) for s in summary.statuses}
    assert statuses == {"pending": (1, 33), "in-progress": (0, 0), "completed": (2, 67)}
    assert summary.counts.completion_rate == 67
    assert summary.monthly_created == 3
